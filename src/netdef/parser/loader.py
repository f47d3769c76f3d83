"""YAML loader with position tracking for rich error reporting."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import MarkedYAMLError, YAMLError
from ruamel.yaml.parser import ParserError, RoundTripParser
from ruamel.yaml.scanner import ScannerError

from netdef.models.errors import (
    ErrorHandle,
    ErrorKind,
    FormattedError,
    NetworkDefinitionError,
    PositionMark,
)
from netdef.parser.reporting import UNNAMED_FILE, report_semantic_error, report_syntax_error
from netdef.parser.scan_state import END_OF_INPUT, ParserState, ScanState

logger = logging.getLogger("netdef.parser")


@dataclass(frozen=True)
class _Snapshot:
    buffer: str
    pointer: int
    token_available: bool
    parser_state: ParserState

    @property
    def lookahead(self) -> str:
        if 0 <= self.pointer < len(self.buffer):
            return self.buffer[self.pointer]
        return END_OF_INPUT


def _line_of(buffer: str, pointer: int) -> int:
    return buffer.count("\n", 0, pointer)


def _mark_position(mark: Any, fallback: str) -> tuple[str, int]:
    """Window and position of a ruamel mark; string marks carry their buffer."""
    buffer = getattr(mark, "buffer", None)
    pointer = getattr(mark, "pointer", None)
    if buffer is None or pointer is None:
        return fallback, mark.index
    return buffer, pointer


class _SnapshotParser(RoundTripParser):
    """Round-trip parser that records the scanner window before it is reset.

    ``YAML.load`` disposes the parser and resets reader and scanner in a
    ``finally`` block, so the window has to be captured here, first.
    """

    snapshot: _Snapshot | None = None

    def dispose(self) -> None:
        reader = self.loader.reader
        self.snapshot = _Snapshot(
            buffer=reader.buffer,
            pointer=reader.pointer,
            token_available=bool(self.scanner.tokens),
            parser_state=ParserState.from_callable(self.state),
        )
        super().dispose()


@dataclass
class SourceMap:
    """Maps YAML key paths to their 0-based source positions."""

    _positions: dict[str, PositionMark] = field(default_factory=dict)

    def add(self, path: str, mark: PositionMark) -> None:
        self._positions[path] = mark

    def get(self, path: str) -> PositionMark | None:
        return self._positions.get(path)

    @property
    def paths(self) -> list[str]:
        return list(self._positions.keys())


class TrackedLoader:
    """Loads network definitions and reports failures with source context.

    Uses ruamel.yaml which preserves line/column info on every parsed node.
    The path of the last loaded file is kept as ``current_path`` so semantic
    errors found later can reopen it for context.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._yaml = YAML()
        self._yaml.Parser = _SnapshotParser
        self._encoding = encoding
        self._source_text: str | None = None
        self.current_path: str | None = None
        self.source_map = SourceMap()

    # -- public loading API --------------------------------------------------

    def load(self, path: str | Path) -> tuple[dict[str, Any], SourceMap]:
        """Load a YAML file and return parsed dict + source position map."""
        path = Path(path)
        with path.open("r", encoding=self._encoding) as handle:
            content = handle.read()
        self.current_path = str(path)
        self._source_text = None
        return self._parse(content, str(path))

    def load_string(
        self, content: str, filename: str | None = None
    ) -> tuple[dict[str, Any], SourceMap]:
        """Load YAML from a string.

        ``filename`` is only used in messages. Semantic errors take their
        context line from ``content``, never from a file of that name.
        """
        self.current_path = filename
        self._source_text = content
        return self._parse(content, filename)

    def semantic_error(self, target: str | PositionMark | None, message: str) -> None:
        """Raise a located ``NetworkDefinitionError`` for a parsed node.

        ``target`` is a key path from the last ``SourceMap``, a mark, or
        ``None`` when the location is unknown.
        """
        mark = self.source_map.get(target) if isinstance(target, str) else target
        error = ErrorHandle()
        report_semantic_error(
            self.current_path,
            mark,
            message,
            error,
            encoding=self._encoding,
            source_text=self._source_text,
        )
        error.raise_if_set()

    # -- internals -----------------------------------------------------------

    def _parse(
        self, content: str, source_name: str | None
    ) -> tuple[dict[str, Any], SourceMap]:
        self.source_map = SourceMap()
        try:
            data = self._yaml.load(content)
        except YAMLError as exc:
            error = ErrorHandle()
            self._report_yaml_error(exc, source_name, error)
            raise NetworkDefinitionError(error.take()) from exc
        if data is None:
            return {}, self.source_map
        self._extract_positions(data, "", self.source_map)
        return self._to_plain_dict(data), self.source_map

    def _report_yaml_error(
        self, exc: YAMLError, source_name: str | None, error: ErrorHandle
    ) -> None:
        snapshot = self._yaml.parser.snapshot
        if not isinstance(exc, MarkedYAMLError):
            self._report_unlocated(str(exc), source_name, error)
            return
        mark = exc.problem_mark or exc.context_mark
        problem = exc.problem or exc.context or "unknown error"
        if snapshot is None or mark is None:
            self._report_unlocated(problem, source_name, error)
            return

        # Scanner and parser errors are raised at the reader position, so the
        # lookahead there is meaningful. Composer and constructor errors come
        # after scanning and only their mark locates the failure.
        scanning = isinstance(exc, (ScannerError, ParserError))
        buffer, pointer = snapshot.buffer, snapshot.pointer
        if not scanning or _line_of(buffer, pointer) != mark.line:
            buffer, pointer = _mark_position(mark, buffer)

        state = ScanState.from_window(
            buffer,
            pointer,
            token_available=snapshot.token_available,
            parser_state=snapshot.parser_state,
            problem=problem,
            problem_mark=PositionMark(line=mark.line, column=mark.column),
            lookahead=snapshot.lookahead,
        )
        report_syntax_error(state, source_name, error, classify=scanning)

    @staticmethod
    def _report_unlocated(
        reason: str, source_name: str | None, error: ErrorHandle
    ) -> None:
        message = f"{source_name or UNNAMED_FILE}: Invalid YAML: {reason}"
        logger.debug("Syntax error without location: %s", message)
        error.set(FormattedError(kind=ErrorKind.INVALID_YAML, message=message))

    def _extract_positions(self, data: Any, prefix: str, source_map: SourceMap) -> None:
        """Recursively record each key's and item's position from ruamel.yaml nodes."""
        if isinstance(data, CommentedMap):
            for key in data:
                key_path = f"{prefix}.{key}" if prefix else str(key)
                try:
                    line, col = data.lc.key(key)
                except (AttributeError, KeyError, TypeError):
                    line, col = data.lc.line, data.lc.col
                source_map.add(key_path, PositionMark(line=line, column=col))
                self._extract_positions(data[key], key_path, source_map)
        elif isinstance(data, CommentedSeq):
            for i, item in enumerate(data):
                item_path = f"{prefix}[{i}]"
                try:
                    line, col = data.lc.item(i)
                except (AttributeError, KeyError, TypeError):
                    pass
                else:
                    source_map.add(item_path, PositionMark(line=line, column=col))
                self._extract_positions(item, item_path, source_map)

    def _to_plain_dict(self, data: Any) -> dict[str, Any]:
        """Convert ruamel.yaml CommentedMap/Seq to plain Python dict/list."""
        if isinstance(data, dict):
            return {str(k): self._to_plain_value(v) for k, v in data.items()}
        return {}

    def _to_plain_value(self, data: Any) -> Any:
        if isinstance(data, dict):
            return {str(k): self._to_plain_value(v) for k, v in data.items()}
        if isinstance(data, list):
            return [self._to_plain_value(item) for item in data]
        return data
