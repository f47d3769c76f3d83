"""Classify parse failures and render them as located error messages.

Both entry points fill the caller's ``ErrorHandle`` and return ``False`` so
a caller can write ``return report_semantic_error(...)`` from any check
that signals success with a boolean.
"""

from __future__ import annotations

import logging
from pathlib import Path

from netdef.models.errors import ErrorHandle, ErrorKind, FormattedError, PositionMark
from netdef.parser.context import extract_from_buffer, extract_from_file, extract_from_text
from netdef.parser.scan_state import END_OF_INPUT, ParserState, ScanState

logger = logging.getLogger("netdef.parser")

UNNAMED_FILE = "(unnamed file)"
DEFINITION_ERROR = "Error in network definition"


def _syntax_reason(state: ScanState) -> str:
    if state.lookahead == "\t":
        return "tabs are not allowed for indent"
    # A space or end of input with nothing queued is what an alias leaves
    # behind in the scanner. This is a heuristic, not an alias token check.
    if state.lookahead in (" ", END_OF_INPUT) and not state.token_available:
        return "aliases are not supported"
    if state.parser_state is ParserState.BLOCK_MAPPING_KEY:
        return "inconsistent indentation"
    return state.problem


def report_syntax_error(
    state: ScanState,
    source_name: str | None,
    error: ErrorHandle,
    *,
    classify: bool = True,
) -> bool:
    """Report a tokenizer failure as ``INVALID_YAML`` with the offending line.

    With ``classify=False`` the lookahead rules are skipped and the
    tokenizer's problem text is used as is, for failures detected after
    scanning (duplicate keys, undefined aliases).
    """
    context = extract_from_buffer(
        state.buffer,
        state.start,
        state.current,
        state.last,
        state.problem_mark.column,
    )
    reason = _syntax_reason(state) if classify else state.problem
    message = (
        f"{source_name or UNNAMED_FILE}:"
        f"{state.problem_mark.line + 1}:{state.problem_mark.column + 1}: "
        f"Invalid YAML: {reason}:\n{context}"
    )
    logger.debug("Syntax error: %s", message)
    error.set(FormattedError(kind=ErrorKind.INVALID_YAML, message=message))
    return False


def report_semantic_error(
    source_path: str | Path | None,
    mark: PositionMark | None,
    message: str,
    error: ErrorHandle,
    *,
    encoding: str = "utf-8",
    source_text: str | None = None,
) -> bool:
    """Report a validation failure on a parsed document.

    With both a node mark and a source path, the node's line is reread from
    the file and shown with a caret. If the file cannot be reopened the
    location is still reported, without the context line. Passing
    ``source_text`` takes the line from that text instead of the file.
    """
    if mark is not None and source_path is not None:
        text = (
            f"{source_path}:{mark.line + 1}:{mark.column + 1}: "
            f"{DEFINITION_ERROR}: {message}"
        )
        try:
            if source_text is not None:
                context = extract_from_text(source_text, mark.line, mark.column)
            else:
                context = extract_from_file(source_path, mark.line, mark.column, encoding)
        except OSError as exc:
            logger.warning("Cannot reopen %s for error context: %s", source_path, exc)
        else:
            text = f"{text}\n{context}"
        kind = ErrorKind.INVALID_CONFIG
    elif source_path is not None:
        text = f"{source_path}: {DEFINITION_ERROR}: {message}"
        kind = ErrorKind.CONFIG_VALIDATION
    else:
        text = f"{DEFINITION_ERROR}: {message}"
        kind = ErrorKind.CONFIG_GENERIC

    logger.debug("Semantic error (%s): %s", kind.name, text)
    error.set(FormattedError(kind=kind, message=text))
    return False
