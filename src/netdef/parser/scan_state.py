"""Tokenizer state captured at the moment a parse fails."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from netdef.models.errors import PositionMark

END_OF_INPUT = "\0"


class ParserState(StrEnum):
    """Parser sub-states the error classifier distinguishes."""

    BLOCK_MAPPING_KEY = "block_mapping_key"
    BLOCK_MAPPING_VALUE = "block_mapping_value"
    BLOCK_SEQUENCE_ENTRY = "block_sequence_entry"
    FLOW_MAPPING_KEY = "flow_mapping_key"
    FLOW_SEQUENCE_ENTRY = "flow_sequence_entry"
    DOCUMENT_START = "document_start"
    DOCUMENT_END = "document_end"
    OTHER = "other"

    @classmethod
    def from_callable(cls, state: Any) -> ParserState:
        """Map a ruamel.yaml parser state method (``parse_<name>``) to a member."""
        name = getattr(state, "__name__", "")
        name = name.removeprefix("parse_")
        try:
            return cls(name)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class ScanState:
    """Read-only view of the scanner and its lookahead window.

    ``buffer[start:last]`` is the window of source text the reader holds;
    ``current`` is the reader's position inside it.
    """

    lookahead: str
    token_available: bool
    parser_state: ParserState
    problem: str
    problem_mark: PositionMark
    buffer: str
    start: int
    current: int
    last: int

    @classmethod
    def from_window(
        cls,
        buffer: str,
        pointer: int,
        *,
        token_available: bool,
        parser_state: ParserState,
        problem: str,
        problem_mark: PositionMark,
        lookahead: str | None = None,
    ) -> ScanState:
        """Build a state from a reader buffer, dropping its trailing NUL sentinel.

        ``lookahead`` defaults to the character at ``pointer``; pass it when the
        window is positioned away from where the reader stopped.
        """
        last = len(buffer)
        if buffer.endswith(END_OF_INPUT):
            last -= 1
        current = min(max(pointer, 0), last)
        if lookahead is None:
            lookahead = buffer[current] if current < last else END_OF_INPUT
        return cls(
            lookahead=lookahead,
            token_available=token_available,
            parser_state=parser_state,
            problem=problem,
            problem_mark=problem_mark,
            buffer=buffer,
            start=0,
            current=current,
            last=last,
        )
