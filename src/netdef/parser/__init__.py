"""YAML parsing with located error reporting for network definitions."""

from netdef.parser.context import (
    extract_from_buffer,
    extract_from_file,
    extract_from_text,
    render_caret,
)
from netdef.parser.loader import SourceMap, TrackedLoader
from netdef.parser.reporting import report_semantic_error, report_syntax_error
from netdef.parser.scan_state import ParserState, ScanState

__all__ = [
    "ParserState",
    "ScanState",
    "SourceMap",
    "TrackedLoader",
    "extract_from_buffer",
    "extract_from_file",
    "extract_from_text",
    "render_caret",
    "report_semantic_error",
    "report_syntax_error",
]
