"""Source-line context with a caret under the offending column."""

from __future__ import annotations

from pathlib import Path


def render_caret(out: list[str], column: int) -> None:
    """Append ``column`` spaces followed by ``^`` to ``out``."""
    out.append(" " * max(column, 0) + "^")


def extract_from_buffer(
    buffer: str, start: int, current: int, last: int, column: int
) -> str:
    """Return the line of ``buffer`` holding ``current``, plus a caret line.

    ``start``/``last`` bound the valid window (``last`` exclusive). Only the
    window is read, so a lookahead buffer that does not hold the whole
    document still yields the line fragment it has.
    """
    current = min(max(current, start), last)

    line_start = start
    scan = current
    while scan > start:
        scan -= 1
        if buffer[scan] == "\n":
            line_start = scan + 1
            break

    line_end = buffer.find("\n", line_start, last)
    if line_end == -1:
        line_end = last

    out = [buffer[line_start:line_end], "\n"]
    render_caret(out, column)
    return "".join(out)


def extract_from_file(
    path: str | Path, line_number: int, column: int, encoding: str = "utf-8"
) -> str:
    """Reopen ``path`` and return its 0-based line ``line_number`` plus a caret line.

    When the file is shorter than requested the last line read is used.
    Raises ``OSError`` if the file cannot be opened or read.
    """
    line = ""
    with Path(path).open("r", encoding=encoding, errors="replace") as handle:
        for _ in range(line_number + 1):
            next_line = handle.readline()
            if not next_line:
                break
            line = next_line

    out = [line.rstrip("\n"), "\n"]
    render_caret(out, column)
    return "".join(out)


def extract_from_text(text: str, line_number: int, column: int) -> str:
    """Like ``extract_from_file``, for source text that is already in memory."""
    lines = text.replace("\r\n", "\n").split("\n")
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    out = [lines[min(line_number, len(lines) - 1)], "\n"]
    render_caret(out, column)
    return "".join(out)
