"""Bounded line window over large gcode text."""

from __future__ import annotations

MAX_SCAN_LINES = 20000
HEAD_LINES = 500  # global headers (PrusaSlicer, Bambu HEADER_BLOCK)
TAIL_LINES = 19500  # summary/config block after the toolpath


def bounded_lines(
    text: str,
    *,
    max_lines: int = MAX_SCAN_LINES,
    head: int = HEAD_LINES,
    tail: int = TAIL_LINES,
) -> list[str]:
    """Split *text* into lines, keeping only the head and tail of long files.

    Files with more than *max_lines* lines are reduced to their first *head*
    and last *tail* lines. This is a heuristic: slicers put their summary
    comments at the start or the end of the file, so a metadata block that
    sits in the middle of a very long file is not seen and its fields are
    reported as absent.
    """
    lines = text.splitlines()
    if len(lines) <= max_lines:
        return lines
    return lines[:head] + lines[len(lines) - tail:]
