"""Print duration formatting and parsing."""

from __future__ import annotations

import re

ZERO_DURATION = "0s"

_MINUTES = r"(\d+)m(?:in(?:ute)?s?)?"
_SECONDS = r"(\d+)s(?:ec(?:ond)?s?)?"
_FILENAME_DURATION = re.compile(
    rf"(?:(\d+)h(?:{_MINUTES})?(?:{_SECONDS})?|(?:{_MINUTES})(?:{_SECONDS})?)(?![a-z\d])",
    re.IGNORECASE,
)
_PRINT_FILE_SUFFIX = re.compile(r"(?:\.(?:gcode|gco|g|bgcode|3mf|ufp))+$", re.IGNORECASE)


def normalize_duration(seconds: int) -> str:
    """Format a number of seconds as ``"1h 2m"`` or ``"2m 5s"``.

    When there are hours, leftover seconds round the minutes up so a non-zero
    remainder is never dropped.
    """
    if seconds < 0:
        raise ValueError(f"duration must be >= 0, got {seconds}")
    if seconds == 0:
        return ZERO_DURATION

    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)

    if hours:
        if secs:
            minutes += 1
        if minutes == 60:
            hours, minutes = hours + 1, 0
        parts = [f"{hours}h"]
        if minutes:
            parts.append(f"{minutes}m")
    else:
        parts = []
        if minutes:
            parts.append(f"{minutes}m")
        if secs:
            parts.append(f"{secs}s")
    return " ".join(parts)


def clean_duration_text(raw: str) -> str:
    """Light cleanup of a slicer-formatted duration (``"= 1h 7m 32s"``)."""
    return re.sub(r"[=:]", "", raw).strip()


def duration_to_seconds(text: str) -> int | None:
    """Convert ``"1d 2h 7m 32s"``, ``"2h30m"`` or ``"6150"`` to seconds."""
    text = text.strip()
    if text.isdigit():
        return int(text)

    secs = 0
    found = False
    for pattern, scale in (
        (r"(\d+)\s*d", 86400),
        (r"(\d+)\s*h", 3600),
        (r"(\d+)\s*m(?!s)", 60),
        (r"(\d+)\s*s", 1),
    ):
        if m := re.search(pattern, text, re.IGNORECASE):
            secs += int(m.group(1)) * scale
            found = True
    return secs if found else None


def duration_from_filename(path: str) -> str | None:
    """Recover a duration like ``2h30m`` embedded in a file name.

    Only the last path component is searched, with print-file extensions
    removed (so ``part.3mf`` does not read as three minutes). Spelled-out
    units such as ``45min`` are accepted and returned in the short form.
    """
    name = re.split(r"[\\/]", path)[-1]
    name = _PRINT_FILE_SUFFIX.sub("", name)
    m = _FILENAME_DURATION.search(name)
    if m is None:
        return None
    hours, minutes, seconds = m.group(1), m.group(2) or m.group(4), m.group(3) or m.group(5)
    return "".join(
        f"{value}{unit}" for value, unit in ((hours, "h"), (minutes, "m"), (seconds, "s")) if value
    )
