"""Slicer comment patterns and the first-match field scanner.

Each recognised field is described by one or more :class:`FieldPattern`
rows in :data:`PATTERNS`. Supporting another slicer dialect means adding a
row, not touching :func:`match_fields`.

Handles PrusaSlicer, OrcaSlicer/BambuStudio, Cura and Simplify3D comments.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field, fields

from slicemeta.duration import clean_duration_text, normalize_duration

log = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


@dataclass
class RawFields:
    """Raw per-field values collected from gcode comments."""

    time: str | None = None
    weights: list[str] = field(default_factory=list)
    lengths: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)
    densities: list[str] = field(default_factory=list)
    diameters: list[str] = field(default_factory=list)
    layer_height: str | None = None
    infill: str | None = None
    nozzle_diameter: str | None = None
    printer_model: str | None = None


@dataclass(frozen=True)
class FieldPattern:
    field: str  # RawFields attribute filled by this pattern
    regex: re.Pattern[str]
    extract: Callable[[re.Match[str]], str | list[str] | None]
    priority: int = 0  # lower is tried first on the same line


def parse_number(text: str) -> float | None:
    """Read the leading number of *text* (``"12.5g"`` -> 12.5), or ``None``."""
    m = _LEADING_NUMBER.match(text.strip())
    if m is None:
        return None
    return float(m.group(0))


def split_values(value: str) -> list[str]:
    """Split a per-filament list; ``;`` wins over ``,`` as separator."""
    separator = ";" if ";" in value else ","
    return [v.strip() for v in value.split(separator) if v.strip()]


def _text(m: re.Match[str]) -> str:
    return m.group(1).strip()


def _values(m: re.Match[str]) -> list[str]:
    return split_values(m.group(1))


def _duration_text(m: re.Match[str]) -> str:
    return clean_duration_text(m.group(1))


def _duration_seconds(m: re.Match[str]) -> str:
    return normalize_duration(int(m.group(1)))


def _meters_to_mm(m: re.Match[str]) -> list[str]:
    lengths = []
    for value in split_values(m.group(1)):
        meters = parse_number(value)
        if meters is not None:
            lengths.append(f"{meters * 1000:.2f}")
    return lengths


def _pattern(
    name: str,
    regex: str,
    extract: Callable[[re.Match[str]], str | list[str] | None],
    priority: int = 0,
) -> FieldPattern:
    return FieldPattern(name, re.compile(regex, re.IGNORECASE), extract, priority)


PATTERNS: tuple[FieldPattern, ...] = (
    # "estimated printing time (normal mode) = 1h 2m", "model printing time: 4m; total
    # estimated time: 10m", "Build time: 1 hours 2 minutes". Needs "estimated",
    # "printing" or "build" before "time" so min_layer_time settings never match.
    _pattern(
        "time",
        r";\s*(?:total |model )?(?:estimated (?:printing |build )?|printing |build )"
        r"time\b.*[:=]\s*(.*)",
        _duration_text,
    ),
    _pattern("time", r";TIME:(\d+)", _duration_seconds, priority=1),  # Cura
    _pattern(
        "weights",
        r";\s*(?:total )?filament (?:used|weight) \[g\]\s*[:=]\s*(.*)",
        _values,
    ),
    _pattern(
        "lengths",
        r";\s*(?:total )?filament (?:used|length) \[mm\]\s*[:=]\s*(.*)",
        _values,
    ),
    _pattern("lengths", r";\s*filament used:\s*(.*)m", _meters_to_mm, priority=1),  # Cura
    _pattern("types", r";\s*filament_type\s*[:=]\s*(.*)", _values),
    _pattern("colors", r";\s*filament_colou?r\s*[:=]\s*(.*)", _values),
    _pattern("densities", r";\s*filament_density\s*[:=]\s*(.*)", _values),
    _pattern("diameters", r";\s*filament_diameter\s*[:=]\s*(.*)", _values),
    _pattern("layer_height", r";\s*layer_height\s*[:=]\s*([\d.]+)", _text),
    _pattern(
        "infill",
        r";\s*(?:sparse_infill|infill|fill)_density\s*[:=]\s*(\d+%?)",
        _text,
    ),
    _pattern(
        "nozzle_diameter",
        r";\s*(?:extruder_)?nozzle_diameter\s*[:=]\s*([\d.]+)",
        _text,
    ),
    _pattern("printer_model", r";\s*printer_model\s*[:=]\s*(.*)", _text),
)


def match_fields(
    lines: Iterable[str],
    patterns: Sequence[FieldPattern] = PATTERNS,
    *,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> RawFields:
    """Scan comment lines and collect the first value found for each field.

    Only lines starting with ``;`` are inspected. A field is settled by the
    first line that yields a non-empty value; later restatements are ignored.
    """
    logger = logger or log
    ordered = sorted(patterns, key=lambda p: p.priority)
    wanted = {p.field for p in ordered}
    unknown = wanted - {f.name for f in fields(RawFields)}
    if unknown:
        raise ValueError(f"Patterns target unknown fields: {sorted(unknown)}")

    found: dict[str, str | list[str]] = {}
    for line in lines:
        stripped = line.strip()
        if not stripped.startswith(";"):
            continue

        for pattern in ordered:
            if pattern.field in found:
                continue
            m = pattern.regex.search(stripped)
            if m is None:
                continue
            value = pattern.extract(m)
            if value:
                found[pattern.field] = value
                logger.debug("Found %s: %s", pattern.field, value)

        if len(found) == len(wanted):
            break

    return RawFields(**found)
