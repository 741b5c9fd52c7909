"""Turn slicer output (gcode text or a sliced 3MF) into :class:`PrintMetadata`.

Usage::

    from slicemeta.extract import extract_print_metadata

    meta = extract_print_metadata(Path("benchy.gcode.3mf").read_bytes(), "benchy.gcode.3mf")
    print(meta.print_duration, meta.total_filament_weight)

The call is a pure function of its input: it does no file or network I/O and
keeps no state between calls, so independent calls may run in parallel.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace

from slicemeta.archive import (
    ArchiveReader,
    PlateSummary,
    ZipArchiveReader,
    plate_number,
    read_gcode,
    read_plate_summary,
)
from slicemeta.config import ExtractorConfig
from slicemeta.dialects import PATTERNS, RawFields, match_fields, parse_number
from slicemeta.duration import duration_from_filename, duration_to_seconds, normalize_duration
from slicemeta.filaments import aggregate_filaments
from slicemeta.models import PrintMetadata, PrintSettings
from slicemeta.scanner import bounded_lines

log = logging.getLogger(__name__)

ZIP_SIGNATURE = b"PK\x03\x04"
ARCHIVE_SUFFIX = ".3mf"


def is_archive(content: bytes | str, source_path: str | None = None) -> bool:
    """Guess whether *content* is a 3MF archive rather than gcode text."""
    if isinstance(content, str):
        return False
    if source_path and source_path.lower().endswith(ARCHIVE_SUFFIX):
        return True
    return content[:4] == ZIP_SIGNATURE


def extract_print_metadata(
    content: bytes | str,
    source_path: str | None = None,
    *,
    archive: bool | None = None,
    config: ExtractorConfig | None = None,
    reader: Callable[[bytes], ArchiveReader] = ZipArchiveReader,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> PrintMetadata:
    """Extract print metadata from gcode text or a sliced 3MF archive.

    :param content: gcode text/bytes, or the bytes of a ``.3mf`` archive.
    :param source_path: original file name; only used to recover a duration
        from names like ``vase_2h30m.gcode`` and passed through to the result.
    :param archive: force archive handling on/off; guessed when ``None``.
    :param logger: where debug output goes (defaults to this module's logger).
    :raises ArchiveEntryNotFound: archive input without embedded gcode.
    :raises ArchiveCorrupt: archive input that can't be decompressed.

    Missing fields never raise; they are left empty in the result.
    """
    config = config or ExtractorConfig()
    logger = logger or log
    if archive is None:
        archive = is_archive(content, source_path)

    summary: PlateSummary | None = None
    if archive:
        if isinstance(content, str):
            raise TypeError("archive content must be bytes")
        zf = reader(content)
        entry, text = read_gcode(zf)
        summary = read_plate_summary(zf, plate_number(entry) or 1)
    elif isinstance(content, bytes):
        text = content.decode("utf-8", errors="replace")
    else:
        text = content

    lines = bounded_lines(
        text,
        max_lines=config.scan.max_lines,
        head=config.scan.head_lines,
        tail=config.scan.tail_lines,
    )
    logger.debug("Scanning %d lines", len(lines))

    raw = match_fields(lines, PATTERNS, logger=logger)
    if summary is not None:
        raw = _fill_from_summary(raw, summary)

    filaments, total_weight = aggregate_filaments(raw, config.filament)

    duration = raw.time
    if not duration and source_path:
        duration = duration_from_filename(source_path)
        if duration:
            logger.debug("Recovered duration from file name: %s", duration)
        else:
            logger.debug("No duration pattern in file name %s", source_path)

    settings = PrintSettings(
        layer_height=raw.layer_height,
        infill=raw.infill,
        nozzle_diameter=raw.nozzle_diameter,
        printer_model=raw.printer_model,
        primary_material=raw.types[0] if raw.types else None,
    )
    return PrintMetadata(
        print_duration=duration or None,
        print_duration_seconds=duration_to_seconds(duration) if duration else None,
        filaments=tuple(filaments),
        total_filament_weight=total_weight,
        source_file_path=source_path,
        print_settings=settings,
    )


def _fill_from_summary(raw: RawFields, summary: PlateSummary) -> RawFields:
    """Fill fields the gcode comments left empty from the 3MF plate summary."""
    fills: dict[str, object] = {}
    if not raw.time and summary.prediction_seconds is not None:
        fills["time"] = normalize_duration(summary.prediction_seconds)

    # Slot lists are only taken as a whole so they stay aligned with each other
    slots = summary.filaments
    if not (raw.weights or raw.lengths or raw.types or raw.colors):
        meters = [parse_number(f.used_m) for f in slots]
        if slots and all(m is not None for m in meters):
            fills["lengths"] = [f"{m * 1000:.2f}" for m in meters]
        if slots and all(f.used_g for f in slots):
            fills["weights"] = [f.used_g for f in slots]
        elif summary.weight_g and "lengths" not in fills:
            # The plate weight is a total; with per-slot lengths every slot is estimated
            fills["weights"] = [summary.weight_g]
        if slots and all(f.type for f in slots):
            fills["types"] = [f.type for f in slots]
        if slots and all(f.color for f in slots):
            fills["colors"] = [f.color for f in slots]

    return replace(raw, **fills) if fills else raw
