"""Read the embedded gcode (and plate summary) out of a 3MF archive.

Sliced BambuStudio/OrcaSlicer projects (``.gcode.3mf``) keep one gcode file
per plate under ``Metadata/``; other tools put a single ``.gcode`` at the
archive root.
"""

from __future__ import annotations

import io
import logging
import re
import zipfile
import zlib
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol
from xml.etree.ElementTree import Element

from defusedxml import ElementTree as SafeET  # untrusted archive XML
from defusedxml.common import DefusedXmlException

from slicemeta.errors import ArchiveCorrupt, ArchiveEntryNotFound

log = logging.getLogger(__name__)

FIRST_PLATE_GCODE = "Metadata/plate_1.gcode"
PLATE_PREFIX = "Metadata/plate_"
GCODE_SUFFIX = ".gcode"
SLICE_INFO = "Metadata/slice_info.config"

_PLATE_ENTRY = re.compile(r"Metadata/plate_(\d+)\.gcode")


class ArchiveReader(Protocol):
    """Named-entry access to an archive held in memory."""

    def names(self) -> list[str]: ...

    def read(self, name: str) -> bytes: ...


class ZipArchiveReader:
    """:class:`ArchiveReader` over a zip buffer."""

    def __init__(self, data: bytes) -> None:
        try:
            self._zf = zipfile.ZipFile(io.BytesIO(data), "r")
        except (zipfile.BadZipFile, OSError, ValueError) as exc:
            raise ArchiveCorrupt(f"Not a readable 3MF/zip archive: {exc}") from exc

    def names(self) -> list[str]:
        return [info.filename for info in self._zf.infolist() if not info.is_dir()]

    def read(self, name: str) -> bytes:
        try:
            return self._zf.read(name)
        except (
            zipfile.BadZipFile, zlib.error, EOFError, OSError, RuntimeError, NotImplementedError,
        ) as exc:
            raise ArchiveCorrupt(f"Could not decompress {name}: {exc}") from exc


def _gcode_priority(name: str) -> int | None:
    if name == FIRST_PLATE_GCODE:
        return 1
    if name.startswith(PLATE_PREFIX) and name.endswith(GCODE_SUFFIX):
        return 2
    if name.endswith(GCODE_SUFFIX) and "/" not in name:
        return 3
    return None


def find_gcode_entry(names: list[str]) -> str:
    """Pick the gcode entry that represents the print job.

    Plate 1 wins over other plates, which win over a root-level ``.gcode``;
    any other ``.gcode`` entry is the last resort.
    """
    candidates = [
        (priority, name)
        for name in names
        if (priority := _gcode_priority(name)) is not None
    ]
    if candidates:
        # stable sort: archive order within the same priority
        candidates.sort(key=lambda c: c[0])
        return candidates[0][1]

    for name in names:
        if name.endswith(GCODE_SUFFIX):
            return name

    raise ArchiveEntryNotFound(
        f"No {GCODE_SUFFIX} file found in 3MF archive ({len(names)} entries)"
    )


def plate_number(entry: str) -> int | None:
    """Plate index of a ``Metadata/plate_<n>.gcode`` entry name."""
    m = _PLATE_ENTRY.fullmatch(entry)
    return int(m.group(1)) if m else None


def read_gcode(archive: ArchiveReader) -> tuple[str, str]:
    """Return ``(entry_name, text)`` of the gcode that represents the job."""
    name = find_gcode_entry(archive.names())
    log.debug("Using gcode entry %s", name)
    return name, archive.read(name).decode("utf-8", errors="replace")


def extract_gcode_from_3mf(
    data: bytes, *, reader: Callable[[bytes], ArchiveReader] = ZipArchiveReader
) -> str:
    """Return the decoded gcode text embedded in a 3MF archive.

    :raises ArchiveCorrupt: the archive or the gcode entry can't be read.
    :raises ArchiveEntryNotFound: there is no gcode entry.
    """
    _name, text = read_gcode(reader(data))
    return text


@dataclass(frozen=True)
class PlateFilament:
    type: str = ""
    color: str = ""
    used_m: str = ""
    used_g: str = ""


@dataclass(frozen=True)
class PlateSummary:
    """Per-plate stats from BambuStudio/OrcaSlicer ``slice_info.config``."""

    index: int
    prediction_seconds: int | None = None
    weight_g: str | None = None
    filaments: tuple[PlateFilament, ...] = ()


def read_plate_summary(archive: ArchiveReader, plate: int = 1) -> PlateSummary | None:
    """Parse the slice summary of *plate*, falling back to the first plate.

    Returns ``None`` when the archive has no ``slice_info.config`` or it
    can't be parsed; the summary only supplements the gcode comments.
    """
    if SLICE_INFO not in archive.names():
        return None

    try:
        root = SafeET.fromstring(archive.read(SLICE_INFO))
    except (SafeET.ParseError, DefusedXmlException, ArchiveCorrupt) as exc:
        log.warning("Ignoring unreadable %s: %s", SLICE_INFO, exc)
        return None

    plates = root.findall("plate")
    if not plates:
        return None

    chosen = plates[0]
    for plate_el in plates:
        if _plate_metadata(plate_el).get("index") == str(plate):
            chosen = plate_el
            break

    meta = _plate_metadata(chosen)
    prediction = meta.get("prediction", "")
    index = meta.get("index", "")
    filaments = tuple(
        PlateFilament(
            type=fil.get("type") or "",
            color=fil.get("color") or "",
            used_m=fil.get("used_m") or "",
            used_g=fil.get("used_g") or "",
        )
        for fil in chosen.findall("filament")
    )
    return PlateSummary(
        index=int(index) if index.isdigit() else plate,
        prediction_seconds=int(prediction) if prediction.isdigit() else None,
        weight_g=meta.get("weight") or None,
        filaments=filaments,
    )


def _plate_metadata(plate_el: Element) -> dict[str, str]:
    return {
        el.get("key"): el.get("value") or ""
        for el in plate_el.findall("metadata")
        if el.get("key")
    }
