"""Result records returned by the metadata extractor."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

UNKNOWN_MATERIAL = "Unknown"
DEFAULT_COLOR = "#888888"


@dataclass(frozen=True)
class FilamentRecord:
    """One material slot used by the print job."""

    material_type: str = UNKNOWN_MATERIAL
    color: str = DEFAULT_COLOR
    length: str = ""  # e.g. "1200.00mm"
    weight: str = ""  # e.g. "3.58g"
    weight_estimated: bool = False  # derived from length, not reported by the slicer


@dataclass(frozen=True)
class PrintSettings:
    layer_height: str | None = None
    infill: str | None = None
    nozzle_diameter: str | None = None
    printer_model: str | None = None
    primary_material: str | None = None


@dataclass(frozen=True)
class PrintMetadata:
    """Structured metadata extracted from slicer output."""

    print_duration: str | None = None
    print_duration_seconds: int | None = None
    filaments: tuple[FilamentRecord, ...] = ()
    total_filament_weight: str | None = None
    source_file_path: str | None = None
    print_settings: PrintSettings = field(default_factory=PrintSettings)

    def to_dict(self) -> dict:
        """Return a JSON-serialisable dict."""
        raw = asdict(self)
        raw["filaments"] = list(raw["filaments"])
        return raw
