"""Load and validate slicemeta.toml configuration."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from slicemeta.filaments import FilamentDefaults
from slicemeta.scanner import HEAD_LINES, MAX_SCAN_LINES, TAIL_LINES


@dataclass(frozen=True)
class ScanConfig:
    max_lines: int = MAX_SCAN_LINES
    head_lines: int = HEAD_LINES
    tail_lines: int = TAIL_LINES


@dataclass(frozen=True)
class ExtractorConfig:
    scan: ScanConfig = field(default_factory=ScanConfig)
    filament: FilamentDefaults = field(default_factory=FilamentDefaults)


def load_config(path: Path) -> ExtractorConfig:
    """Load and validate a slicemeta.toml file."""
    path = Path(path).resolve()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    # Scan window
    scan_raw = raw.get("scan", {})
    scan = ScanConfig(
        max_lines=int(scan_raw.get("max_lines", MAX_SCAN_LINES)),
        head_lines=int(scan_raw.get("head_lines", HEAD_LINES)),
        tail_lines=int(scan_raw.get("tail_lines", TAIL_LINES)),
    )
    for name in ("max_lines", "head_lines", "tail_lines"):
        value = getattr(scan, name)
        if value < 1:
            raise ValueError(f"scan.{name} must be >= 1, got {value}")
    if scan.head_lines + scan.tail_lines > scan.max_lines:
        raise ValueError(
            f"scan.head_lines + scan.tail_lines must not exceed scan.max_lines "
            f"({scan.head_lines} + {scan.tail_lines} > {scan.max_lines})"
        )

    # Filament defaults
    fil_raw = raw.get("filament", {})
    filament = FilamentDefaults(
        diameter_mm=float(fil_raw.get("diameter_mm", FilamentDefaults.diameter_mm)),
        density_g_cm3=float(fil_raw.get("density_g_cm3", FilamentDefaults.density_g_cm3)),
        color=str(fil_raw.get("default_color", FilamentDefaults.color)),
        material=str(fil_raw.get("unknown_material", FilamentDefaults.material)),
    )
    if filament.diameter_mm <= 0:
        raise ValueError(f"filament.diameter_mm must be > 0, got {filament.diameter_mm}")
    if filament.density_g_cm3 <= 0:
        raise ValueError(f"filament.density_g_cm3 must be > 0, got {filament.density_g_cm3}")
    if not filament.color.strip():
        raise ValueError("filament.default_color must not be empty")
    if not filament.material.strip():
        raise ValueError("filament.unknown_material must not be empty")

    return ExtractorConfig(scan=scan, filament=filament)
