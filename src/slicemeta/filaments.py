"""Build per-filament records from the raw comment lists."""

from __future__ import annotations

import math
from dataclasses import dataclass

from slicemeta.dialects import RawFields, parse_number
from slicemeta.models import DEFAULT_COLOR, UNKNOWN_MATERIAL, FilamentRecord

DEFAULT_DIAMETER_MM = 1.75
DEFAULT_DENSITY_G_CM3 = 1.24  # generic PLA


@dataclass(frozen=True)
class FilamentDefaults:
    """Values used when the gcode does not report them for a slot.

    The diameter and density feed the length-to-weight estimate. They are
    generic approximations, not measurements of the actual material.
    """

    diameter_mm: float = DEFAULT_DIAMETER_MM
    density_g_cm3: float = DEFAULT_DENSITY_G_CM3
    color: str = DEFAULT_COLOR
    material: str = UNKNOWN_MATERIAL


def estimate_weight_from_length(
    length_mm: float,
    diameter: float = DEFAULT_DIAMETER_MM,
    density: float = DEFAULT_DENSITY_G_CM3,
) -> float:
    """Approximate filament weight in grams from its length in mm."""
    radius = diameter / 2
    volume_cm3 = math.pi * radius * radius * length_mm / 1000
    return volume_cm3 * density


def _slot_value(values: list[str], index: int) -> str | None:
    return values[index] if index < len(values) else None


def _positive(values: list[str], index: int, default: float) -> float:
    raw = _slot_value(values, index)
    number = parse_number(raw) if raw is not None else None
    # OrcaSlicer reports a density of 0 when it is unset
    return number if number is not None and number > 0 else default


def _format(raw: str, value: float | None, unit: str) -> str:
    return f"{value:.2f}{unit}" if value is not None else raw


def aggregate_filaments(
    raw: RawFields, defaults: FilamentDefaults | None = None
) -> tuple[list[FilamentRecord], str | None]:
    """Merge the per-field lists into filament records and a total weight.

    Lists may have different lengths; one record is considered per slot up to
    the longest of weights, lengths and types (at least one). Slots with no
    weight and no length are skipped. A missing weight is estimated from the
    length.

    :returns: ``(records, total_weight)``; total is ``None`` when no weight
        was found at all.
    """
    defaults = defaults or FilamentDefaults()
    count = max(len(raw.weights), len(raw.lengths), len(raw.types), 1)

    records: list[FilamentRecord] = []
    total = 0.0
    for i in range(count):
        weight = _slot_value(raw.weights, i)
        length = _slot_value(raw.lengths, i)
        length_mm = parse_number(length) if length is not None else None

        weight_g = parse_number(weight) if weight is not None else None
        estimated = False
        if weight is None and length_mm is not None:
            weight_g = estimate_weight_from_length(
                length_mm,
                _positive(raw.diameters, i, defaults.diameter_mm),
                _positive(raw.densities, i, defaults.density_g_cm3),
            )
            weight = f"{weight_g:.2f}"
            estimated = True

        if weight is None and length is None:
            continue

        records.append(FilamentRecord(
            material_type=_slot_value(raw.types, i) or defaults.material,
            color=_slot_value(raw.colors, i) or defaults.color,
            length=_format(length, length_mm, "mm") if length is not None else "",
            weight=_format(weight, weight_g, "g") if weight is not None else "",
            weight_estimated=estimated,
        ))
        if weight_g is not None:
            total += weight_g

    return records, _total_weight(total, raw.weights)


def _total_weight(total: float, raw_weights: list[str]) -> str | None:
    if total > 0:
        return f"{total:.2f}g"
    if not raw_weights:
        return None
    # Prefer a non-numeric raw value over reporting a computed zero
    non_numeric = [w for w in raw_weights if parse_number(w) is None]
    if non_numeric:
        return non_numeric[0]
    fallback = raw_weights[0]
    return fallback if fallback.lower().endswith("g") else f"{fallback}g"
