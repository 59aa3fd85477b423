# server/agents/recommendation/normalizer.py
"""
Reading normalizer - maps raw device readings onto the canonical field set
"""
import math
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from agents.recommendation.models import CanonicalReading, SensorReading

# canonical field -> raw keys, first present wins
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "temperature": ("temperature", "temperature_C"),
    "humidity": ("humidity", "humidity_"),
    "soil_moisture": ("soil_moisture",),
    "ph": ("ph",),
    "nitrogen": ("nitrogen",),
    "phosphorus": ("phosphorus",),
    "potassium": ("potassium",),
    "wind_kmh": ("wind_kmh",),
    "rain_rate": ("rainrate_mm_h", "rainfall"),
    "light_lux": ("light_lux",),
    "sol_power_W": ("sol_power_W",),
    "sol_voltage_V": ("sol_voltage_V",),
}

RawReading = Union[SensorReading, Mapping[str, Any], None]

def _safe_num(v) -> Optional[float]:
    if v is None or isinstance(v, bool):
        return None
    try:
        num = float(v)
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None

def _as_mapping(reading: RawReading) -> Mapping[str, Any]:
    if reading is None:
        return {}
    if isinstance(reading, SensorReading):
        return reading.model_dump(exclude_none=True)
    return reading

def normalize_reading(reading: RawReading) -> CanonicalReading:
    """Resolve field-name variants into a canonical reading.

    Missing or non-numeric values become 0. Nothing is rejected; the names
    of absent fields are recorded in ``CanonicalReading.missing``.
    """
    raw = _as_mapping(reading)
    values: Dict[str, float] = {}
    missing = []

    for field, aliases in FIELD_ALIASES.items():
        value = None
        for key in aliases:
            value = _safe_num(raw.get(key))
            if value is not None:
                break
        if value is None:
            missing.append(field)
            value = 0.0
        values[field] = value

    return CanonicalReading(**values, missing=missing)
