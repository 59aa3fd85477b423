# server/agents/recommendation/rules.py
"""
Threshold-based analyzers for irrigation, fertilizer, disease, weather and energy

Each analyzer takes a canonical reading and returns at most one recommendation.
The analyzers are independent of each other; only their order in
``RULE_ANALYZERS`` decides where their output lands before sorting.
"""
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from agents.recommendation.actions import actions_for_category
from agents.recommendation.models import CanonicalReading, Recommendation

ID_PREFIXES = {
    "irrigation": "irr",
    "fertilizer": "fert",
    "disease": "disease",
    "weather": "weather",
    "energy": "energy",
}

def new_recommendation_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"

def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def build_recommendation(
    category: str,
    priority: str,
    title: str,
    description: str,
    confidence: float,
    action_required: bool = True,
    source: str = "rules",
    id_prefix: Optional[str] = None,
) -> Recommendation:
    """Create a recommendation with catalog actions and a fresh id/timestamp"""
    return Recommendation(
        id=new_recommendation_id(id_prefix or ID_PREFIXES.get(category, category)),
        category=category,
        priority=priority,
        title=title,
        description=description,
        action_required=action_required,
        confidence_score=confidence,
        timestamp=utc_now_iso(),
        actions=actions_for_category(category),
        source=source,
    )

def analyze_irrigation(data: CanonicalReading) -> Optional[Recommendation]:
    moisture = data.soil_moisture

    if moisture < 30:
        critical = moisture < 20
        return build_recommendation(
            "irrigation",
            "high" if critical else "medium",
            "💧 Irrigation Required",
            f"Soil moisture is at {moisture:.1f}%. Recommend irrigating for "
            f"{'60' if critical else '45'} minutes tonight at 8 PM when evaporation is minimal.",
            0.92,
        )

    if moisture > 80:
        return build_recommendation(
            "irrigation",
            "low",
            "⚠️ Reduce Irrigation",
            f"Soil moisture is high at {moisture:.1f}%. Consider reducing irrigation "
            f"to prevent root rot and conserve water.",
            0.88,
            action_required=False,
        )

    return None

def analyze_fertilizer(data: CanonicalReading) -> Optional[Recommendation]:
    deficiencies = []
    if data.nitrogen < 20:
        deficiencies.append(f"Nitrogen ({data.nitrogen:.0f} ppm)")
    if data.phosphorus < 10:
        deficiencies.append(f"Phosphorus ({data.phosphorus:.0f} ppm)")
    if data.potassium < 20:
        deficiencies.append(f"Potassium ({data.potassium:.0f} ppm)")

    if deficiencies:
        return build_recommendation(
            "fertilizer",
            "high" if len(deficiencies) > 2 else "medium",
            "🌱 Nutrient Deficiency Detected",
            f"Low levels detected: {', '.join(deficiencies)}. Apply balanced NPK fertilizer "
            f"(20-20-20) at 50kg/hectare. Best time: tomorrow morning before expected rain.",
            0.85,
        )

    ph = data.ph
    if ph < 6 or ph > 7.5:
        correction = "Add lime to increase pH" if ph < 6 else "Add sulfur to decrease pH"
        return build_recommendation(
            "fertilizer",
            "medium",
            "⚖️ pH Adjustment Needed",
            f"Soil pH is {ph:.1f}. {correction} for optimal nutrient absorption.",
            0.90,
        )

    return None

def analyze_disease_risk(data: CanonicalReading) -> Optional[Recommendation]:
    humidity = data.humidity
    temperature = data.temperature

    # Warm, wet canopy favours fungal growth
    if humidity > 75 and 20 < temperature < 30:
        return build_recommendation(
            "disease",
            "high" if humidity > 85 else "medium",
            "🦠 High Disease Risk Alert",
            f"Current conditions ({humidity:.0f}% humidity, {temperature:.1f}°C) are favorable "
            f"for fungal diseases. Consider preventive fungicide application within 24 hours.",
            0.87,
        )

    if temperature > 30:
        return build_recommendation(
            "disease",
            "medium",
            "🐛 Pest Activity Alert",
            f"High temperatures ({temperature:.1f}°C) may increase pest activity. "
            f"Monitor crops closely for signs of infestation.",
            0.75,
            action_required=False,
        )

    return None

def analyze_weather(data: CanonicalReading) -> Optional[Recommendation]:
    wind = data.wind_kmh
    rain = data.rain_rate

    if wind > 30:
        return build_recommendation(
            "weather",
            "high" if wind > 50 else "medium",
            "💨 High Wind Warning",
            f"Wind speed at {wind:.1f} km/h. Postpone spraying operations and secure loose "
            f"equipment. Consider staking tall crops.",
            0.95,
        )

    if rain > 10:
        return build_recommendation(
            "weather",
            "medium",
            "🌧️ Heavy Rain Detected",
            f"Rainfall at {rain:.1f} mm/h. Skip irrigation for the next 48 hours and "
            f"postpone fertilizer application.",
            0.93,
            action_required=False,
        )

    return None

def analyze_energy(data: CanonicalReading) -> Optional[Recommendation]:
    power = data.sol_power_W
    voltage = data.sol_voltage_V

    if power < 1 and voltage < 11:
        return build_recommendation(
            "energy",
            "low",
            "🔋 Solar Panel Maintenance",
            f"Solar power generation is low ({power:.2f}W at {voltage:.1f}V). Panels may need "
            f"cleaning or there could be shading issues.",
            0.82,
            action_required=False,
        )

    return None

RULE_ANALYZERS: List[Callable[[CanonicalReading], Optional[Recommendation]]] = [
    analyze_irrigation,
    analyze_fertilizer,
    analyze_disease_risk,
    analyze_weather,
    analyze_energy,
]

def run_rule_analyzers(data: CanonicalReading) -> List[Recommendation]:
    """Run every analyzer and keep the ones that fired"""
    results = []
    for analyzer in RULE_ANALYZERS:
        recommendation = analyzer(data)
        if recommendation is not None:
            results.append(recommendation)
    return results
