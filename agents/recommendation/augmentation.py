# server/agents/recommendation/augmentation.py
"""
Gemini augmentation - asks the text generator for extra recommendations and
a crop health assessment, degrading to nothing on any failure
"""
import json
import logging
import math
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from agents.recommendation.llm import TextGenerator
from agents.recommendation.models import (
    CATEGORIES, PRIORITIES, CanonicalReading, ExternalHealthAssessment, Recommendation
)
from agents.recommendation.parsing import extract_json_array, extract_json_object
from agents.recommendation.rules import build_recommendation

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "disease"
DEFAULT_PRIORITY = "medium"
DEFAULT_TITLE = "AI Recommendation"
DEFAULT_DESCRIPTION = "Please review your farm conditions."
DEFAULT_CONFIDENCE = 0.85

# label, canonical field, unit
_SUMMARY_FIELDS = (
    ("Temperature", "temperature", "°C"),
    ("Humidity", "humidity", "%"),
    ("Soil Moisture", "soil_moisture", "%"),
    ("pH Level", "ph", ""),
    ("Nitrogen", "nitrogen", " ppm"),
    ("Phosphorus", "phosphorus", " ppm"),
    ("Potassium", "potassium", " ppm"),
    ("Wind Speed", "wind_kmh", " km/h"),
    ("Rain Rate", "rain_rate", " mm/h"),
    ("Light", "light_lux", " lux"),
    ("Solar Power", "sol_power_W", " W"),
)

RECOMMENDATION_PROMPT = """As an agricultural AI assistant, analyze the following sensor data and provide actionable recommendations for farm management.

Sensor Data:
{summary}

Based on this data, provide up to {limit} critical recommendations. For each recommendation, provide:
1. Type (irrigation/fertilizer/disease/weather/energy)
2. Priority (high/medium/low)
3. Title (brief, with emoji)
4. Description (specific actionable advice, 2-3 sentences max)
5. Confidence score (0-1)

Format your response as a JSON array. Example:
[
  {{
    "type": "irrigation",
    "priority": "high",
    "title": "💧 Immediate Irrigation Needed",
    "description": "Soil moisture at 15% is critically low. Irrigate for 45 minutes tonight at 8 PM to prevent crop stress.",
    "confidence": 0.95
  }}
]

Focus on the most critical issues that require immediate attention. Be specific and actionable."""

HEALTH_PROMPT = """Analyze the following agricultural sensor data trends and provide a comprehensive crop health assessment.

Latest readings: {latest}
Historical data points: {count}

Provide:
1. Overall health score (0-100)
2. Top 3 risk factors
3. Yield prediction (percentage of optimal)
4. Estimated days until harvest
5. Next irrigation timing recommendation

Format response as JSON with keys: health, riskFactors (array), yieldPrediction, harvestDays, nextIrrigation"""

def summarize_reading(data: CanonicalReading) -> str:
    """One line per sensor; fields missing from the raw reading show as N/A"""
    lines = []
    for label, field, unit in _SUMMARY_FIELDS:
        if field in data.missing:
            lines.append(f"- {label}: N/A")
        else:
            lines.append(f"- {label}: {getattr(data, field):g}{unit}")
    return "\n".join(lines)

def _coerce_confidence(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return DEFAULT_CONFIDENCE
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return DEFAULT_CONFIDENCE
    if math.isnan(confidence):
        return DEFAULT_CONFIDENCE
    return min(1.0, max(0.0, confidence))

def _text_or(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default

def complete_candidate(candidate: Dict[str, Any]) -> Recommendation:
    """Fill in whatever the model left out; never rejects a candidate"""
    category = candidate.get("type") or candidate.get("category")
    category = category.lower() if isinstance(category, str) else None
    if category not in CATEGORIES:
        category = DEFAULT_CATEGORY

    priority = candidate.get("priority")
    priority = priority.lower() if isinstance(priority, str) else None
    if priority not in PRIORITIES:
        priority = DEFAULT_PRIORITY

    return build_recommendation(
        category,
        priority,
        _text_or(candidate.get("title"), DEFAULT_TITLE),
        _text_or(candidate.get("description"), DEFAULT_DESCRIPTION),
        _coerce_confidence(candidate.get("confidence", candidate.get("confidenceScore"))),
        action_required=priority == "high",
        source="gemini",
        id_prefix="gemini",
    )

class AugmentationAdapter:
    """Bridges the engine and a ``TextGenerator``. Never raises to the caller."""

    def __init__(self, text_generator: TextGenerator, max_recommendations: int = 3):
        self.text_generator = text_generator
        self.max_recommendations = max_recommendations

    async def suggest(self, data: CanonicalReading) -> List[Recommendation]:
        """Gemini recommendations for a reading, or [] on any failure"""
        prompt = RECOMMENDATION_PROMPT.format(
            summary=summarize_reading(data),
            limit=self.max_recommendations,
        )

        try:
            text = await self.text_generator.generate(prompt)
        except Exception as e:
            logger.warning(f"Gemini recommendations unavailable: {e}")
            return []

        parsed = extract_json_array(text)
        if not parsed.ok:
            logger.warning(f"Could not parse Gemini recommendations: {parsed.error}")
            return []

        # The prompt bounds the count; the model's list is taken as-is
        recommendations = []
        for candidate in parsed.data:
            if not isinstance(candidate, dict):
                logger.debug(f"Skipping non-object candidate: {candidate!r}")
                continue
            recommendations.append(complete_candidate(candidate))

        logger.info(f"Gemini suggested {len(recommendations)} recommendation(s)")
        return recommendations

    async def assess_crop_health(
        self, latest: Dict[str, Any], history_length: int
    ) -> Optional[ExternalHealthAssessment]:
        """Gemini crop health assessment, or None when it cannot be obtained"""
        prompt = HEALTH_PROMPT.format(
            latest=json.dumps(latest, default=str),
            count=history_length,
        )

        try:
            text = await self.text_generator.generate(prompt)
        except Exception as e:
            logger.warning(f"Gemini health analysis unavailable: {e}")
            return None

        parsed = extract_json_object(text)
        if not parsed.ok:
            logger.warning(f"Could not parse Gemini health analysis: {parsed.error}")
            return None

        try:
            return ExternalHealthAssessment.model_validate(parsed.data)
        except ValidationError as e:
            logger.warning(f"Gemini health analysis has unexpected values: {e}")
            return None
