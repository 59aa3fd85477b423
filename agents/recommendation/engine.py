# server/agents/recommendation/engine.py
"""
Recommendation engine - rule analysis, optional Gemini augmentation and crop
health scoring over recent sensor readings
"""
import logging
import math
import random
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

from core.config import Settings
from agents.recommendation.augmentation import AugmentationAdapter
from agents.recommendation.llm import TextGenerator, build_text_generator
from agents.recommendation.models import (
    CanonicalReading, CropAnalysis, CropPredictions, ExternalHealthAssessment, Recommendation
)
from agents.recommendation.normalizer import RawReading, normalize_reading
from agents.recommendation.ranking import deduplicate_and_sort
from agents.recommendation.rules import run_rule_analyzers

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "max_ai_recommendations": 3,
    "crop_analysis_top_n": 3,
    "harvest_days_default": 30,
    "next_irrigation_days": 2,
}

# factor name, (min, max) of the healthy range, risk label when the factor is low
HEALTH_FACTORS = (
    ("moisture", (30, 70), "Low soil moisture"),
    ("temperature", (20, 30), "Temperature stress"),
    ("ph", (6, 7.5), "pH imbalance"),
    ("nutrients", (20, 50), "Nutrient deficiency"),
)
RISK_THRESHOLD = 0.3
DEFAULT_EXTERNAL_HEALTH = 75
DEFAULT_EXTERNAL_YIELD = 85
MAX_HARVEST_DAYS = 3650

def normalize_factor(value: float, low: float, high: float) -> float:
    """Position of ``value`` in [low, high] as 0..1; zero counts as absent"""
    if not value:
        return 0.0
    if value <= low:
        return 0.0
    if value >= high:
        return 1.0
    return (value - low) / (high - low)

def clamp_health(score: float) -> int:
    """Round half up and clamp to 0..100"""
    return int(min(100, max(0, math.floor(score + 0.5))))

def placeholder_yield_estimate(rng: Optional[random.Random] = None) -> float:
    """Stand-in yield figure in [80, 120) until a real estimator exists"""
    rng = rng or random
    return float(int(80 + rng.random() * 40))

def health_factors(data: CanonicalReading) -> Dict[str, float]:
    nutrients = (data.nitrogen + data.phosphorus + data.potassium) / 3
    values = {
        "moisture": data.soil_moisture,
        "temperature": data.temperature,
        "ph": data.ph,
        "nutrients": nutrients,
    }
    return {
        name: normalize_factor(values[name], low, high)
        for name, (low, high), _ in HEALTH_FACTORS
    }

def _parse_instant(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

def _irrigation_from_offset(now: datetime, days: Optional[float]) -> Optional[datetime]:
    if days is None or not math.isfinite(days) or days < 0 or days > MAX_HARVEST_DAYS:
        return None
    return now + timedelta(days=days)

class RecommendationEngine:
    """
    Turns sensor readings into prioritized recommendations

    The five rule analyzers always run. When a ``TextGenerator`` is supplied,
    Gemini suggestions are appended before deduplication; any Gemini failure
    leaves the rule-based output untouched.
    """

    def __init__(
        self,
        text_generator: Optional[TextGenerator] = None,
        config: Optional[Dict[str, Any]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = {**DEFAULT_CONFIG, **(config or {})}
        self.rng = rng
        self.augmentation = None
        if text_generator is not None:
            self.augmentation = AugmentationAdapter(
                text_generator,
                max_recommendations=self.config["max_ai_recommendations"],
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "RecommendationEngine":
        return cls(
            text_generator=build_text_generator(settings),
            config=settings.get_agent_config("recommendation"),
        )

    @property
    def augmentation_enabled(self) -> bool:
        return self.augmentation is not None

    async def generate_recommendations(self, reading: RawReading) -> List[Recommendation]:
        data = normalize_reading(reading)
        recommendations = run_rule_analyzers(data)
        logger.debug(f"Rule analyzers produced {len(recommendations)} recommendation(s)")

        if self.augmentation is not None:
            recommendations.extend(await self.augmentation.suggest(data))

        return deduplicate_and_sort(recommendations)

    async def analyze_crop_health(self, historical_readings: Sequence[RawReading]) -> CropAnalysis:
        """Crop health for readings ordered most recent first"""
        history = list(historical_readings or [])
        latest = history[0] if history else {}
        recommendations = await self.generate_recommendations(latest)
        top = recommendations[:self.config["crop_analysis_top_n"]]

        if self.augmentation is not None and history:
            assessment = await self.augmentation.assess_crop_health(
                self._raw_dict(latest), len(history)
            )
            if assessment is not None:
                try:
                    return self._external_crop_analysis(assessment, top)
                except (ValueError, OverflowError) as e:
                    logger.warning(f"Unusable Gemini health analysis: {e}")
            logger.info("Falling back to local crop health analysis")

        return self.local_crop_analysis(latest, top)

    def local_crop_analysis(self, latest: RawReading, recommendations: List[Recommendation]) -> CropAnalysis:
        factors = health_factors(normalize_reading(latest))
        score = sum(factors.values()) / len(factors) * 100
        risk_factors = [
            label for name, _, label in HEALTH_FACTORS
            if factors[name] < RISK_THRESHOLD
        ]

        now = datetime.now(timezone.utc)
        return CropAnalysis(
            health=clamp_health(score),
            risk_factors=risk_factors,
            recommendations=recommendations,
            predictions=CropPredictions(
                yield_prediction=placeholder_yield_estimate(self.rng),
                harvest_date=(now + timedelta(days=self.config["harvest_days_default"])).isoformat(),
                next_irrigation=(now + timedelta(days=self.config["next_irrigation_days"])).isoformat(),
            ),
            source="local",
        )

    def _external_crop_analysis(
        self, assessment: ExternalHealthAssessment, recommendations: List[Recommendation]
    ) -> CropAnalysis:
        now = datetime.now(timezone.utc)
        harvest_days = assessment.harvest_days
        if harvest_days is None or harvest_days <= 0:
            harvest_days = self.config["harvest_days_default"]
        harvest_days = min(harvest_days, MAX_HARVEST_DAYS)

        guidance = None
        if isinstance(assessment.next_irrigation, str):
            next_irrigation = _parse_instant(assessment.next_irrigation)
        else:
            next_irrigation = _irrigation_from_offset(now, assessment.next_irrigation)
        if next_irrigation is None:
            next_irrigation = now + timedelta(days=self.config["next_irrigation_days"])
            if isinstance(assessment.next_irrigation, str):
                guidance = assessment.next_irrigation

        return CropAnalysis(
            health=clamp_health(DEFAULT_EXTERNAL_HEALTH if assessment.health is None else assessment.health),
            risk_factors=(assessment.risk_factors or [])[:3],
            recommendations=recommendations,
            predictions=CropPredictions(
                yield_prediction=(
                    DEFAULT_EXTERNAL_YIELD if assessment.yield_prediction is None
                    else assessment.yield_prediction
                ),
                harvest_date=(now + timedelta(days=harvest_days)).isoformat(),
                next_irrigation=next_irrigation.isoformat(),
                irrigation_guidance=guidance,
            ),
            source="gemini",
        )

    @staticmethod
    def _raw_dict(reading: RawReading) -> Dict[str, Any]:
        if reading is None:
            return {}
        if hasattr(reading, "model_dump"):
            return reading.model_dump(exclude_none=True)
        return dict(reading)
