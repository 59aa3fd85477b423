"""
Crop recommendation agent package
"""

from .agent import RecommendationAgent
from .engine import RecommendationEngine
from .models import (
    CropAnalysis, Recommendation, RecommendationRequest, RecommendationResponse, SensorReading
)

__all__ = [
    "RecommendationAgent",
    "RecommendationEngine",
    "CropAnalysis",
    "Recommendation",
    "RecommendationRequest",
    "RecommendationResponse",
    "SensorReading",
]
