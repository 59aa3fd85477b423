# server/agents/recommendation/agent.py
"""
Crop recommendation agent - rule-based sensor analysis with Gemini augmentation
"""

from typing import Any, Dict, List, Optional
from datetime import datetime

from agents.base import BaseAgent
from agents.recommendation.engine import RecommendationEngine
from agents.recommendation.models import (
    CropAnalysis, RecommendationRequest, RecommendationResponse, RecommendationResult, Recommendation
)
from core.exceptions import AgentConfigError, AgentError

# Representative station reading used by the dashboard in development
SAMPLE_READING: Dict[str, Any] = {
    "temperature_C": 28,
    "humidity_": 65,
    "soil_moisture": 45,
    "ph": 6.8,
    "nitrogen": 30,
    "phosphorus": 25,
    "potassium": 35,
    "wind_kmh": 15,
    "rainrate_mm_h": 0,
    "light_lux": 50000,
    "sol_power_W": 120,
    "sol_voltage_V": 18
}

class RecommendationAgent(BaseAgent[RecommendationRequest, RecommendationResponse]):
    """
    Crop recommendation agent for IoT field stations

    Features:
    - Irrigation, fertilizer, disease, weather and solar checks on each reading
    - Optional Google Gemini suggestions merged with the rule output
    - Near-duplicate removal and priority ordering
    - Crop health score with risk factors and harvest/irrigation predictions
    """

    def __init__(self, engine: Optional[RecommendationEngine] = None):
        super().__init__("recommendation")
        self.engine = engine or RecommendationEngine.from_settings(self.settings)

        if self.engine.augmentation_enabled:
            self.logger.info("Recommendation agent initialized with Gemini augmentation")
        else:
            self.logger.info("Recommendation agent initialized with local rules only")

    def _validate_config(self) -> None:
        """Validate recommendation agent configuration"""
        for key in ("crop_analysis_top_n", "max_ai_recommendations"):
            value = self.config.get(key)
            if value is None:
                self.logger.debug(f"Optional config {key} not set, using defaults")
            elif isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise AgentConfigError(f"Invalid recommendation config {key}: {value!r}")

    async def process_request(self, request: RecommendationRequest) -> RecommendationResponse:
        """Process recommendation request"""

        try:
            recommendations = await self.engine.generate_recommendations(request.sensor_data)

            crop_analysis = None
            if request.analysis_type == "crop_health":
                history = self._history(request)
                crop_analysis = await self.engine.analyze_crop_health(history)

            result = RecommendationResult(
                recommendations=recommendations,
                crop_analysis=crop_analysis
            )

            response = RecommendationResponse(
                success=True,
                data=result,
                message=self._generate_response_message(recommendations, crop_analysis),
                timestamp=datetime.now().isoformat(),
                metadata=self._build_metadata(request, recommendations, crop_analysis)
            )

            self.logger.info(f"Generated {len(recommendations)} recommendation(s) for {request.analysis_type} request")
            return response

        except Exception as e:
            self.logger.error(f"Error processing recommendation request: {e}")
            raise AgentError(f"Failed to process recommendation request: {e}")

    async def analyze_crop_health(self, historical_readings: List[Dict[str, Any]]) -> RecommendationResponse:
        """Crop health analysis over readings ordered most recent first"""
        latest = historical_readings[0] if historical_readings else {}
        request = RecommendationRequest(
            sensor_data=latest,
            historical_readings=list(historical_readings),
            analysis_type="crop_health"
        )
        return await self.execute(request)

    @staticmethod
    def _history(request: RecommendationRequest) -> List[Dict[str, Any]]:
        """Readings to score; an omitted history means the submitted reading alone"""
        if request.historical_readings is None:
            return [request.sensor_data]
        return request.historical_readings

    def _generate_response_message(
        self, recommendations: List[Recommendation], crop_analysis: Optional[CropAnalysis]
    ) -> str:
        """Generate response message based on analysis results"""
        urgent = sum(1 for rec in recommendations if rec.priority == "high")

        if not recommendations:
            message = "No issues detected. Field conditions look normal."
        elif urgent:
            message = f"{len(recommendations)} recommendation(s), {urgent} needing immediate attention."
        else:
            message = f"{len(recommendations)} recommendation(s), none urgent."

        if crop_analysis is not None:
            message += f" Crop health score: {crop_analysis.health}/100."

        return message

    def _build_metadata(
        self,
        request: RecommendationRequest,
        recommendations: List[Recommendation],
        crop_analysis: Optional[CropAnalysis]
    ) -> Dict[str, Any]:
        metadata = {
            "analysis_type": request.analysis_type,
            "augmentation_enabled": self.engine.augmentation_enabled,
            "rule_recommendations": sum(1 for rec in recommendations if rec.source == "rules"),
            "ai_recommendations": sum(1 for rec in recommendations if rec.source == "gemini"),
            "sensor_fields": sorted(request.sensor_data.keys())
        }
        if crop_analysis is not None:
            metadata["crop_analysis_source"] = crop_analysis.source
            metadata["historical_points"] = len(self._history(request))
        return metadata

    def get_fallback_response(self, request: RecommendationRequest, error: Exception) -> RecommendationResponse:
        """Get fallback response when agent fails"""
        return RecommendationResponse(
            success=False,
            data=RecommendationResult(recommendations=[]),
            message=f"Recommendation analysis failed: {str(error)}. Please check sensor connectivity.",
            timestamp=datetime.now().isoformat(),
            metadata={"fallback": True, "error": str(error)}
        )

    def _health_details(self) -> Dict[str, Any]:
        return {
            "augmentation_enabled": self.engine.augmentation_enabled,
            "gemini_model": self.settings.gemini_model if self.engine.augmentation_enabled else None
        }

    def get_sample_reading(self) -> Dict[str, Any]:
        """Development sample reading"""
        return dict(SAMPLE_READING)
