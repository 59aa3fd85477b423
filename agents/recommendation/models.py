# server/agents/recommendation/models.py
"""
Pydantic models for the crop recommendation agent
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any, Literal, Union

Category = Literal["irrigation", "fertilizer", "disease", "weather", "energy"]
Priority = Literal["high", "medium", "low"]

CATEGORIES = ("irrigation", "fertilizer", "disease", "weather", "energy")
PRIORITIES = ("high", "medium", "low")

class SensorReading(BaseModel):
    """Raw device reading. Every field is optional and unknown keys are kept."""
    model_config = ConfigDict(extra="allow")

    temperature: Optional[float] = Field(None, description="Air temperature (°C)")
    temperature_C: Optional[float] = Field(None, description="Air temperature (°C), firmware variant")
    humidity: Optional[float] = Field(None, description="Relative humidity (%)")
    humidity_: Optional[float] = Field(None, description="Relative humidity (%), firmware variant")
    soil_moisture: Optional[float] = Field(None, description="Soil moisture (%)")
    ph: Optional[float] = Field(None, description="Soil pH")
    nitrogen: Optional[float] = Field(None, description="Nitrogen (ppm)")
    phosphorus: Optional[float] = Field(None, description="Phosphorus (ppm)")
    potassium: Optional[float] = Field(None, description="Potassium (ppm)")
    wind_kmh: Optional[float] = Field(None, description="Wind speed (km/h)")
    rainrate_mm_h: Optional[float] = Field(None, description="Rain rate (mm/h)")
    rainfall: Optional[float] = Field(None, description="Rain rate (mm/h), legacy name")
    light_lux: Optional[float] = Field(None, description="Light intensity (lux)")
    sol_power_W: Optional[float] = Field(None, description="Solar panel power (W)")
    sol_voltage_V: Optional[float] = Field(None, description="Solar panel voltage (V)")

class CanonicalReading(BaseModel):
    """Normalized reading; absent fields are 0 and listed in ``missing``"""
    temperature: float = 0.0
    humidity: float = 0.0
    soil_moisture: float = 0.0
    ph: float = 0.0
    nitrogen: float = 0.0
    phosphorus: float = 0.0
    potassium: float = 0.0
    wind_kmh: float = 0.0
    rain_rate: float = 0.0
    light_lux: float = 0.0
    sol_power_W: float = 0.0
    sol_voltage_V: float = 0.0
    missing: List[str] = Field(default_factory=list, description="Canonical fields absent from the raw reading")

class RecommendationAction(BaseModel):
    label: str = Field(..., description="Button label shown by the dashboard")
    action: str = Field(..., description="Action identifier consumed by the UI")

class Recommendation(BaseModel):
    id: str
    category: Category
    priority: Priority
    title: str
    description: str
    action_required: bool = True
    confidence_score: float = Field(..., ge=0, le=1, description="Confidence level (0-1)")
    timestamp: str
    actions: List[RecommendationAction] = Field(default_factory=list)
    source: Literal["rules", "gemini"] = "rules"

class CropPredictions(BaseModel):
    yield_prediction: float = Field(..., description="Expected yield as % of optimal")
    harvest_date: str
    next_irrigation: str
    irrigation_guidance: Optional[str] = Field(None, description="Free-text irrigation timing from Gemini")

class CropAnalysis(BaseModel):
    health: int = Field(..., ge=0, le=100)
    risk_factors: List[str] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
    predictions: CropPredictions
    source: Literal["local", "gemini"] = "local"

class ExternalHealthAssessment(BaseModel):
    """Crop health JSON returned by Gemini; keys follow the prompt"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    health: Optional[float] = None
    risk_factors: Optional[List[str]] = Field(None, alias="riskFactors")
    yield_prediction: Optional[float] = Field(None, alias="yieldPrediction")
    harvest_days: Optional[float] = Field(None, alias="harvestDays")
    next_irrigation: Optional[Union[str, float]] = Field(
        None, alias="nextIrrigation", description="ISO instant, free text, or days from now"
    )

class RecommendationRequest(BaseModel):
    sensor_data: Dict[str, Any] = Field(default_factory=dict, description="Latest raw sensor reading")
    historical_readings: Optional[List[Dict[str, Any]]] = Field(None, description="Readings, most recent first")
    analysis_type: Literal["recommendations", "crop_health"] = "recommendations"

class CropHealthRequest(BaseModel):
    historical_readings: List[Dict[str, Any]] = Field(default_factory=list, description="Readings, most recent first")

class RecommendationResult(BaseModel):
    recommendations: List[Recommendation]
    crop_analysis: Optional[CropAnalysis] = None

class RecommendationResponse(BaseModel):
    success: bool
    data: RecommendationResult
    message: str
    timestamp: str
    metadata: Optional[Dict[str, Any]] = None
