# server/api/v1/endpoints/recommendations.py
from fastapi import APIRouter, HTTPException

from agents.base import agent_registry
from agents.recommendation.agent import RecommendationAgent
from agents.recommendation.models import CropHealthRequest, RecommendationRequest

router = APIRouter()

def _get_agent() -> RecommendationAgent:
    agent = agent_registry.get("recommendation")
    if not agent:
        raise HTTPException(status_code=500, detail="Recommendation agent not available")
    return agent

@router.post("/")
async def generate_recommendations(request: RecommendationRequest):
    """
    Generate recommendations for the latest sensor reading

    Set ``analysis_type`` to ``crop_health`` to also receive a crop health
    analysis over ``historical_readings`` (most recent first). Without
    history the submitted reading is analysed on its own.
    """
    try:
        agent = _get_agent()
        return await agent.execute(request)

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error generating recommendations: {str(e)}")

@router.post("/crop-health")
async def analyze_crop_health(request: CropHealthRequest):
    """Crop health score, risk factors and predictions for recent readings"""
    try:
        agent = _get_agent()
        return await agent.analyze_crop_health(request.historical_readings)

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error analyzing crop health: {str(e)}")

@router.get("/sample")
async def sample_recommendations():
    """Recommendations for the built-in development reading"""
    try:
        agent = _get_agent()
        request = RecommendationRequest(sensor_data=agent.get_sample_reading())
        return await agent.execute(request)

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error generating sample recommendations: {str(e)}")

@router.get("/health")
async def recommendation_health():
    """Check recommendation agent health"""
    try:
        agent = agent_registry.get("recommendation")
        if not agent:
            return {"status": "unhealthy", "error": "Recommendation agent not available"}

        return await agent.health_check()

    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}
