"""
Smoke script to exercise the recommendation agent outside the API

Run from the repository root: python scripts/test_agent.py
"""

import asyncio
import sys

from agents.recommendation.agent import RecommendationAgent
from agents.recommendation.models import RecommendationRequest
from core.config import get_settings
from core.logging import setup_logging

async def test_recommendation_agent() -> bool:
    """Run the agent against the sample reading and a dry field"""

    print("🧪 Testing Recommendation Agent")
    print("=" * 50)

    try:
        agent = RecommendationAgent()
        health = await agent.health_check()
        print(f"   Status: {health['status']} (Gemini: {health['augmentation_enabled']})")

        sample = RecommendationRequest(sensor_data=agent.get_sample_reading())
        response = await agent.execute(sample)
        print(f"\n   Sample reading -> {response.message}")
        for rec in response.data.recommendations:
            print(f"   [{rec.priority}] {rec.title} ({rec.source}, {rec.confidence_score:.2f})")

        dry_field = {"soil_moisture": 15, "temperature": 26, "humidity": 90, "wind_kmh": 55}
        response = await agent.analyze_crop_health([dry_field])
        analysis = response.data.crop_analysis
        print(f"\n   Dry field -> {response.message}")
        print(f"   Risk factors: {', '.join(analysis.risk_factors) or 'none'}")
        print(f"   Yield estimate: {analysis.predictions.yield_prediction}% ({analysis.source})")

        print("\n✅ Agent smoke test passed")
        return True

    except Exception as e:
        print(f"\n❌ Test failed: {e}")
        return False

async def main():
    setup_logging()
    settings = get_settings()
    print(f"🔧 Environment: {settings.environment.value}, Gemini key set: {settings.gemini_enabled}\n")

    if not await test_recommendation_agent():
        sys.exit(1)

if __name__ == "__main__":
    asyncio.run(main())
