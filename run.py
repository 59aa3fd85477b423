# server/run.py
"""
Main entry point for the Atama AI Backend
"""

import uvicorn
import logging
from contextlib import asynccontextmanager
from dotenv import load_dotenv

load_dotenv()

from api.app import create_app
from core.config import get_settings, validate_api_keys
from core.logging import setup_logging
from agents.recommendation.agent import RecommendationAgent
from agents.base import agent_registry

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app):
    """Application lifespan management"""

    logger.info("🚀 Starting Atama AI Backend")

    try:
        validate_api_keys(get_settings())

        recommendation_agent = RecommendationAgent()
        agent_registry.register(recommendation_agent)
        logger.info("✅ Recommendation agent registered")

        health_results = await agent_registry.health_check_all()
        for agent_name, health in health_results.items():
            status = "✅" if health["status"] == "healthy" else "❌"
            logger.info(f"{status} {agent_name}: {health['status']}")

    except Exception as e:
        logger.error(f"❌ Failed to initialize agents: {e}")
        raise

    yield

    agent_registry.unregister("recommendation")
    logger.info("🛑 Shutting down Atama AI Backend")

def create_application():
    """Create FastAPI application with all configurations"""
    return create_app(lifespan=lifespan)

def main():
    """Main entry point"""
    settings = get_settings()
    log_level = settings.log_level.value.lower()

    logger.info(f"Starting server on {settings.api_host}:{settings.api_port}")
    logger.info(f"Environment: {settings.environment.value}")
    logger.info(f"Debug mode: {settings.debug}")

    if settings.debug:
        # Import string so reload can re-create the app
        uvicorn.run(
            "run:create_application",
            factory=True,
            host=settings.api_host,
            port=settings.api_port,
            reload=True,
            log_level=log_level,
            access_log=True
        )
    else:
        uvicorn.run(
            create_application(),
            host=settings.api_host,
            port=settings.api_port,
            reload=False,
            log_level=log_level,
            access_log=True
        )

if __name__ == "__main__":
    main()
