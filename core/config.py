# server/core/config.py
"""
Configuration management for the Atama AI backend
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional, Dict, Any
import os
import logging
from functools import lru_cache
from enum import Enum
from dotenv import load_dotenv
load_dotenv()

logger = logging.getLogger(__name__)

class Environment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"

class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

class Settings(BaseSettings):
    """Application settings with validation"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Environment
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True

    # API Configuration
    api_title: str = "Atama AI Backend"
    api_version: str = "1.0.0"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: LogLevel = LogLevel.INFO
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # CORS
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173"
    ]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["*"]
    cors_allow_headers: List[str] = ["*"]

    # Gemini text generation
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    gemini_temperature: float = 0.3
    gemini_timeout_seconds: float = 30.0
    gemini_max_retries: int = 3
    require_gemini: bool = False

    # Agent Configurations
    recommendation_config: Dict[str, Any] = {
        "max_ai_recommendations": 3,
        "crop_analysis_top_n": 3,
        "harvest_days_default": 30,
        "next_irrigation_days": 2
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        # Older deployments export the key under the Google SDK name
        if not self.gemini_api_key:
            self.gemini_api_key = os.getenv('GEMINI_API_KEY') or os.getenv('GOOGLE_API_KEY')

    def get_agent_config(self, agent_name: str) -> Dict[str, Any]:
        """Get configuration for specific agent"""
        config_map = {
            "recommendation": self.recommendation_config
        }
        return config_map.get(agent_name, {})

    @property
    def gemini_enabled(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()

# Validation functions
def validate_api_keys(settings: Settings) -> None:
    """Validate required API keys based on environment"""
    logger.info(f"🔑 GEMINI_API_KEY: {'Set' if settings.gemini_api_key else 'NOT SET'}")

    if settings.gemini_api_key:
        return

    if settings.require_gemini and settings.is_production:
        raise ValueError("Missing required API keys in production: GEMINI_API_KEY")

    logger.warning("⚠️  GEMINI_API_KEY missing - recommendations will use local rules only")
