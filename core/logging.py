# server/core/logging.py
"""
Logging configuration for the backend
"""
import logging
import sys
from typing import Optional
from .config import get_settings

# Third-party loggers that log every outbound Gemini request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "langchain_google_genai")

def setup_logging(level: Optional[str] = None):
    """Setup logging configuration

    ``level`` overrides the configured log level, e.g. from a CLI flag.
    """
    settings = get_settings()
    level_name = (level or settings.log_level.value).upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=settings.log_format,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
