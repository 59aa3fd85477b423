# server/agents/recommendation/llm.py
"""
Text-generation capability used to augment rule-based recommendations
"""
import asyncio
import logging
from typing import Optional, Protocol, runtime_checkable

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from core.config import Settings
from core.exceptions import ExternalAPIError

logger = logging.getLogger(__name__)

@runtime_checkable
class TextGenerator(Protocol):
    """Anything that turns a prompt into free text. May raise or hang."""

    async def generate(self, prompt: str) -> str:
        ...

class GeminiTextGenerator:
    """Gemini chat model wrapped as a ``TextGenerator``

    Retries and the per-attempt timeout live here, so callers only see a
    result or an ``ExternalAPIError``.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash",
        temperature: float = 0.3,
        timeout_seconds: float = 30.0,
        max_attempts: int = 3,
    ):
        if not api_key:
            raise ExternalAPIError("Gemini API key not configured")

        self.model_name = model
        self.timeout_seconds = timeout_seconds
        self.max_attempts = max(1, max_attempts)
        self.llm = ChatGoogleGenerativeAI(
            model=model,
            temperature=temperature,
            google_api_key=api_key,
        )
        logger.info(f"Gemini text generator initialized with model {model}")

    async def _invoke_once(self, prompt: str) -> str:
        response = await asyncio.wait_for(
            self.llm.ainvoke([HumanMessage(content=prompt)]),
            timeout=self.timeout_seconds,
        )
        content = response.content
        if isinstance(content, list):
            # Multi-part responses: keep the text parts only
            content = "".join(
                part if isinstance(part, str) else part.get("text", "")
                for part in content
                if isinstance(part, (str, dict))
            )
        return content or ""

    async def generate(self, prompt: str) -> str:
        try:
            async for attempt in AsyncRetrying(
                reraise=True,
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
                retry=retry_if_exception_type(Exception),
            ):
                with attempt:
                    return await self._invoke_once(prompt)
        except Exception as e:
            logger.error(f"Gemini request failed after {self.max_attempts} attempt(s): {e}")
            raise ExternalAPIError(f"Gemini request failed: {e}") from e

def build_text_generator(settings: Settings) -> Optional[TextGenerator]:
    """Gemini generator from settings, or None when no API key is configured"""
    if not settings.gemini_enabled:
        logger.warning("No GEMINI_API_KEY found - AI augmentation disabled")
        return None

    return GeminiTextGenerator(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        temperature=settings.gemini_temperature,
        timeout_seconds=settings.gemini_timeout_seconds,
        max_attempts=settings.gemini_max_retries,
    )
