import json

import pytest

from agents.recommendation.engine import RecommendationEngine

class StaticGenerator:
    """Text generator that always answers with the same text"""

    def __init__(self, text):
        self.text = text
        self.prompts = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.text

class FailingGenerator:
    """Text generator that raises on every call"""

    def __init__(self, error=None):
        self.error = error or RuntimeError("model unavailable")
        self.calls = 0

    async def generate(self, prompt: str) -> str:
        self.calls += 1
        raise self.error

class ScriptedGenerator:
    """Answers recommendation prompts and health prompts differently"""

    def __init__(self, recommendations_text, health_text):
        self.recommendations_text = recommendations_text
        self.health_text = health_text

    async def generate(self, prompt: str) -> str:
        if "crop health assessment" in prompt:
            return self.health_text
        return self.recommendations_text

@pytest.fixture
def engine():
    return RecommendationEngine()

@pytest.fixture
def gemini_candidates():
    return json.dumps([
        {
            "type": "weather",
            "priority": "high",
            "title": "⛈️ Storm Front Approaching",
            "description": "Secure equipment before evening winds.",
            "confidence": 0.91
        },
        {"title": "Check leaves"}
    ])
