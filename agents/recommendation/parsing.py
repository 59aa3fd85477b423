# server/agents/recommendation/parsing.py
"""
Extraction of JSON payloads from free-form model output
"""
import json
import re
from typing import Any, Optional

from pydantic import BaseModel

_ARRAY_SPAN = re.compile(r"\[[\s\S]*\]")
_OBJECT_SPAN = re.compile(r"\{[\s\S]*\}")

class ParsedResponse(BaseModel):
    """Outcome of a parse attempt: ``ok`` with ``data``, or an ``error`` message"""
    ok: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, data: Any) -> "ParsedResponse":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "ParsedResponse":
        return cls(ok=False, error=error)

def _extract(text: Optional[str], pattern: "re.Pattern", expected: type) -> ParsedResponse:
    if not isinstance(text, str) or not text.strip():
        return ParsedResponse.failure("empty response")

    match = pattern.search(text)
    if not match:
        return ParsedResponse.failure("no JSON span found in response")

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        return ParsedResponse.failure(f"invalid JSON: {e}")

    if not isinstance(data, expected):
        return ParsedResponse.failure(f"expected JSON {expected.__name__}, got {type(data).__name__}")

    return ParsedResponse.success(data)

def extract_json_array(text: Optional[str]) -> ParsedResponse:
    """Parse the span from the first ``[`` to the last ``]`` as a JSON list"""
    return _extract(text, _ARRAY_SPAN, list)

def extract_json_object(text: Optional[str]) -> ParsedResponse:
    """Parse the span from the first ``{`` to the last ``}`` as a JSON object"""
    return _extract(text, _OBJECT_SPAN, dict)
