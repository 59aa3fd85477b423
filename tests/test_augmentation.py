import json

import pytest

from agents.recommendation.augmentation import AugmentationAdapter, complete_candidate, summarize_reading
from agents.recommendation.normalizer import normalize_reading
from conftest import FailingGenerator, StaticGenerator

def test_missing_fields_are_filled_with_defaults():
    rec = complete_candidate({})

    assert rec.category == "disease"
    assert rec.priority == "medium"
    assert rec.title == "AI Recommendation"
    assert rec.description == "Please review your farm conditions."
    assert rec.confidence_score == 0.85
    assert rec.action_required is False
    assert rec.source == "gemini"
    assert rec.id.startswith("gemini-")
    assert [a.action for a in rec.actions] == ["view_prevention", "contact_expert"]

def test_high_priority_candidate_requires_action():
    rec = complete_candidate({"type": "energy", "priority": "HIGH", "confidence": "0.7"})

    assert rec.category == "energy"
    assert rec.priority == "high"
    assert rec.action_required is True
    assert rec.confidence_score == 0.7

def test_unknown_values_and_out_of_range_confidence_are_repaired():
    rec = complete_candidate({"type": "pests", "priority": "urgent", "confidence": 7})

    assert rec.category == "disease"
    assert rec.priority == "medium"
    assert rec.confidence_score == 1.0

def test_summary_marks_missing_sensors():
    summary = summarize_reading(normalize_reading({"temperature_C": 24.5}))

    assert "- Temperature: 24.5°C" in summary
    assert "- Humidity: N/A" in summary

@pytest.mark.asyncio
async def test_suggest_parses_candidates(gemini_candidates):
    generator = StaticGenerator(f"Sure!\n{gemini_candidates}")
    adapter = AugmentationAdapter(generator)

    recs = await adapter.suggest(normalize_reading({"wind_kmh": 20}))

    assert [r.title for r in recs] == ["⛈️ Storm Front Approaching", "Check leaves"]
    assert recs[0].category == "weather"
    assert recs[0].confidence_score == 0.91
    assert "up to 3" in generator.prompts[0]
    assert "Wind Speed: 20 km/h" in generator.prompts[0]

@pytest.mark.asyncio
async def test_suggest_does_not_truncate_long_lists():
    candidates = [{"title": f"Tip {i}"} for i in range(5)]
    adapter = AugmentationAdapter(StaticGenerator(json.dumps(candidates)))

    assert len(await adapter.suggest(normalize_reading({}))) == 5

@pytest.mark.asyncio
async def test_suggest_skips_non_object_entries():
    adapter = AugmentationAdapter(StaticGenerator('["just text", {"title": "Real"}]'))

    recs = await adapter.suggest(normalize_reading({}))

    assert [r.title for r in recs] == ["Real"]

@pytest.mark.asyncio
async def test_suggest_returns_empty_on_generator_error():
    adapter = AugmentationAdapter(FailingGenerator())

    assert await adapter.suggest(normalize_reading({})) == []

@pytest.mark.asyncio
async def test_suggest_returns_empty_on_unparseable_text():
    adapter = AugmentationAdapter(StaticGenerator("No recommendations today."))

    assert await adapter.suggest(normalize_reading({})) == []

@pytest.mark.asyncio
async def test_health_assessment_parsed_from_object():
    text = '{"health": 64, "riskFactors": ["Heat"], "yieldPrediction": 90, "harvestDays": 45, "nextIrrigation": "tomorrow evening"}'
    adapter = AugmentationAdapter(StaticGenerator(text))

    assessment = await adapter.assess_crop_health({"soil_moisture": 40}, 5)

    assert assessment.health == 64
    assert assessment.risk_factors == ["Heat"]
    assert assessment.harvest_days == 45
    assert assessment.next_irrigation == "tomorrow evening"

@pytest.mark.asyncio
async def test_health_assessment_with_wrong_types_is_none():
    adapter = AugmentationAdapter(StaticGenerator('{"health": "great"}'))

    assert await adapter.assess_crop_health({}, 1) is None
