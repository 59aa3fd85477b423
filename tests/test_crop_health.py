import random
from datetime import datetime, timedelta, timezone

import pytest

from agents.recommendation.engine import (
    RecommendationEngine, normalize_factor, placeholder_yield_estimate
)
from conftest import FailingGenerator, ScriptedGenerator, StaticGenerator

HEALTHY = {"soil_moisture": 70, "temperature": 30, "ph": 7.5, "nitrogen": 50, "phosphorus": 50,
           "potassium": 50, "sol_power_W": 40, "sol_voltage_V": 13}

def days_from_now(iso_value):
    delta = datetime.fromisoformat(iso_value) - datetime.now(timezone.utc)
    return delta / timedelta(days=1)

@pytest.mark.parametrize("value,expected", [
    (0, 0.0), (None, 0.0), (10, 0.0), (30, 0.0), (50, 0.5), (70, 1.0), (95, 1.0)
])
def test_normalize_factor(value, expected):
    assert normalize_factor(value, 30, 70) == expected

def test_placeholder_yield_range():
    rng = random.Random(7)
    for _ in range(200):
        assert 80 <= placeholder_yield_estimate(rng) < 120

@pytest.mark.asyncio
async def test_empty_history_scores_zero(engine):
    analysis = await engine.analyze_crop_health([])

    assert analysis.health == 0
    assert analysis.risk_factors == [
        "Low soil moisture", "Temperature stress", "pH imbalance", "Nutrient deficiency"
    ]
    assert analysis.source == "local"
    assert len(analysis.recommendations) == 3

@pytest.mark.asyncio
async def test_optimal_readings_score_full_health(engine):
    analysis = await engine.analyze_crop_health([HEALTHY])

    assert analysis.health == 100
    assert analysis.risk_factors == []
    assert analysis.recommendations == []

@pytest.mark.asyncio
async def test_partial_health_and_risk_labels(engine):
    # moisture 0.5, temperature 0.2, pH 0.0 (at the lower bound), nutrients 0.5
    reading = {"soil_moisture": 50, "temperature": 22, "ph": 6, "nitrogen": 35, "phosphorus": 35, "potassium": 35}

    analysis = await engine.analyze_crop_health([reading, HEALTHY])

    assert analysis.health == 30
    assert analysis.risk_factors == ["Temperature stress", "pH imbalance"]

@pytest.mark.asyncio
async def test_local_predictions(engine):
    analysis = await engine.analyze_crop_health([HEALTHY])
    predictions = analysis.predictions

    assert 80 <= predictions.yield_prediction < 120
    assert 29.9 < days_from_now(predictions.harvest_date) <= 30
    assert 1.9 < days_from_now(predictions.next_irrigation) <= 2
    assert predictions.irrigation_guidance is None

@pytest.mark.asyncio
async def test_only_top_three_recommendations_are_embedded(engine):
    reading = {"soil_moisture": 10, "humidity": 90, "temperature": 25, "wind_kmh": 60}

    analysis = await engine.analyze_crop_health([reading])
    full = await engine.generate_recommendations(reading)

    assert len(full) > 3
    assert [r.title for r in analysis.recommendations] == [r.title for r in full[:3]]

@pytest.mark.asyncio
async def test_gemini_assessment_is_used():
    health = ('{"health": 140, "riskFactors": ["Heat", "Drought", "Pests", "Wind"], '
              '"yieldPrediction": 92, "harvestDays": 10, "nextIrrigation": "Early tomorrow morning"}')
    engine = RecommendationEngine(text_generator=ScriptedGenerator("[]", health))

    analysis = await engine.analyze_crop_health([HEALTHY, HEALTHY])

    assert analysis.source == "gemini"
    assert analysis.health == 100
    assert analysis.risk_factors == ["Heat", "Drought", "Pests"]
    assert analysis.predictions.yield_prediction == 92
    assert 9.9 < days_from_now(analysis.predictions.harvest_date) <= 10
    assert 1.9 < days_from_now(analysis.predictions.next_irrigation) <= 2
    assert analysis.predictions.irrigation_guidance == "Early tomorrow morning"

@pytest.mark.asyncio
async def test_gemini_assessment_defaults_and_iso_irrigation():
    when = (datetime.now(timezone.utc) + timedelta(days=4)).isoformat()
    engine = RecommendationEngine(text_generator=ScriptedGenerator("[]", f'{{"nextIrrigation": "{when}"}}'))

    analysis = await engine.analyze_crop_health([HEALTHY])

    assert analysis.health == 75
    assert analysis.predictions.yield_prediction == 85
    assert analysis.predictions.next_irrigation == when
    assert analysis.predictions.irrigation_guidance is None

@pytest.mark.asyncio
async def test_gemini_failure_falls_back_to_local():
    engine = RecommendationEngine(text_generator=FailingGenerator())

    analysis = await engine.analyze_crop_health([HEALTHY])

    assert analysis.source == "local"
    assert analysis.health == 100

@pytest.mark.asyncio
async def test_unparseable_gemini_assessment_falls_back_to_local():
    engine = RecommendationEngine(text_generator=StaticGenerator("Crops look fine."))

    analysis = await engine.analyze_crop_health([HEALTHY])

    assert analysis.source == "local"

@pytest.mark.asyncio
async def test_empty_history_skips_gemini_assessment():
    generator = StaticGenerator('{"health": 90}')
    engine = RecommendationEngine(text_generator=generator)

    analysis = await engine.analyze_crop_health([])

    assert analysis.source == "local"
    assert analysis.health == 0
    assert all("crop health assessment" not in p for p in generator.prompts)

@pytest.mark.asyncio
async def test_numeric_next_irrigation_is_a_day_offset():
    engine = RecommendationEngine(text_generator=ScriptedGenerator("[]", '{"health": 60, "nextIrrigation": 3}'))

    analysis = await engine.analyze_crop_health([HEALTHY])

    assert analysis.source == "gemini"
    assert analysis.health == 60
    assert 2.9 < days_from_now(analysis.predictions.next_irrigation) <= 3
    assert analysis.predictions.irrigation_guidance is None

@pytest.mark.asyncio
async def test_negative_next_irrigation_uses_default_offset():
    engine = RecommendationEngine(text_generator=ScriptedGenerator("[]", '{"nextIrrigation": -5}'))

    analysis = await engine.analyze_crop_health([HEALTHY])

    assert analysis.source == "gemini"
    assert 1.9 < days_from_now(analysis.predictions.next_irrigation) <= 2

@pytest.mark.asyncio
async def test_absent_nutrients_count_as_zero_in_the_mean(engine):
    analysis = await engine.analyze_crop_health([{"nitrogen": 90}])

    assert analysis.health == 8
    assert "Nutrient deficiency" not in analysis.risk_factors
    assert analysis.risk_factors == ["Low soil moisture", "Temperature stress", "pH imbalance"]
