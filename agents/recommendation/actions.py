# server/agents/recommendation/actions.py
"""
Follow-up actions offered by the dashboard for each recommendation category
"""
from typing import Dict, List, Tuple

from agents.recommendation.models import RecommendationAction

ACTION_CATALOG: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "irrigation": (
        ("Schedule Irrigation", "schedule_irrigation"),
        ("View Water Usage", "view_water_usage"),
    ),
    "fertilizer": (
        ("Order Fertilizer", "order_fertilizer"),
        ("Calculate Amount", "calculate_fertilizer"),
    ),
    "disease": (
        ("View Prevention Tips", "view_prevention"),
        ("Contact Expert", "contact_expert"),
    ),
    "weather": (
        ("View Forecast", "view_forecast"),
        ("Adjust Schedule", "adjust_schedule"),
    ),
    "energy": (
        ("Maintenance Guide", "solar_maintenance"),
        ("View Usage", "view_energy_usage"),
    ),
}

def actions_for_category(category: str) -> List[RecommendationAction]:
    """Fresh action list for a category; unknown categories get none"""
    return [
        RecommendationAction(label=label, action=action)
        for label, action in ACTION_CATALOG.get(category, ())
    ]
