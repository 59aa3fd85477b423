# server/agents/recommendation/ranking.py
"""
Deduplication and priority ordering of recommendations
"""
from typing import Iterable, List

from agents.recommendation.models import Recommendation

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}
SIMILARITY_THRESHOLD = 0.8

def title_similarity(first: str, second: str) -> float:
    """Share of whitespace-separated words the two titles have in common"""
    s1 = first.lower()
    s2 = second.lower()
    if s1 == s2:
        return 1.0

    words1 = s1.split()
    words2 = s2.split()
    longest = max(len(words1), len(words2))
    if longest == 0:
        return 0.0

    common = [word for word in words1 if word in words2]
    return len(common) / longest

def is_near_duplicate(a: Recommendation, b: Recommendation) -> bool:
    return (
        a.category == b.category
        and a.priority == b.priority
        and title_similarity(a.title, b.title) > SIMILARITY_THRESHOLD
    )

def deduplicate(recommendations: Iterable[Recommendation]) -> List[Recommendation]:
    """Drop later near-duplicates, keeping the first one seen"""
    unique: List[Recommendation] = []
    for current in recommendations:
        if not any(is_near_duplicate(kept, current) for kept in unique):
            unique.append(current)
    return unique

def sort_by_priority(recommendations: Iterable[Recommendation]) -> List[Recommendation]:
    return sorted(recommendations, key=lambda rec: PRIORITY_ORDER[rec.priority])

def deduplicate_and_sort(recommendations: Iterable[Recommendation]) -> List[Recommendation]:
    return sort_by_priority(deduplicate(recommendations))
