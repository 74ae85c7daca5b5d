"""Keyword priority tiers.

Hard rules catch known exceptions first (strong branded terms, efficient
high-volume terms, hopeless long-tail terms); everything else falls back to
the score scaled by a category multiplier.
"""
from __future__ import annotations

from typing import Optional

from aso_keywords.models import Category, KeywordRecord, Priority, clamp
from aso_keywords.scoring import calculate_keyword_score

CATEGORY_MULTIPLIERS = {
    Category.BRANDED: 1.3,
    Category.COMPETITOR: 0.9,
    Category.GENERIC: 1.0,
}
BRAND_FLAG_MULTIPLIER = 1.2

HIGH_THRESHOLD = 70
MEDIUM_THRESHOLD = 40


def category_multiplier(keyword: KeywordRecord) -> float:
    multiplier = CATEGORY_MULTIPLIERS.get(keyword.category, 1.0)
    if keyword.is_brand:
        multiplier *= BRAND_FLAG_MULTIPLIER
    return multiplier


def _rule_priority(keyword: KeywordRecord) -> Optional[Priority]:
    volume = keyword.search_volume
    difficulty = clamp(keyword.difficulty)
    relevance = clamp(keyword.relevance_score)

    if keyword.category is Category.BRANDED and relevance >= 70 and difficulty <= 60:
        return Priority.HIGH
    if volume >= 10000 and difficulty <= 50 and relevance >= 60:
        return Priority.HIGH
    if keyword.kei is not None and keyword.kei >= 50 and relevance >= 70:
        return Priority.HIGH
    if difficulty > 80 and volume < 5000 and relevance < 70:
        return Priority.LOW
    if volume < 100 and relevance < 80:
        return Priority.LOW
    return None


def adjusted_score(keyword: KeywordRecord) -> float:
    return calculate_keyword_score(keyword) * category_multiplier(keyword)


def calculate_keyword_priority(keyword: KeywordRecord) -> Priority:
    """Compute the priority tier, ignoring any priority already on the record."""
    rule = _rule_priority(keyword)
    if rule is not None:
        return rule

    adjusted = adjusted_score(keyword)
    if adjusted >= HIGH_THRESHOLD:
        return Priority.HIGH
    if adjusted >= MEDIUM_THRESHOLD:
        return Priority.MEDIUM
    return Priority.LOW


def resolve_priority(keyword: KeywordRecord) -> Priority:
    """Use the record's own priority when present, otherwise compute it."""
    return keyword.priority or calculate_keyword_priority(keyword)
