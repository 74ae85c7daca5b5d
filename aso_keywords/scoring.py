"""Keyword quality score (0-100).

Base score weighs normalized search volume and relevance against
difficulty; auxiliary research metrics add small bonuses when known:

    norm_volume = min(volume / 500000 * 100, 100)
    base        = norm_volume * 0.30 + relevance * 0.30 - difficulty * 0.20
    kei         = min(kei / 100 * 10, 10) * 0.10
    conversion  = conversion_rate / 100 * 10 * 0.10
    growth      = min(growth / 10, 5) * 0.10        (positive growth only)
    chance      = chance / 100 * 5 * 0.10
"""
from dataclasses import dataclass

from aso_keywords.models import KeywordRecord, clamp

VOLUME_CEILING = 500_000

VOLUME_WEIGHT = 0.30
RELEVANCE_WEIGHT = 0.30
DIFFICULTY_WEIGHT = 0.20
BONUS_WEIGHT = 0.10


@dataclass
class ScoreBreakdown:
    normalized_volume: float
    base: float
    kei_bonus: float = 0.0
    conversion_bonus: float = 0.0
    growth_bonus: float = 0.0
    chance_bonus: float = 0.0

    @property
    def bonus(self) -> float:
        return self.kei_bonus + self.conversion_bonus + self.growth_bonus + self.chance_bonus

    @property
    def total(self) -> float:
        return clamp(self.base + self.bonus)

    def to_dict(self) -> dict:
        return {
            "normalized_volume": self.normalized_volume,
            "base": self.base,
            "kei_bonus": self.kei_bonus,
            "conversion_bonus": self.conversion_bonus,
            "growth_bonus": self.growth_bonus,
            "chance_bonus": self.chance_bonus,
            "total": self.total,
        }


def score_breakdown(keyword: KeywordRecord) -> ScoreBreakdown:
    """Compute every component of the keyword score."""
    volume = max(0.0, keyword.search_volume)
    normalized_volume = min(volume / VOLUME_CEILING * 100, 100)
    base = (
        normalized_volume * VOLUME_WEIGHT
        + clamp(keyword.relevance_score) * RELEVANCE_WEIGHT
        - clamp(keyword.difficulty) * DIFFICULTY_WEIGHT
    )
    result = ScoreBreakdown(normalized_volume=normalized_volume, base=base)

    if keyword.kei is not None:
        result.kei_bonus = min(keyword.kei / 100 * 10, 10) * BONUS_WEIGHT
    if keyword.conversion_rate is not None:
        result.conversion_bonus = clamp(keyword.conversion_rate) / 100 * 10 * BONUS_WEIGHT
    if keyword.growth_yesterday is not None and keyword.growth_yesterday > 0:
        result.growth_bonus = min(keyword.growth_yesterday / 10, 5) * BONUS_WEIGHT
    if keyword.chance is not None:
        result.chance_bonus = clamp(keyword.chance) / 100 * 5 * BONUS_WEIGHT
    return result


def calculate_keyword_score(keyword: KeywordRecord) -> float:
    """Score a keyword for ranking; always within [0, 100]."""
    return score_breakdown(keyword).total
