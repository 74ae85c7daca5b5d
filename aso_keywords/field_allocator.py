"""Keyword placement into store metadata fields.

iOS App Store:   Title (30) → Keywords field (100, comma-joined) → Subtitle (30)
                 → Description (everything left)
Google Play:     Title (50) → Short description (80, high priority only)
                 → Full description (everything left)

Keywords are ranked by priority tier then score, ties broken by
``sort_order`` and input position. Each bounded field is filled greedily in
that order: a keyword goes in only if the joined text (delimiters included)
stays within the field's character budget, and only if ``recommend_field``
says the keyword belongs to that field. A placed keyword is never offered to
a later field.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator

from aso_keywords.models import (
    Category,
    KeywordRecord,
    Platform,
    Priority,
    StoreField,
    as_record,
    clamp,
)
from aso_keywords.priority import resolve_priority
from aso_keywords.scoring import calculate_keyword_score

logger = logging.getLogger(__name__)

IOS_LIMITS = {"title": 30, "subtitle": 30, "keywords_field": 100}
ANDROID_LIMITS = {"title": 50, "short_description": 80}


# ── Field recommendation ───────────────────────────────────

def recommend_field(keyword: KeywordRecord, platform: Platform) -> StoreField:
    """Pick the metadata field a keyword is best suited for on a store.

    On Google Play there is no keywords field: anything that is not a title
    keyword is a description keyword, and the allocator decides between the
    short and full description.
    """
    score = calculate_keyword_score(keyword)
    priority = resolve_priority(keyword)
    volume = keyword.search_volume
    relevance = clamp(keyword.relevance_score)
    difficulty = clamp(keyword.difficulty)
    branded = keyword.category is Category.BRANDED
    high = priority is Priority.HIGH

    if platform is Platform.ANDROID:
        if (
            branded
            or (high and score > 70)
            or (volume >= 10000 and relevance >= 75 and difficulty < 55)
        ):
            return StoreField.TITLE
        return StoreField.DESCRIPTION

    if (
        branded
        or (high and score > 75)
        or (volume >= 5000 and relevance >= 80 and difficulty < 60)
    ):
        return StoreField.TITLE

    if (
        (high and score > 65)
        or (keyword.kei is not None and keyword.kei > 40 and relevance > 70)
        or (keyword.conversion_rate is not None and keyword.conversion_rate > 5 and volume > 1000)
    ):
        return StoreField.SUBTITLE

    if (
        priority is Priority.MEDIUM
        or 50 < score <= 65
        or (1000 <= volume < 10000 and relevance >= 60)
    ):
        return StoreField.KEYWORDS

    return StoreField.DESCRIPTION


def is_short_description_keyword(keyword: KeywordRecord) -> bool:
    """Google Play short description: description keywords with high priority."""
    return (
        recommend_field(keyword, Platform.ANDROID) is StoreField.DESCRIPTION
        and resolve_priority(keyword) is Priority.HIGH
    )


# ── Ranking ────────────────────────────────────────────────

@dataclass(frozen=True)
class RankedKeyword:
    record: KeywordRecord
    score: float
    priority: Priority
    position: int

    @property
    def text(self) -> str:
        return self.record.text


def rank_keywords(records: Iterable, platform: Platform) -> list[RankedKeyword]:
    """Keep the keywords targeting ``platform`` and order them for placement."""
    ranked = []
    for position, raw in enumerate(records):
        record = as_record(raw, position)
        if not record.platform.includes(platform):
            continue
        if not record.text:
            logger.debug("Skipping blank keyword at position %d", position)
            continue
        ranked.append(RankedKeyword(
            record=record,
            score=calculate_keyword_score(record),
            priority=resolve_priority(record),
            position=position,
        ))
    ranked.sort(key=lambda k: (-k.priority.rank, -k.score, k.record.sort_order, k.position))
    return ranked


# ── Allocation ─────────────────────────────────────────────

@dataclass(frozen=True)
class FieldBudget:
    """A character-limited destination field."""
    name: str
    max_chars: int
    delimiter: str
    accepts: Callable[[KeywordRecord], bool]

    def cost(self, used: int, text: str) -> int:
        return len(text) if used == 0 else len(self.delimiter) + len(text)


@dataclass(frozen=True)
class Assignment:
    keyword: RankedKeyword
    bucket: str

    @property
    def text(self) -> str:
        return self.keyword.text


IOS_FIELDS = (
    FieldBudget(
        "title", IOS_LIMITS["title"], " ",
        lambda k: recommend_field(k, Platform.IOS) is StoreField.TITLE,
    ),
    FieldBudget(
        "keywords_field", IOS_LIMITS["keywords_field"], ",",
        lambda k: recommend_field(k, Platform.IOS) is StoreField.KEYWORDS,
    ),
    FieldBudget(
        "subtitle", IOS_LIMITS["subtitle"], " ",
        lambda k: recommend_field(k, Platform.IOS) is StoreField.SUBTITLE,
    ),
)
IOS_OVERFLOW = "description"

ANDROID_FIELDS = (
    FieldBudget(
        "title", ANDROID_LIMITS["title"], " ",
        lambda k: recommend_field(k, Platform.ANDROID) is StoreField.TITLE,
    ),
    FieldBudget(
        "short_description", ANDROID_LIMITS["short_description"], " ",
        is_short_description_keyword,
    ),
)
ANDROID_OVERFLOW = "full_description"


def iter_assignments(
    records: Iterable,
    platform: Platform,
    budgets: tuple[FieldBudget, ...],
    overflow: str,
) -> Iterator[Assignment]:
    """Yield ``(keyword, bucket)`` placements in the order they are made."""
    ranked = rank_keywords(records, platform)
    placed: set[int] = set()

    for budget in budgets:
        used = 0
        for kw in ranked:
            if used >= budget.max_chars:
                break
            if kw.position in placed or not budget.accepts(kw.record):
                continue
            cost = budget.cost(used, kw.text)
            if used + cost > budget.max_chars:
                logger.debug(
                    "'%s' does not fit %s (%d/%d chars used)",
                    kw.text, budget.name, used, budget.max_chars,
                )
                continue
            used += cost
            placed.add(kw.position)
            yield Assignment(kw, budget.name)

    for kw in ranked:
        if kw.position not in placed:
            yield Assignment(kw, overflow)


def iter_ios_assignments(records: Iterable) -> Iterator[Assignment]:
    return iter_assignments(records, Platform.IOS, IOS_FIELDS, IOS_OVERFLOW)


def iter_android_assignments(records: Iterable) -> Iterator[Assignment]:
    return iter_assignments(records, Platform.ANDROID, ANDROID_FIELDS, ANDROID_OVERFLOW)


def _group(assignments: Iterable[Assignment], names: Iterable[str]) -> dict[str, list[str]]:
    groups: dict[str, list[str]] = {name: [] for name in names}
    for a in assignments:
        groups[a.bucket].append(a.text)
    return groups


# ── Reports ────────────────────────────────────────────────

@dataclass
class IOSKeywordSet:
    title: list[str] = field(default_factory=list)
    subtitle: list[str] = field(default_factory=list)
    keywords_field: str = ""
    description: list[str] = field(default_factory=list)

    @property
    def title_text(self) -> str:
        return " ".join(self.title)

    @property
    def subtitle_text(self) -> str:
        return " ".join(self.subtitle)

    def to_dict(self) -> dict:
        return {
            "title": list(self.title),
            "subtitle": list(self.subtitle),
            "keywords_field": self.keywords_field,
            "description": list(self.description),
        }

    def summary(self) -> str:
        return "\n".join([
            "🍎 iOS App Store",
            f"   Title ({len(self.title_text)}/{IOS_LIMITS['title']}): {self.title_text}",
            f"   Subtitle ({len(self.subtitle_text)}/{IOS_LIMITS['subtitle']}): {self.subtitle_text}",
            f"   Keywords ({len(self.keywords_field)}/{IOS_LIMITS['keywords_field']}): {self.keywords_field}",
            f"   Description keywords: {len(self.description)}",
        ])


@dataclass
class AndroidKeywordSet:
    title: list[str] = field(default_factory=list)
    short_description: list[str] = field(default_factory=list)
    full_description: list[str] = field(default_factory=list)

    @property
    def title_text(self) -> str:
        return " ".join(self.title)

    @property
    def short_description_text(self) -> str:
        return " ".join(self.short_description)

    def to_dict(self) -> dict:
        return {
            "title": list(self.title),
            "short_description": list(self.short_description),
            "full_description": list(self.full_description),
        }

    def summary(self) -> str:
        short = self.short_description_text
        return "\n".join([
            "🤖 Google Play",
            f"   Title ({len(self.title_text)}/{ANDROID_LIMITS['title']}): {self.title_text}",
            f"   Short description ({len(short)}/{ANDROID_LIMITS['short_description']}): {short}",
            f"   Full description keywords: {len(self.full_description)}",
        ])


@dataclass
class OptimizedKeywordSets:
    ios: IOSKeywordSet
    android: AndroidKeywordSet

    def to_dict(self) -> dict:
        return {"ios": self.ios.to_dict(), "android": self.android.to_dict()}


def optimize_ios_keywords(records: Iterable) -> IOSKeywordSet:
    groups = _group(
        iter_ios_assignments(records),
        [b.name for b in IOS_FIELDS] + [IOS_OVERFLOW],
    )
    return IOSKeywordSet(
        title=groups["title"],
        subtitle=groups["subtitle"],
        keywords_field=",".join(groups["keywords_field"]),
        description=groups["description"],
    )


def optimize_android_keywords(records: Iterable) -> AndroidKeywordSet:
    groups = _group(
        iter_android_assignments(records),
        [b.name for b in ANDROID_FIELDS] + [ANDROID_OVERFLOW],
    )
    return AndroidKeywordSet(
        title=groups["title"],
        short_description=groups["short_description"],
        full_description=groups["full_description"],
    )


def generate_optimized_keyword_sets(records: Iterable) -> OptimizedKeywordSets:
    records = list(records)
    return OptimizedKeywordSets(
        ios=optimize_ios_keywords(records),
        android=optimize_android_keywords(records),
    )
