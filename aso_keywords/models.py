"""Keyword record model and store listing fields.

Raw rows coming from imports or storage are resolved once into
``KeywordRecord`` values: numbers are coerced (bad input becomes 0),
bounded metrics are clamped, and unknown enum values are dropped so the
classifiers can recompute them.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional


class _ParseableEnum(str, Enum):
    @classmethod
    def parse(cls, value):
        """Return the matching member, or None for anything unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class Category(_ParseableEnum):
    BRANDED = "branded"
    GENERIC = "generic"
    COMPETITOR = "competitor"


class Priority(_ParseableEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self]


PRIORITY_RANK = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


class Platform(_ParseableEnum):
    IOS = "ios"
    ANDROID = "android"
    BOTH = "both"

    def includes(self, target: "Platform") -> bool:
        return self is Platform.BOTH or self is target


class StoreField(_ParseableEnum):
    TITLE = "title"
    SUBTITLE = "subtitle"
    KEYWORDS = "keywords"
    DESCRIPTION = "description"


# ── Numeric coercion ───────────────────────────────────────

def to_number(value, default: float = 0.0) -> float:
    """Coerce a loosely typed value to float; unparsable input gives ``default``."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "").rstrip("%")
        if not text:
            return default
        try:
            number = float(text)
        except ValueError:
            return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def to_optional_number(value) -> Optional[float]:
    """Like ``to_number`` but keeps "unknown" distinct from zero."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    number = to_number(value, default=math.nan)
    return None if math.isnan(number) else number


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def to_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().upper() in ("TRUE", "1", "YES")


def _clamp_optional(value: Optional[float]) -> Optional[float]:
    return None if value is None else clamp(value)


def _non_negative(value: Optional[float]) -> Optional[float]:
    return None if value is None else max(0.0, value)


_KEY_RE = re.compile(r"[^a-z0-9]")


def _key(name) -> str:
    return _KEY_RE.sub("", str(name).lower())


# ── Keyword record ─────────────────────────────────────────

@dataclass(frozen=True)
class KeywordRecord:
    """One keyword with its research metrics and placement annotations."""
    text: str
    search_volume: float = 0.0
    difficulty: float = 0.0
    relevance_score: float = 0.0
    category: Optional[Category] = None
    is_brand: bool = False
    platform: Platform = Platform.BOTH
    priority: Optional[Priority] = None
    recommended_field: Optional[StoreField] = None
    chance: Optional[float] = None
    kei: Optional[float] = None
    results: Optional[float] = None
    growth_yesterday: Optional[float] = None
    monthly_downloads: Optional[float] = None
    maximum_reach: Optional[float] = None
    conversion_rate: Optional[float] = None
    sort_order: int = 0

    # Accepted spellings for each field when resolving raw dicts. Keys are
    # compared lowercased with separators removed, so "Search Volume",
    # "search_volume" and "searchVolume" are the same key.
    ALIASES = {
        "text": ("text", "keyword"),
        "search_volume": ("search_volume", "volume"),
        "difficulty": ("difficulty",),
        "relevance_score": ("relevance_score", "relevance", "relevancy_score", "relevancy"),
        "category": ("category",),
        "is_brand": ("is_brand", "brand"),
        "platform": ("platform",),
        "priority": ("priority",),
        "recommended_field": ("recommended_field", "field"),
        "chance": ("chance",),
        "kei": ("kei",),
        "results": ("results",),
        "growth_yesterday": ("growth_yesterday", "growth"),
        "monthly_downloads": ("monthly_downloads",),
        "maximum_reach": ("maximum_reach",),
        "conversion_rate": ("conversion_rate",),
        "sort_order": ("sort_order",),
    }

    @classmethod
    def from_dict(cls, data: dict, sort_order: Optional[int] = None) -> "KeywordRecord":
        """Resolve a partial, loosely typed mapping into a complete record."""
        keys: dict = {}
        for key, value in data.items():
            keys.setdefault(_key(key), value)

        def pick(name):
            for alias in cls.ALIASES[name]:
                if _key(alias) in keys:
                    return keys[_key(alias)]
            return None

        order = pick("sort_order")
        if order is None or to_optional_number(order) is None:
            order = sort_order if sort_order is not None else 0

        return cls(
            text=str(pick("text") or "").strip(),
            search_volume=max(0.0, to_number(pick("search_volume"))),
            difficulty=clamp(to_number(pick("difficulty"))),
            relevance_score=clamp(to_number(pick("relevance_score"))),
            category=Category.parse(pick("category")),
            is_brand=to_bool(pick("is_brand")),
            platform=Platform.parse(pick("platform")) or Platform.BOTH,
            priority=Priority.parse(pick("priority")),
            recommended_field=StoreField.parse(pick("recommended_field")),
            chance=_clamp_optional(to_optional_number(pick("chance"))),
            kei=_non_negative(to_optional_number(pick("kei"))),
            results=_non_negative(to_optional_number(pick("results"))),
            growth_yesterday=to_optional_number(pick("growth_yesterday")),
            monthly_downloads=_non_negative(to_optional_number(pick("monthly_downloads"))),
            maximum_reach=_non_negative(to_optional_number(pick("maximum_reach"))),
            conversion_rate=_clamp_optional(to_optional_number(pick("conversion_rate"))),
            sort_order=int(to_number(order)),
        )

    def to_dict(self) -> dict:
        d = asdict(self)
        for key in ("category", "platform", "priority", "recommended_field"):
            if d[key] is not None:
                d[key] = d[key].value
        return d


def as_record(value, position: int = 0) -> KeywordRecord:
    """Accept either a ready record or a raw mapping."""
    if isinstance(value, KeywordRecord):
        return value
    return KeywordRecord.from_dict(value, sort_order=position)


# ── Authored listing text ──────────────────────────────────

@dataclass(frozen=True)
class StoreListing:
    """Metadata text currently authored for both storefronts."""
    ios_app_name: str = ""
    ios_subtitle: str = ""
    ios_keywords: str = ""
    ios_description: str = ""
    android_app_name: str = ""
    android_short_description: str = ""
    android_full_description: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "StoreListing":
        return cls(**{
            name: str(data.get(name) or "")
            for name in cls.__dataclass_fields__
        })

    def ios_fields(self) -> dict[str, str]:
        return {
            "title": self.ios_app_name,
            "subtitle": self.ios_subtitle,
            "keywords_field": self.ios_keywords,
        }

    def android_fields(self) -> dict[str, str]:
        return {
            "title": self.android_app_name,
            "short_description": self.android_short_description,
            "full_description": self.android_full_description,
        }

    def ios_texts(self) -> list[str]:
        return [
            self.ios_app_name, self.ios_subtitle,
            self.ios_keywords, self.ios_description,
        ]

    def android_texts(self) -> list[str]:
        return [
            self.android_app_name, self.android_short_description,
            self.android_full_description,
        ]
