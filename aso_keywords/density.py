"""Keyword density across authored store fields.

Density = whole-word keyword occurrences / total words × 100, rounded to
one decimal.
"""
import math
import re
from dataclasses import dataclass
from typing import Iterable

from aso_keywords.models import KeywordRecord, StoreListing

_PUNCT_RE = re.compile(r"[^\w\s]")


def _round1(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def _word_count(text: str) -> int:
    return len(_PUNCT_RE.sub(" ", text.lower()).split())


def _occurrences(keyword: str, text: str) -> int:
    keyword = keyword.lower().strip()
    if not keyword:
        return 0
    pattern = re.compile(r"\b" + re.escape(keyword) + r"\b", re.IGNORECASE)
    return len(pattern.findall(text))


@dataclass
class DensityResult:
    ios: float
    android: float
    overall: float

    def to_dict(self) -> dict:
        return {"ios": self.ios, "android": self.android, "overall": self.overall}


def calculate_individual_keyword_density(keyword: str, listing: StoreListing) -> float:
    """Density of one keyword over every iOS and Android field."""
    text = " ".join(t for t in listing.ios_texts() + listing.android_texts() if t).lower()
    if not text.strip():
        return 0.0
    total = _word_count(text)
    if total == 0:
        return 0.0
    return _round1(_occurrences(keyword, text) / total * 100)


def _density(keywords: list[str], texts: Iterable[str]) -> float:
    total_words = 0
    hits = 0
    for text in texts:
        if not text:
            continue
        total_words += _word_count(text)
        hits += sum(_occurrences(kw, text) for kw in keywords)
    if total_words == 0:
        return 0.0
    return _round1(hits / total_words * 100)


def calculate_keyword_density(keywords: Iterable, listing: StoreListing) -> DensityResult:
    """Combined density of a keyword list per store and overall."""
    terms = [
        (k.text if isinstance(k, KeywordRecord) else str(k)).lower().strip()
        for k in keywords
    ]
    return DensityResult(
        ios=_density(terms, listing.ios_texts()),
        android=_density(terms, listing.android_texts()),
        overall=_density(terms, listing.ios_texts() + listing.android_texts()),
    )
