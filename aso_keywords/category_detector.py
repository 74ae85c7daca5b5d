"""Keyword category detection (branded / generic / competitor).

Resolution order:
1. An explicit brand flag from the research tool always wins.
2. Known competitor names, matched as whole words.
3. The app name, or a significant (4+ char) word of it, matched as a whole word.
4. Generic, unless the enhanced re-check upgrades it: very relevant, easy
   keywords that carry a theme term and share a word with the app name are
   treated as branded.

Competitor matching runs before the app-name check because competitor names
often share words with generic industry terms.
"""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable, Optional

from aso_keywords.config import config
from aso_keywords.models import Category

logger = logging.getLogger(__name__)


def _whole_word_pattern(phrase: str) -> re.Pattern:
    words = [re.escape(w) for w in phrase.split()]
    return re.compile(r"\b" + r"\s+".join(words) + r"\b", re.IGNORECASE)


class CategoryDetector:
    """Classify keyword text against competitor names and the app name."""

    def __init__(
        self,
        competitor_brands: Optional[Iterable[str]] = None,
        theme_terms: Optional[Iterable[str]] = None,
    ):
        if competitor_brands is None:
            competitor_brands = config.COMPETITOR_BRANDS
        if theme_terms is None:
            theme_terms = config.BRAND_THEME_TERMS
        names = []
        for name in competitor_brands:
            name = " ".join(str(name).lower().split())
            if name and name not in names:
                names.append(name)
        self.competitor_brands: tuple[str, ...] = tuple(names)
        self.theme_terms: tuple[str, ...] = tuple(
            t.strip().lower() for t in theme_terms if t and t.strip()
        )
        self._competitor_patterns = [
            (name, _whole_word_pattern(name)) for name in self.competitor_brands
        ]

    def match_competitor(self, text: str) -> Optional[str]:
        """Return the competitor name found in ``text``, if any."""
        if not text:
            return None
        for name, pattern in self._competitor_patterns:
            if pattern.search(text):
                return name
        return None

    def is_competitor(self, text: str) -> bool:
        return self.match_competitor(text) is not None

    def is_branded(self, text: str, app_name: Optional[str] = None) -> bool:
        if not text or not app_name or not app_name.strip():
            return False
        text_lower = text.lower().strip()
        app_lower = app_name.lower().strip()
        if app_lower in text_lower:
            return True
        for word in app_lower.split():
            if len(word) > 3 and re.search(r"\b" + re.escape(word) + r"\b", text_lower):
                return True
        return False

    def _has_theme_and_app_word(self, text: str, app_name: Optional[str]) -> bool:
        if not app_name:
            return False
        text_lower = text.lower()
        if not any(term in text_lower for term in self.theme_terms):
            return False
        app_words = [w for w in app_name.lower().split() if len(w) > 2]
        return any(word in text_lower for word in app_words)

    def detect(
        self,
        text: str,
        app_name: Optional[str] = None,
        is_brand: bool = False,
        relevance_score: Optional[float] = None,
        difficulty: Optional[float] = None,
    ) -> Category:
        if is_brand is True:
            return Category.BRANDED
        if not text or not text.strip():
            return Category.GENERIC

        competitor = self.match_competitor(text)
        if competitor:
            logger.debug("'%s' matched competitor '%s'", text, competitor)
            return Category.COMPETITOR

        if self.is_branded(text, app_name):
            return Category.BRANDED

        if (
            relevance_score is not None and relevance_score > 90
            and difficulty is not None and difficulty < 50
            and self._has_theme_and_app_word(text, app_name)
        ):
            logger.debug("'%s' upgraded to branded by theme re-check", text)
            return Category.BRANDED

        return Category.GENERIC


@lru_cache(maxsize=None)
def default_detector() -> CategoryDetector:
    """Detector built once from configuration and shared by module-level calls."""
    return CategoryDetector()


def detect_keyword_category(
    text: str,
    app_name: Optional[str] = None,
    is_brand: bool = False,
    relevance_score: Optional[float] = None,
    difficulty: Optional[float] = None,
) -> Category:
    """Detect a category with the configured competitor and theme lists."""
    return default_detector().detect(
        text, app_name, is_brand,
        relevance_score=relevance_score, difficulty=difficulty,
    )
