"""End-to-end keyword optimization: annotate, then allocate per store."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional

from aso_keywords.category_detector import CategoryDetector, default_detector
from aso_keywords.field_allocator import (
    AndroidKeywordSet,
    IOSKeywordSet,
    optimize_android_keywords,
    optimize_ios_keywords,
    recommend_field,
)
from aso_keywords.models import KeywordRecord, Platform, as_record
from aso_keywords.priority import calculate_keyword_priority
from aso_keywords.scoring import calculate_keyword_score

logger = logging.getLogger(__name__)


def annotate_keyword(
    record: KeywordRecord,
    app_name: Optional[str] = None,
    detector: Optional[CategoryDetector] = None,
) -> KeywordRecord:
    """Fill in missing category, priority and recommended field."""
    detector = detector or default_detector()
    annotated = record

    if annotated.category is None:
        annotated = replace(annotated, category=detector.detect(
            record.text, app_name, record.is_brand,
            relevance_score=record.relevance_score,
            difficulty=record.difficulty,
        ))

    if annotated.priority is None:
        annotated = replace(annotated, priority=calculate_keyword_priority(annotated))

    if annotated.recommended_field is None:
        # Keywords shared by both stores are placed with the iOS rules.
        target = Platform.ANDROID if annotated.platform is Platform.ANDROID else Platform.IOS
        annotated = replace(annotated, recommended_field=recommend_field(annotated, target))

    return annotated


def annotate_keywords(
    records: Iterable,
    app_name: Optional[str] = None,
    detector: Optional[CategoryDetector] = None,
) -> list[KeywordRecord]:
    """Annotate every record, keeping input order."""
    detector = detector or default_detector()
    return [
        annotate_keyword(as_record(raw, position), app_name, detector)
        for position, raw in enumerate(records)
    ]


@dataclass
class OptimizationReport:
    keywords: list[KeywordRecord]
    ios: IOSKeywordSet
    android: AndroidKeywordSet

    def to_dict(self) -> dict:
        return {
            "keywords": [
                dict(k.to_dict(), score=round(calculate_keyword_score(k), 2))
                for k in self.keywords
            ],
            "ios": self.ios.to_dict(),
            "android": self.android.to_dict(),
        }

    def summary(self) -> str:
        counts = {"high": 0, "medium": 0, "low": 0}
        for k in self.keywords:
            if k.priority is not None:
                counts[k.priority.value] += 1
        lines = [
            f"🔑 Keywords analyzed: {len(self.keywords)}",
            f"   Priority: {counts['high']} high / {counts['medium']} medium / {counts['low']} low",
            "",
            self.ios.summary(),
            "",
            self.android.summary(),
        ]
        return "\n".join(lines)


def optimize_keywords(
    records: Iterable,
    app_name: Optional[str] = None,
    detector: Optional[CategoryDetector] = None,
) -> OptimizationReport:
    """Annotate the keywords and allocate them for both stores."""
    keywords = annotate_keywords(records, app_name, detector)
    logger.info("Optimizing %d keywords (app=%s)", len(keywords), app_name or "-")
    return OptimizationReport(
        keywords=keywords,
        ios=optimize_ios_keywords(keywords),
        android=optimize_android_keywords(keywords),
    )
