"""Keyword repetition checks across indexed store fields.

iOS indexes Title, Subtitle and the Keywords field together, so any word
repeated between two of them wastes characters: every repetition is an
error. Singular/plural pairs count as the same word.

Google Play tolerates a little repetition but penalizes stuffing: more than
three occurrences is an error, three spread over all three fields is a
warning, and a word shared only by Title and Short description (the two
strongest fields) is a warning.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from aso_keywords.models import Platform, StoreListing

IOS_FIELDS = ("title", "subtitle", "keywords_field")
ANDROID_FIELDS = ("title", "short_description", "full_description")

FIELD_LABELS = {
    "title": "Title",
    "subtitle": "Subtitle",
    "keywords_field": "Keywords field",
    "short_description": "Short Description",
    "full_description": "Full Description",
}

_SPLIT_RE = re.compile(r"[,\s;]+")
_PLURAL_RE = re.compile(r"(es|s)$")


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class RepetitionIssue:
    keyword: str
    fields: list[str]
    severity: Severity
    message: str
    recommendation: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "keyword": self.keyword,
            "fields": list(self.fields),
            "severity": self.severity.value,
            "message": self.message,
            "recommendation": self.recommendation,
        }


@dataclass
class RepetitionCheckResult:
    platform: Platform
    issues: list[RepetitionIssue] = field(default_factory=list)
    score: int = 100

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == Severity.WARNING)

    def to_dict(self) -> dict:
        return {
            "platform": self.platform.value,
            "has_issues": self.has_issues,
            "issues": [i.to_dict() for i in self.issues],
            "score": self.score,
        }

    def summary(self) -> str:
        status = "⚠️ ISSUES" if self.has_issues else "✅ CLEAN"
        lines = [
            f"{status} [{self.platform.value}] | Score: {self.score}/100 | "
            f"Errors: {self.error_count} | Warnings: {self.warning_count}"
        ]
        for issue in self.issues:
            icon = "❌" if issue.severity == Severity.ERROR else "⚠️"
            lines.append(f"  {icon} {issue.message}")
            if issue.recommendation:
                lines.append(f"     💡 {issue.recommendation}")
        return "\n".join(lines)


# ── Tokens ─────────────────────────────────────────────────

def normalize_keyword(keyword: str) -> str:
    return keyword.strip().lower()


def extract_keywords(text: Optional[str]) -> list[str]:
    """Split field text on commas, whitespace and semicolons (lowercased)."""
    if not text:
        return []
    return [
        normalize_keyword(t) for t in _SPLIT_RE.split(text) if t.strip()
    ]


def are_keywords_equivalent(a: str, b: str) -> bool:
    """Same word, or same stem once a trailing 's'/'es' is stripped."""
    a, b = normalize_keyword(a), normalize_keyword(b)
    if a == b:
        return True
    stem_a = _PLURAL_RE.sub("", a)
    stem_b = _PLURAL_RE.sub("", b)
    return bool(stem_a) and stem_a == stem_b


# ── iOS ────────────────────────────────────────────────────

_IOS_PAIRS = (
    ("title", "subtitle",
     "Use semantic variations or synonyms instead of repeating the same word"),
    ("title", "keywords_field",
     "Remove this keyword from the Keywords field and use semantic variations"),
    ("subtitle", "keywords_field",
     "Remove this keyword from the Keywords field and use semantic variations"),
)


def check_ios_repetitions(fields: Mapping[str, Optional[str]]) -> RepetitionCheckResult:
    """Flag every word shared between two of Title, Subtitle and Keywords field."""
    tokens = {name: extract_keywords(fields.get(name)) for name in IOS_FIELDS}
    issues: list[RepetitionIssue] = []

    for first, second, recommendation in _IOS_PAIRS:
        for kw_a in tokens[first]:
            for kw_b in tokens[second]:
                if not are_keywords_equivalent(kw_a, kw_b):
                    continue
                issues.append(RepetitionIssue(
                    keyword=kw_a,
                    fields=[first, second],
                    severity=Severity.ERROR,
                    message=(
                        f'"{kw_a}" is repeated between {FIELD_LABELS[first]} '
                        f"and {FIELD_LABELS[second]}"
                    ),
                    recommendation=recommendation,
                ))

    return RepetitionCheckResult(
        platform=Platform.IOS,
        issues=issues,
        score=max(0, 100 - len(issues) * 10),
    )


# ── Android ────────────────────────────────────────────────

def check_android_repetitions(fields: Mapping[str, Optional[str]]) -> RepetitionCheckResult:
    """Flag keyword stuffing across Title, Short and Full description."""
    counts: dict[str, int] = {}
    seen_in: dict[str, list[str]] = {}
    for name in ANDROID_FIELDS:
        for kw in extract_keywords(fields.get(name)):
            counts[kw] = counts.get(kw, 0) + 1
            places = seen_in.setdefault(kw, [])
            if name not in places:
                places.append(name)

    issues: list[RepetitionIssue] = []
    for kw, count in counts.items():
        places = seen_in[kw]
        if count > 3:
            issues.append(RepetitionIssue(
                keyword=kw,
                fields=list(places),
                severity=Severity.ERROR,
                message=f'"{kw}" appears {count} times across multiple fields',
                recommendation=(
                    "Reduce repetitions. Google Play penalizes keyword "
                    "stuffing (maximum 2-3 repetitions)"
                ),
            ))
        elif count > 2 and len(places) > 2:
            issues.append(RepetitionIssue(
                keyword=kw,
                fields=list(places),
                severity=Severity.WARNING,
                message=f'"{kw}" appears {count} times in {len(places)} different fields',
                recommendation="Consider using semantic variations to avoid over-optimization",
            ))
        elif count == 2 and set(places) == {"title", "short_description"}:
            issues.append(RepetitionIssue(
                keyword=kw,
                fields=list(places),
                severity=Severity.WARNING,
                message=f'"{kw}" is repeated between Title and Short Description',
                recommendation="Use semantic variations to maximize semantic coverage",
            ))

    errors = sum(1 for i in issues if i.severity == Severity.ERROR)
    warnings = len(issues) - errors
    return RepetitionCheckResult(
        platform=Platform.ANDROID,
        issues=issues,
        score=max(0, 100 - errors * 15 - warnings * 5),
    )


def check_repetitions(
    fields: Mapping[str, Optional[str]], platform: Platform | str
) -> RepetitionCheckResult:
    """Run the repetition rules of one store over its field texts."""
    target = Platform.parse(platform)
    if target is Platform.ANDROID:
        return check_android_repetitions(fields)
    return check_ios_repetitions(fields)


# ── Summary ────────────────────────────────────────────────

@dataclass
class ASOScoreSummary:
    overall_score: int
    has_issues: bool
    recommendations: list[str]

    def to_dict(self) -> dict:
        return {
            "overall_score": self.overall_score,
            "has_issues": self.has_issues,
            "recommendations": list(self.recommendations),
        }


def aso_score_summary(
    ios_result: RepetitionCheckResult, android_result: RepetitionCheckResult
) -> ASOScoreSummary:
    overall = math.floor((ios_result.score + android_result.score) / 2 + 0.5)
    has_issues = ios_result.has_issues or android_result.has_issues
    recommendations = []
    if ios_result.has_issues:
        recommendations.append(f"iOS: {len(ios_result.issues)} repetition issue(s) detected")
    if android_result.has_issues:
        recommendations.append(f"Android: {len(android_result.issues)} repetition issue(s) detected")
    if not has_issues:
        recommendations.append("✅ No repetitions detected across indexed fields")
    return ASOScoreSummary(
        overall_score=overall,
        has_issues=has_issues,
        recommendations=recommendations,
    )


def check_listing(listing: StoreListing) -> tuple[RepetitionCheckResult, RepetitionCheckResult, ASOScoreSummary]:
    """Check both storefronts of an authored listing."""
    ios = check_ios_repetitions(listing.ios_fields())
    android = check_android_repetitions(listing.android_fields())
    return ios, android, aso_score_summary(ios, android)
