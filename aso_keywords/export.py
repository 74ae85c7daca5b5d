"""Export keywords and optimized keyword sets (CSV, JSON)."""
import csv
import io
import json
from typing import Optional

from aso_keywords.field_allocator import AndroidKeywordSet, IOSKeywordSet
from aso_keywords.models import KeywordRecord

KEYWORD_COLUMNS = [
    "Keyword",
    "Brand",
    "Category",
    "Relevancy Score",
    "Volume",
    "Difficulty",
    "Chance",
    "KEI",
    "Results",
    "Maximum Reach",
    "Priority",
    "Platform",
    "Recommended Field",
]


def _num(value: Optional[float]) -> str:
    """Render a metric without a spurious '.0'; unknown stays blank."""
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _enum(value) -> str:
    return value.value if value is not None else ""


def _write(rows: list[list[str]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buf.getvalue().rstrip("\n")


def export_keywords_csv(records: list[KeywordRecord]) -> str:
    """Export keywords with their metrics and annotations to CSV.

    The header line is left unquoted; every data cell is quoted.
    """
    rows = []
    for k in records:
        rows.append([
            k.text,
            "TRUE" if k.is_brand else "FALSE",
            _enum(k.category),
            _num(k.relevance_score),
            _num(k.search_volume),
            _num(k.difficulty),
            _num(k.chance),
            _num(k.kei),
            _num(k.results),
            _num(k.maximum_reach),
            _enum(k.priority),
            _enum(k.platform),
            _enum(k.recommended_field),
        ])
    lines = [",".join(KEYWORD_COLUMNS)]
    if rows:
        lines.append(_write(rows))
    return "\n".join(lines)


def export_optimized_sets_csv(ios: IOSKeywordSet, android: AndroidKeywordSet) -> str:
    """Export the per-field keyword sets of both stores to CSV."""
    rows = [
        ["iOS Keywords"],
        ["Field", "Keywords"],
        ["Title", ", ".join(ios.title)],
        ["Subtitle", ", ".join(ios.subtitle)],
        ["Keywords Field (100 chars)", ios.keywords_field],
        ["Description Keywords", ", ".join(ios.description)],
        [],
        ["Android Keywords"],
        ["Field", "Keywords"],
        ["Title", ", ".join(android.title)],
        ["Short Description", ", ".join(android.short_description)],
        ["Full Description", ", ".join(android.full_description)],
    ]
    return _write(rows)


def export_report_json(report, pretty: bool = True) -> str:
    """Export any report object exposing ``to_dict()`` as JSON."""
    return json.dumps(report.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def export_keywords_json(records: list[KeywordRecord], pretty: bool = True) -> str:
    return json.dumps(
        [k.to_dict() for k in records], ensure_ascii=False, indent=2 if pretty else None
    )


EXPORTERS = {
    "csv": export_keywords_csv,
    "json": export_keywords_json,
}


def export_records(records: list[KeywordRecord], fmt: str = "csv") -> Optional[str]:
    """Export keywords in the given format. Returns None if format unknown."""
    fn = EXPORTERS.get(fmt.lower())
    if fn is None:
        return None
    return fn(records)
