"""Keyword research import (CSV / JSON).

Turns research-tool exports into ``KeywordRecord`` values. Column names
are matched case-insensitively by substring, so "Search Volume",
"Volume (US)" and "volume" all land on the same field.
"""
from __future__ import annotations

import csv
import io
import json
import logging
from typing import Optional

from aso_keywords.models import (
    Category,
    KeywordRecord,
    Platform,
    Priority,
    StoreField,
    clamp,
    to_bool,
    to_number,
)
from aso_keywords.pipeline import annotate_keywords

logger = logging.getLogger(__name__)

# field -> (substring matches, exact matches)
COLUMN_MATCHERS = {
    "keyword": (("keyword",), ()),
    "volume": (("volume", "search"), ()),
    "difficulty": (("difficulty",), ()),
    "relevance": (("relevance", "relevancy"), ()),
    "category": (("category",), ()),
    "priority": (("priority",), ()),
    "platform": (("platform",), ()),
    "field": (("field", "recommended"), ()),
    "brand": ((), ("brand",)),
    "chance": (("chance",), ()),
    "kei": ((), ("kei",)),
    "results": (("results",), ()),
    "growth": (("growth",), ()),
    "monthly_downloads": (("monthly downloads",), ()),
    "maximum_reach": (("maximum reach",), ()),
    "conversion_rate": (("conversion rate",), ()),
}


def find_columns(headers: list[str]) -> dict[str, int]:
    """Map each known field to the index of the first matching header."""
    lowered = [h.strip().lower() for h in headers]
    found: dict[str, int] = {}
    for name, (contains, exact) in COLUMN_MATCHERS.items():
        for idx, header in enumerate(lowered):
            if header in exact or any(part in header for part in contains):
                found[name] = idx
                break
    return found


def _parse_int(raw: Optional[str]) -> float:
    return float(int(to_number(raw)))


def _parse_metric(raw: Optional[str], integer: bool = False) -> Optional[float]:
    """Auxiliary metrics: blank, zero or unparsable values count as unknown."""
    value = to_number(raw)
    if integer:
        value = float(int(value))
    return value or None


def _row_to_record(values: list[str], columns: dict[str, int], sort_order: int) -> Optional[KeywordRecord]:
    def cell(name: str) -> Optional[str]:
        idx = columns.get(name)
        if idx is None or idx >= len(values):
            return None
        return values[idx].strip()

    keyword = cell("keyword")
    if not keyword:
        return None

    chance = _parse_metric(cell("chance"))
    conversion = _parse_metric(cell("conversion_rate"))
    kei = _parse_metric(cell("kei"))
    return KeywordRecord(
        text=keyword,
        search_volume=max(0.0, _parse_int(cell("volume"))),
        difficulty=clamp(to_number(cell("difficulty"))),
        relevance_score=clamp(to_number(cell("relevance"))),
        category=Category.parse(cell("category")),
        is_brand=to_bool(cell("brand")),
        platform=Platform.parse(cell("platform")) or Platform.BOTH,
        priority=Priority.parse(cell("priority")),
        recommended_field=StoreField.parse(cell("field")),
        chance=None if chance is None else clamp(chance),
        kei=None if kei is None else max(0.0, kei),
        results=_parse_metric(cell("results"), integer=True),
        growth_yesterday=_parse_metric(cell("growth")),
        monthly_downloads=_parse_metric(cell("monthly_downloads"), integer=True),
        maximum_reach=_parse_metric(cell("maximum_reach"), integer=True),
        conversion_rate=None if conversion is None else clamp(conversion),
        sort_order=sort_order,
    )


def parse_keywords_csv(csv_text: str) -> list[KeywordRecord]:
    """Parse a keyword research CSV export.

    Raises ValueError when the file has no data row or no keyword column.
    """
    rows = [
        row for row in csv.reader(io.StringIO(csv_text))
        if any(cell.strip() for cell in row)
    ]
    if len(rows) < 2:
        raise ValueError("CSV file must have at least a header row and one data row")

    columns = find_columns(rows[0])
    if "keyword" not in columns:
        raise ValueError("CSV must contain a 'Keyword' column")

    records: list[KeywordRecord] = []
    for line_no, values in enumerate(rows[1:], start=2):
        record = _row_to_record(values, columns, sort_order=len(records))
        if record is None:
            logger.debug("Skipping row %d: no keyword", line_no)
            continue
        records.append(record)
    logger.info("Imported %d keywords from CSV", len(records))
    return records


def parse_keywords_json(json_text: str) -> list[KeywordRecord]:
    """Parse keywords from JSON.

    Accepts an array of objects or {"keywords": [...]}.
    """
    data = json.loads(json_text)
    if isinstance(data, dict):
        data = data.get("keywords", data.get("items", []))
    if not isinstance(data, list):
        raise ValueError("JSON must be an array or contain a 'keywords' array")

    records: list[KeywordRecord] = []
    for item in data:
        if isinstance(item, str):
            item = {"text": item}
        if not isinstance(item, dict):
            continue
        record = KeywordRecord.from_dict(item, sort_order=len(records))
        if record.text:
            records.append(record)
    return records


def parse_keywords(text: str, fmt: str = "csv") -> list[KeywordRecord]:
    """Parse keyword input in the given format ("csv" or "json")."""
    if fmt.lower() == "json":
        return parse_keywords_json(text)
    return parse_keywords_csv(text)


def import_keywords(
    text: str, app_name: Optional[str] = None, fmt: str = "csv"
) -> list[KeywordRecord]:
    """Parse keyword input and fill in category, priority and field."""
    return annotate_keywords(parse_keywords(text, fmt), app_name)
