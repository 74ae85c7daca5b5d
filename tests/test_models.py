"""Tests for keyword records and listing fields."""
import math

import pytest

from aso_keywords.models import (
    Category,
    KeywordRecord,
    Platform,
    Priority,
    StoreField,
    StoreListing,
    as_record,
    clamp,
    to_bool,
    to_number,
    to_optional_number,
)


# ── Coercion ───────────────────────────────────────────────

class TestCoercion:
    @pytest.mark.parametrize("raw,expected", [
        (42, 42.0),
        ("1,200", 1200.0),
        (" 35% ", 35.0),
        ("abc", 0.0),
        ("", 0.0),
        (None, 0.0),
        (True, 0.0),
        (math.nan, 0.0),
        (math.inf, 0.0),
    ])
    def test_to_number(self, raw, expected):
        assert to_number(raw) == expected

    def test_optional_keeps_unknown(self):
        assert to_optional_number(None) is None
        assert to_optional_number("  ") is None
        assert to_optional_number("n/a") is None
        assert to_optional_number("0") == 0.0

    def test_clamp(self):
        assert clamp(-5) == 0
        assert clamp(150) == 100
        assert clamp(42.5) == 42.5

    @pytest.mark.parametrize("raw", [True, "TRUE", "true", "1", "yes", 1])
    def test_truthy(self, raw):
        assert to_bool(raw) is True

    @pytest.mark.parametrize("raw", [False, "FALSE", "", None, "no", 0])
    def test_falsy(self, raw):
        assert to_bool(raw) is False


# ── Enums ──────────────────────────────────────────────────

class TestEnums:
    def test_parse(self):
        assert Category.parse(" Branded ") is Category.BRANDED
        assert Priority.parse("HIGH") is Priority.HIGH
        assert StoreField.parse("keywords") is StoreField.KEYWORDS

    def test_parse_unknown(self):
        assert Category.parse("premium") is None
        assert Priority.parse(3) is None
        assert Platform.parse(None) is None

    def test_priority_rank(self):
        assert Priority.HIGH.rank > Priority.MEDIUM.rank > Priority.LOW.rank

    def test_platform_includes(self):
        assert Platform.BOTH.includes(Platform.IOS)
        assert Platform.BOTH.includes(Platform.ANDROID)
        assert Platform.IOS.includes(Platform.IOS)
        assert not Platform.IOS.includes(Platform.ANDROID)


# ── Records ────────────────────────────────────────────────

class TestKeywordRecord:
    def test_defaults(self):
        k = KeywordRecord(text="slots")
        assert k.platform is Platform.BOTH
        assert k.category is None
        assert k.kei is None

    def test_from_dict_camel_case(self):
        k = KeywordRecord.from_dict({
            "text": " slots ",
            "searchVolume": "12,000",
            "difficulty": 140,
            "relevanceScore": -3,
            "isBrand": "TRUE",
            "platform": "ios",
            "category": "competitor",
            "recommendedField": "subtitle",
            "conversionRate": 250,
        })
        assert k.text == "slots"
        assert k.search_volume == 12000
        assert k.difficulty == 100
        assert k.relevance_score == 0
        assert k.is_brand is True
        assert k.platform is Platform.IOS
        assert k.category is Category.COMPETITOR
        assert k.recommended_field is StoreField.SUBTITLE
        assert k.conversion_rate == 100

    def test_from_dict_bad_values(self):
        k = KeywordRecord.from_dict({
            "keyword": "slots", "volume": "lots", "platform": "web",
            "priority": "urgent", "kei": -4,
        })
        assert k.search_volume == 0
        assert k.platform is Platform.BOTH
        assert k.priority is None
        assert k.kei == 0

    def test_from_dict_key_spelling_ignored(self):
        k = KeywordRecord.from_dict({
            "KEYWORD": "slots", "Search Volume": "5,000", "Relevancy Score": 80,
            "Growth (Yesterday)": 3, "Maximum Reach": 900,
        })
        assert k.text == "slots"
        assert k.search_volume == 5000
        assert k.relevance_score == 80
        assert k.growth_yesterday == 3
        assert k.maximum_reach == 900

    def test_sort_order(self):
        assert KeywordRecord.from_dict({"text": "a"}, sort_order=7).sort_order == 7
        assert KeywordRecord.from_dict({"text": "a", "sortOrder": 2}, sort_order=7).sort_order == 2

    def test_to_dict_uses_enum_values(self):
        d = KeywordRecord(text="a", category=Category.BRANDED, priority=Priority.LOW).to_dict()
        assert d["category"] == "branded"
        assert d["priority"] == "low"
        assert d["platform"] == "both"
        assert d["recommended_field"] is None

    def test_from_dict_round_trip(self):
        k = KeywordRecord(text="a", search_volume=10, category=Category.GENERIC,
                          priority=Priority.MEDIUM, kei=12.5, sort_order=3)
        assert KeywordRecord.from_dict(k.to_dict()) == k

    def test_as_record(self):
        k = KeywordRecord(text="a")
        assert as_record(k) is k
        assert as_record({"text": "b"}, 4).sort_order == 4

    def test_frozen(self):
        k = KeywordRecord(text="a")
        with pytest.raises(AttributeError):
            k.text = "b"


class TestStoreListing:
    def test_from_dict(self):
        listing = StoreListing.from_dict({
            "ios_app_name": "Royal", "android_app_name": None, "unknown": "x",
        })
        assert listing.ios_app_name == "Royal"
        assert listing.android_app_name == ""

    def test_field_views(self):
        listing = StoreListing(ios_app_name="A", ios_subtitle="B", ios_keywords="c,d",
                               android_short_description="E")
        assert listing.ios_fields() == {"title": "A", "subtitle": "B", "keywords_field": "c,d"}
        assert listing.android_fields()["short_description"] == "E"
        assert len(listing.ios_texts()) == 4
        assert len(listing.android_texts()) == 3
