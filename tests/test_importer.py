"""Tests for keyword research import."""
import json

import pytest

from aso_keywords.importer import (
    find_columns,
    import_keywords,
    parse_keywords,
    parse_keywords_csv,
    parse_keywords_json,
)
from aso_keywords.models import Category, Platform, Priority, StoreField

RESEARCH_CSV = """Keyword,Brand,Category,Relevancy Score,Search Volume,Difficulty,Chance,KEI,Results,Growth (Yesterday),Monthly Downloads,Maximum Reach,Conversion Rate,Priority,Platform,Recommended Field
royal fortune,TRUE,branded,95,"12,000",35,60,48,1500,12.5,0,3000,8%,high,ios,title
free slots,FALSE,,70,20000,40,,,,,,,,,,
,FALSE,,50,100,10,,,,,,,,,,
casino games,no,premium,120,-5,abc,0,0,0,0,0,0,0,urgent,web,banner
"""


# ── Column matching ────────────────────────────────────────

class TestFindColumns:
    def test_case_insensitive_substring(self):
        cols = find_columns(["KEYWORD", "Volume (US)", "Keyword Difficulty", "Relevance"])
        assert cols["keyword"] == 0
        assert cols["volume"] == 1
        assert cols["difficulty"] == 2
        assert cols["relevance"] == 3

    def test_exact_columns(self):
        cols = find_columns(["Keyword", "Brand Name", "KEI"])
        assert "brand" not in cols
        assert cols["kei"] == 2

    def test_first_match_wins(self):
        cols = find_columns(["Search Volume", "Volume"])
        assert cols["volume"] == 0


# ── CSV ────────────────────────────────────────────────────

class TestParseCSV:
    def test_full_row(self):
        records = parse_keywords_csv(RESEARCH_CSV)
        k = records[0]
        assert k.text == "royal fortune"
        assert k.is_brand is True
        assert k.category is Category.BRANDED
        assert k.relevance_score == 95
        assert k.search_volume == 12000
        assert k.difficulty == 35
        assert k.chance == 60
        assert k.kei == 48
        assert k.results == 1500
        assert k.growth_yesterday == 12.5
        assert k.monthly_downloads is None
        assert k.maximum_reach == 3000
        assert k.conversion_rate == 8
        assert k.priority is Priority.HIGH
        assert k.platform is Platform.IOS
        assert k.recommended_field is StoreField.TITLE

    def test_sparse_row(self):
        k = parse_keywords_csv(RESEARCH_CSV)[1]
        assert k.text == "free slots"
        assert k.category is None
        assert k.priority is None
        assert k.platform is Platform.BOTH
        assert k.kei is None
        assert k.chance is None

    def test_row_without_keyword_skipped(self):
        records = parse_keywords_csv(RESEARCH_CSV)
        assert [k.text for k in records] == ["royal fortune", "free slots", "casino games"]
        assert [k.sort_order for k in records] == [0, 1, 2]

    def test_bad_values(self):
        k = parse_keywords_csv(RESEARCH_CSV)[2]
        assert k.is_brand is False
        assert k.category is None
        assert k.relevance_score == 100
        assert k.search_volume == 0
        assert k.difficulty == 0
        assert k.priority is None
        assert k.platform is Platform.BOTH
        assert k.recommended_field is None
        assert k.chance is None
        assert k.results is None

    def test_blank_lines_ignored(self):
        records = parse_keywords_csv("Keyword,Volume\n\nslots,100\n\n")
        assert len(records) == 1

    def test_header_only(self):
        with pytest.raises(ValueError, match="at least a header row"):
            parse_keywords_csv("Keyword,Volume\n")

    def test_missing_keyword_column(self):
        with pytest.raises(ValueError, match="'Keyword' column"):
            parse_keywords_csv("Term,Volume\nslots,100")


# ── JSON ───────────────────────────────────────────────────

class TestParseJSON:
    def test_array(self):
        text = json.dumps([
            {"keyword": "slots", "searchVolume": 100},
            {"text": "poker", "category": "generic"},
        ])
        records = parse_keywords_json(text)
        assert [k.text for k in records] == ["slots", "poker"]
        assert records[0].search_volume == 100
        assert records[1].category is Category.GENERIC

    def test_capitalized_keys(self):
        records = parse_keywords_json('[{"Keyword": "slots", "Volume": 5000}]')
        assert len(records) == 1
        assert records[0].text == "slots"
        assert records[0].search_volume == 5000

    def test_export_style_keys(self):
        row = {
            "Keyword": "royal fortune", "Brand": "TRUE", "Category": "branded",
            "Relevancy Score": "95", "Search Volume": "12,000", "KEI": 48,
            "Growth (Yesterday)": 12.5, "Conversion Rate": "8%",
            "Recommended Field": "title",
        }
        k = parse_keywords_json(json.dumps([row]))[0]
        assert k.is_brand is True
        assert k.category is Category.BRANDED
        assert k.relevance_score == 95
        assert k.search_volume == 12000
        assert k.kei == 48
        assert k.growth_yesterday == 12.5
        assert k.conversion_rate == 8
        assert k.recommended_field is StoreField.TITLE

    def test_wrapped(self):
        records = parse_keywords_json(json.dumps({"keywords": ["slots", {"text": ""}, 5]}))
        assert [k.text for k in records] == ["slots"]

    def test_not_a_list(self):
        with pytest.raises(ValueError):
            parse_keywords_json('"slots"')

    def test_dispatch(self):
        assert parse_keywords('["slots"]', "JSON")[0].text == "slots"
        assert parse_keywords("Keyword\nslots")[0].text == "slots"


class TestImport:
    def test_annotates(self):
        records = import_keywords("Keyword,Relevance,Difficulty\nroyal fortune,90,30",
                                  app_name="Royal Fortune")
        k = records[0]
        assert k.category is Category.BRANDED
        assert k.priority is Priority.HIGH
        assert k.recommended_field is StoreField.TITLE
