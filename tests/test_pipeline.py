"""Tests for the annotate-and-allocate pipeline."""
import pytest

from aso_keywords.category_detector import CategoryDetector
from aso_keywords.models import Category, KeywordRecord, Platform, Priority, StoreField
from aso_keywords.pipeline import annotate_keyword, annotate_keywords, optimize_keywords


@pytest.fixture
def detector():
    return CategoryDetector(competitor_brands=["slotomania"], theme_terms=["casino"])


@pytest.fixture
def records():
    return [
        KeywordRecord(text="royal fortune slots", search_volume=1000,
                      relevance_score=90, difficulty=30),
        KeywordRecord(text="slotomania coins", search_volume=50000,
                      relevance_score=40, difficulty=70),
        KeywordRecord(text="free slots", search_volume=20000,
                      relevance_score=70, difficulty=40),
        KeywordRecord(text="bonus", priority=Priority.MEDIUM, search_volume=500,
                      relevance_score=50, difficulty=50),
    ]


class TestAnnotate:
    def test_fills_missing_fields(self, detector):
        k = KeywordRecord(text="royal fortune slots", relevance_score=90, difficulty=30)
        out = annotate_keyword(k, app_name="Royal Fortune", detector=detector)
        assert out.category is Category.BRANDED
        assert out.priority is Priority.HIGH
        assert out.recommended_field is StoreField.TITLE

    def test_existing_values_kept(self, detector):
        k = KeywordRecord(text="royal fortune", category=Category.GENERIC,
                          priority=Priority.LOW, recommended_field=StoreField.KEYWORDS)
        assert annotate_keyword(k, app_name="Royal Fortune", detector=detector) == k

    def test_competitor(self, detector):
        out = annotate_keyword(KeywordRecord(text="slotomania coins"), detector=detector)
        assert out.category is Category.COMPETITOR

    def test_android_rules_for_android_keywords(self, detector):
        k = KeywordRecord(text="bonus", priority=Priority.MEDIUM, platform=Platform.ANDROID)
        assert annotate_keyword(k, detector=detector).recommended_field is StoreField.DESCRIPTION

    def test_shared_keywords_use_ios_rules(self, detector):
        k = KeywordRecord(text="bonus", priority=Priority.MEDIUM)
        assert annotate_keyword(k, detector=detector).recommended_field is StoreField.KEYWORDS

    def test_enhanced_check_uses_metrics(self, detector):
        k = KeywordRecord(text="royalty casino", relevance_score=95, difficulty=20)
        out = annotate_keyword(k, app_name="Royal Fortune", detector=detector)
        assert out.category is Category.BRANDED

    def test_annotate_keywords_keeps_order(self, detector, records):
        out = annotate_keywords(records, app_name="Royal Fortune", detector=detector)
        assert [k.text for k in out] == [k.text for k in records]
        assert all(k.category and k.priority and k.recommended_field for k in out)

    def test_annotate_raw_dicts(self, detector):
        out = annotate_keywords([{"keyword": "a"}, {"keyword": "b"}], detector=detector)
        assert [k.sort_order for k in out] == [0, 1]


class TestOptimize:
    def test_report(self, detector, records):
        report = optimize_keywords(records, app_name="Royal Fortune", detector=detector)
        assert report.ios.title == ["royal fortune slots"]
        assert report.ios.keywords_field == "bonus"
        assert "free slots" in report.ios.description
        assert report.android.short_description == ["free slots"]
        assert report.android.title == ["royal fortune slots"]

    def test_report_to_dict(self, detector, records):
        d = optimize_keywords(records, app_name="Royal Fortune", detector=detector).to_dict()
        assert len(d["keywords"]) == 4
        assert d["keywords"][2]["score"] == pytest.approx(14.2)
        assert d["keywords"][0]["category"] == "branded"
        assert d["ios"]["title"] == ["royal fortune slots"]

    def test_summary(self, detector, records):
        text = optimize_keywords(records, app_name="Royal Fortune", detector=detector).summary()
        assert "Keywords analyzed: 4" in text
        assert "iOS App Store" in text
        assert "Google Play" in text

    def test_empty(self, detector):
        report = optimize_keywords([], detector=detector)
        assert report.keywords == []
        assert report.ios.title == []
