"""Configuration management."""
import logging
import os

from dotenv import load_dotenv

load_dotenv()

# Casino/gaming brands seen in the keyword research exports this engine was
# first tuned on. Replace through ASO_COMPETITOR_BRANDS for other verticals.
DEFAULT_COMPETITOR_BRANDS = (
    "slotomania", "doubleu casino", "doubleu", "house of fun",
    "big fish casino", "big fish", "chumba casino", "chumba", "pch slots",
    "pch", "jackpot party", "myvegas", "zkynga", "pokerstars", "888 casino",
    "betway", "bet365", "casino royale", "ignition casino", "bovada",
    "cafe casino", "las atlantis", "red dog casino", "super slots",
    "riversweeps", "betmgm", "caesars", "draftkings", "fanduel", "winstar",
    "foxwoods", "mohegan", "borgata", "hard rock",
)

DEFAULT_BRAND_THEME_TERMS = ("royal", "palace", "spin", "casino", "slots", "poker")


def _split_list(raw: str) -> list[str]:
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


class Config:
    def __init__(self):
        competitors = os.environ.get("ASO_COMPETITOR_BRANDS", "")
        self.COMPETITOR_BRANDS: list[str] = (
            _split_list(competitors) if competitors.strip()
            else list(DEFAULT_COMPETITOR_BRANDS)
        )
        for name in _split_list(os.environ.get("ASO_EXTRA_COMPETITORS", "")):
            if name not in self.COMPETITOR_BRANDS:
                self.COMPETITOR_BRANDS.append(name)

        themes = os.environ.get("ASO_BRAND_THEME_TERMS", "")
        self.BRAND_THEME_TERMS: list[str] = (
            _split_list(themes) if themes.strip()
            else list(DEFAULT_BRAND_THEME_TERMS)
        )
        self.LOG_LEVEL: str = os.environ.get("ASO_LOG_LEVEL", "WARNING").upper()

    def validate(self):
        if not isinstance(logging.getLevelName(self.LOG_LEVEL), int):
            raise ValueError(f"Unknown ASO_LOG_LEVEL: {self.LOG_LEVEL}")


config = Config()
