"""
config.py — Central configuration for the deck generation engine.
Loads settings from environment variables / .env file.
"""

from pathlib import Path

from pydantic_settings import BaseSettings
from pydantic import Field


# ── Project Paths ──────────────────────────────────────────────
ROOT_DIR = Path(__file__).resolve().parent
DATA_DIR = ROOT_DIR / "data"
LOG_DIR = DATA_DIR / "logs"


# ── Application Settings ──────────────────────────────────────
class Settings(BaseSettings):
    """Typed engine settings — loaded from env vars / .env file."""

    # --- Theming ---
    default_theme: str = Field(
        default="auto",
        description="Theme selector used when a request does not name one",
    )

    # --- Document Metadata ---
    document_author: str = Field(default="AmplifyContent.ai")
    default_document_title: str = Field(default="Slide Deck")

    # --- Page Geometry (16:9 widescreen) ---
    slide_width_inches: float = Field(default=13.333, gt=0)
    slide_height_inches: float = Field(default=7.5, gt=0)

    # --- Content Limits ---
    max_stat_cards: int = Field(
        default=4, ge=1, le=6,
        description="Max stat pairs laid out on a statistics slide",
    )
    max_table_rows: int = Field(
        default=12, ge=1,
        description="Data rows drawn before a table is truncated",
    )

    # --- Logging ---
    log_level: str = Field(default="INFO")
    log_to_file: bool = Field(
        default=False,
        description="Also write a rotating log file under data/logs",
    )

    model_config = {
        "env_file": str(ROOT_DIR / ".env"),
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def get_settings() -> Settings:
    """Factory that loads and returns validated settings."""
    return Settings()
