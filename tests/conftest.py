"""
Pytest configuration and shared deck fixtures.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


AUTHOR_THEME = {
    "primary_color": "#1a365d",
    "secondary_color": "#2d3748",
    "accent_color": "#3182ce",
    "background_color": "#ffffff",
    "text_color": "#1a202c",
}


@pytest.fixture
def three_slide_deck() -> Dict[str, Any]:
    """Title, bullets, summary: the smallest deck exercising every bookend."""
    return {
        "theme": dict(AUTHOR_THEME),
        "slides": [
            {"slide_type": "title", "title": "Q3 Review"},
            {"slide_type": "bullets", "title": "Highlights", "bullets": ["Revenue up", "Churn down"]},
            {"slide_type": "summary", "title": "Thanks", "takeaways": ["Keep going"]},
        ],
    }


@pytest.fixture
def full_deck() -> Dict[str, Any]:
    """One slide of every type, with the general types in the middle."""
    return {
        "theme": dict(AUTHOR_THEME),
        "slides": [
            {"slide_type": "title", "title": "All Layouts", "subtitle": "Every slide type", "footer": "Demo"},
            {"slide_type": "section_divider", "title": "Part One", "subtitle": "Overview"},
            {"slide_type": "bullets", "title": "Points", "bullets": [f"Point {i}" for i in range(1, 8)]},
            {"slide_type": "quote", "quote": "Simple is hard.", "attribution": "Someone"},
            {"slide_type": "two_column", "title": "Compare",
             "left_title": "Before", "left_items": ["Slow", "Manual"],
             "right_title": "After", "right_items": ["Fast", "Automated"]},
            {"slide_type": "statistics", "title": "Numbers", "stats": [
                {"value": "$4.2M", "label": "Revenue"},
                {"value": "37", "label": "Customers"},
                {"value": "98%", "label": "Uptime"},
            ]},
            {"slide_type": "table", "title": "Regions", "headers": ["Region", "Revenue"],
             "rows": [["NA", "$2M"], ["EMEA", "$1M", "extra"], ["APAC"]], "caption": "USD"},
            {"slide_type": "image_placeholder", "title": "Screenshot",
             "image_description": "The new dashboard", "caption": "Coming soon"},
            {"slide_type": "quote", "quote": "Ship it.", "attribution": "Team"},
            {"slide_type": "bullets", "title": "More", "bullets": ["A", "B"]},
            {"slide_type": "summary", "title": "Wrap-up", "takeaways": ["One", "Two"],
             "call_to_action": "Get started"},
        ],
    }


@pytest.fixture
def as_text():
    """Serialise a deck dict the way the content generator would emit it."""
    def _dump(deck: Dict[str, Any], fenced: bool = False) -> str:
        text = json.dumps(deck, indent=2)
        return f"```json\n{text}\n```" if fenced else text
    return _dump


@pytest.fixture
def single_color_deck_text() -> str:
    """Minimal deck: only primary_color given, headings instead of titles."""
    return (
        '{"theme":{"primary_color":"#102030"},"slides":['
        '{"slide_type":"title","title":"Q1 Review"},'
        '{"slide_type":"bullets","heading":"Highlights","bullets":["Revenue up 10%","New region launched"]},'
        '{"slide_type":"summary","heading":"Wrap-up","takeaways":["Plan Q2 now"]}]}'
    )
