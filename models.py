"""
models.py — Shared Pydantic data models used across the render pipeline.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from generators.colors import normalize_hex


class SlideType(str, Enum):
    """The closed set of semantic slide types the content generator emits."""
    TITLE = "title"
    SECTION_DIVIDER = "section_divider"
    BULLETS = "bullets"
    QUOTE = "quote"
    TWO_COLUMN = "two_column"
    STATISTICS = "statistics"
    TABLE = "table"
    IMAGE_PLACEHOLDER = "image_placeholder"
    SUMMARY = "summary"

    @classmethod
    def from_value(cls, value: Any) -> Optional[SlideType]:
        """Lenient lookup — returns None for anything outside the enumeration."""
        try:
            return cls(value)
        except ValueError:
            return None


# Fallback colours applied when the author palette omits a field.
DEFAULT_AUTHOR_COLORS: Dict[str, str] = {
    "primary_color": "#1a365d",
    "secondary_color": "#2d3748",
    "accent_color": "#3182ce",
    "background_color": "#ffffff",
    "text_color": "#1a202c",
}


class AuthorTheme(BaseModel):
    """The 5-colour palette embedded in the raw deck text (input only)."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    primary_color: str = DEFAULT_AUTHOR_COLORS["primary_color"]
    secondary_color: str = DEFAULT_AUTHOR_COLORS["secondary_color"]
    accent_color: str = DEFAULT_AUTHOR_COLORS["accent_color"]
    background_color: str = DEFAULT_AUTHOR_COLORS["background_color"]
    text_color: str = DEFAULT_AUTHOR_COLORS["text_color"]

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_hex(cls, value: Any, info: ValidationInfo) -> str:
        return normalize_hex(value, DEFAULT_AUTHOR_COLORS[info.field_name])


class Slide(BaseModel):
    """One slide: a `slide_type` tag plus an open bag of type-specific fields.

    Field values are kept exactly as decoded (any JSON type). Builders never
    read them directly — see generators/slide_types.py for the extraction
    helpers that degrade missing / mistyped fields to empty values.
    """
    model_config = ConfigDict(extra="allow")

    slide_type: Optional[str] = None

    # Headline text
    title: Any = None
    subtitle: Any = None
    heading: Any = None
    topic: Any = None
    footer: Any = None
    icon: Any = None

    # Lists
    bullets: Any = None
    takeaways: Any = None
    stats: Any = None

    # Quote
    quote: Any = None
    attribution: Any = None

    # Two column
    left_title: Any = None
    left_items: Any = None
    right_title: Any = None
    right_items: Any = None

    # Table
    headers: Any = None
    rows: Any = None

    # Image placeholder
    image_description: Any = None
    caption: Any = None

    call_to_action: Any = None

    @field_validator("slide_type", mode="before")
    @classmethod
    def _normalise_type(cls, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return None
        return value.strip().lower() or None

    @property
    def kind(self) -> Optional[SlideType]:
        return SlideType.from_value(self.slide_type)

    def raw_fields(self) -> Dict[str, Any]:
        """Every populated field, including unknown extras, in declaration order."""
        return self.model_dump(exclude_none=True)


class Deck(BaseModel):
    """The parsed, validated root document."""
    theme: AuthorTheme
    slides: List[Slide] = Field(min_length=1)


class RenderRequest(BaseModel):
    """One inbound render call: consumed synchronously, then discarded."""
    deck_text: str
    document_title: str = ""
    theme: str = "auto"


class TemplateAssignment(BaseModel):
    """Dispatcher output for one slide."""
    model_config = ConfigDict(frozen=True)

    index: int
    slide_type: Optional[str] = None
    template: str


class SlideOutcome(BaseModel):
    """How one slide was rendered."""
    index: int
    slide_type: Optional[str] = None
    template: str
    fallback: bool = False
    error: Optional[str] = None


class RenderResult(BaseModel):
    """A rendered document plus per-slide render status."""
    content: bytes
    media_type: str
    extension: str
    theme_id: str
    slides: List[SlideOutcome] = Field(default_factory=list)

    @property
    def fallback_count(self) -> int:
        return sum(1 for s in self.slides if s.fallback)

    @property
    def slide_count(self) -> int:
        return len(self.slides)
