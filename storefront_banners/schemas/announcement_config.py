"""Pydantic schemas for the banner editor's configuration payload.

The admin form submits one object with five sections (basic, text, cta,
background, other) using the form's camelCase keys. These models cover the
per-field structure of each section. Rules that span several fields
(custom size, schedule ordering) live in domain/config_validator.py so that
they run even when a sibling field is malformed.
"""

from datetime import date, datetime
from typing import Annotated, Any, Literal

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from storefront_banners.models.announcement import GLOBAL_PAGE_PATTERN

_url_adapter = TypeAdapter(AnyUrl)


def non_empty(message: str) -> AfterValidator:
    """Reject blank strings with a form-friendly message."""

    def check(value: str) -> str:
        if not value or not value.strip():
            raise PydanticCustomError("required", message)
        return value

    return AfterValidator(check)


def _check_url(value: str) -> str:
    try:
        _url_adapter.validate_python(value.strip())
    except PydanticValidationError:
        raise PydanticCustomError("url", "Please enter a valid URL") from None
    return value.strip()


def coerce_calendar_date(value: Any) -> Any:
    """Accept plain dates as well as ISO timestamps from a JS date picker."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return value
    return value


CtaLink = Annotated[str, AfterValidator(_check_url)]
CalendarDate = Annotated[date | None, BeforeValidator(coerce_calendar_date)]
Dimension = str | int | float | None


class FieldError(BaseModel):
    """One violated constraint, addressed by its path in the payload."""

    path: list[str]
    message: str


class ConfigSection(BaseModel):
    """Base for editor sections: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Basic: campaign title, size and schedule
# ─────────────────────────────────────────────────────────────────────────────


class BasicSection(ConfigSection):
    size: Literal["large", "medium", "small", "custom"]
    size_height: Dimension = None
    size_width: Dimension = None
    campaign_title: Annotated[str, non_empty("Campaign title is required")]

    start_type: Literal["now", "specific"]
    end_type: Literal["until_stop", "specific"]
    start_date: CalendarDate = None
    end_date: CalendarDate = None
    start_time: str | None = None
    end_time: str | None = None


# ─────────────────────────────────────────────────────────────────────────────
# Text
# ─────────────────────────────────────────────────────────────────────────────


class TextSection(ConfigSection):
    announcement_text: Annotated[str, non_empty("Campaign Message is required")]
    text_color: str
    font_size: float = Field(ge=8, le=72)
    font_type: str


# ─────────────────────────────────────────────────────────────────────────────
# Call to action (one model per ctaType)
# ─────────────────────────────────────────────────────────────────────────────


class Padding(ConfigSection):
    top: int = Field(default=0, ge=0)
    right: int = Field(default=0, ge=0)
    bottom: int = Field(default=0, ge=0)
    left: int = Field(default=0, ge=0)


class CtaBase(ConfigSection):
    padding: Padding = Field(default_factory=Padding)
    font_type: str = "site"


class NoneCta(CtaBase):
    """No clickable element."""

    cta_type: Literal["none"]
    cta_text: str | None = None
    cta_link: str | None = None
    button_font_color: str | None = None
    button_background_color: str | None = None


class LinkCta(CtaBase):
    """Inline hyperlink inside the message."""

    cta_type: Literal["link"]
    cta_text: Annotated[str, non_empty("CTA text is required for link type")]
    cta_link: CtaLink
    button_font_color: str | None = None
    button_background_color: str | None = None


class BarCta(CtaBase):
    """The whole banner is clickable."""

    cta_type: Literal["bar"]
    cta_link: CtaLink
    cta_text: str | None = None
    button_font_color: str | None = None
    button_background_color: str | None = None


class RegularCta(CtaBase):
    """A styled button."""

    cta_type: Literal["regular"]
    cta_text: Annotated[str, non_empty("CTA text is required for button type")]
    cta_link: CtaLink
    button_font_color: Annotated[str, non_empty("Button font color is required")]
    button_background_color: Annotated[str, non_empty("Button background color is required")]


CtaSection = Annotated[
    NoneCta | LinkCta | BarCta | RegularCta,
    Field(discriminator="cta_type"),
]

CTA_VARIANTS: dict[str, type[CtaBase]] = {
    "none": NoneCta,
    "link": LinkCta,
    "bar": BarCta,
    "regular": RegularCta,
}


# ─────────────────────────────────────────────────────────────────────────────
# Background and display behaviour
# ─────────────────────────────────────────────────────────────────────────────


class BackgroundSection(ConfigSection):
    background_type: str
    color1: str
    color2: str = ""
    color3: str = ""
    pattern: str = ""
    padding_right: int = Field(default=0, ge=0)


class OtherSection(ConfigSection):
    close_button_position: Literal["right", "left"]
    display_before_delay: str = ""
    show_after_closing: str = ""
    show_after_cta: str = Field(default="", alias="showAfterCTA")
    selected_pages: list[str] = Field(default_factory=lambda: [GLOBAL_PAGE_PATTERN])
    campaign_timing: str = ""

    @field_validator("selected_pages")
    @classmethod
    def default_to_global(cls, v: list[str]) -> list[str]:
        return v or [GLOBAL_PAGE_PATTERN]


class AnnouncementConfig(ConfigSection):
    """A fully validated editor payload with defaults applied."""

    basic: BasicSection
    text: TextSection
    cta: CtaSection
    background: BackgroundSection
    other: OtherSection
