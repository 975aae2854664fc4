"""Announcement models for storefront promotional banners.

One announcement fans out into several tables:

    announcements
    ├── announcement_texts ── call_to_actions
    ├── banner_backgrounds (zero or one)
    ├── banner_form_fields
    └── announcement_page_patterns ── page_patterns (shared dictionary)

Relationships are not declared on the table models. Reads assemble the
nested shape explicitly (see domain/announcement_mapper.py).
"""

import uuid as uuid_pkg
from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import field_validator, model_validator
from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid, text
from sqlmodel import Field, SQLModel

from storefront_banners.models.base import ShopOwnedMixin, TimestampMixin, UUIDMixin

# Page pattern that targets every storefront path
GLOBAL_PAGE_PATTERN = "__global"


class AnnouncementType(str, Enum):
    """Banner layouts supported by the storefront runtime."""

    BASIC = "basic"
    COUNTDOWN = "countdown"
    EMAIL_SIGNUP = "email_signup"
    MULTI_TEXT = "multi_text"


class AnnouncementSize(str, Enum):
    """Preset banner heights, or custom pixel/percent dimensions."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    CUSTOM = "custom"


class StartType(str, Enum):
    NOW = "now"
    SPECIFIC = "specific"


class EndType(str, Enum):
    UNTIL_STOP = "until_stop"
    SPECIFIC = "specific"


class CloseButtonPosition(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


# none: no clickable element. link: inline hyperlink. bar: whole banner
# clickable. regular: button with its own colors.
CtaTypeValue = Literal["none", "link", "bar", "regular"]
FormInputType = Literal["email", "text", "checkbox"]


def normalize_page_patterns(patterns: list[str] | None) -> list[str] | None:
    """An announcement always targets at least one page; empty means global."""
    if patterns is None:
        return None
    cleaned = [p for p in patterns if p]
    return cleaned or [GLOBAL_PAGE_PATTERN]


# ─────────────────────────────────────────────────────────────────────────────
# Table models
# ─────────────────────────────────────────────────────────────────────────────


class AnnouncementBase(SQLModel):
    """Header fields stored on the announcements row."""

    type: AnnouncementType = Field(
        default=AnnouncementType.BASIC,
        sa_type=String(20),
        nullable=False,
    )
    title: str = Field(max_length=255)

    # Size
    size: AnnouncementSize = Field(
        default=AnnouncementSize.MEDIUM,
        sa_type=String(20),
        nullable=False,
    )
    height_px: int | None = Field(default=None, gt=0)
    width_percent: float | None = Field(default=None, gt=0, le=100)

    # Schedule
    start_type: StartType = Field(default=StartType.NOW, sa_type=String(20), nullable=False)
    end_type: EndType = Field(default=EndType.UNTIL_STOP, sa_type=String(20), nullable=False)
    start_date: datetime = Field(  # type: ignore[call-overload]
        nullable=False,
        index=True,
        sa_type=DateTime(timezone=True),
    )
    # NULL means the campaign runs until it is stopped
    end_date: datetime | None = Field(  # type: ignore[call-overload]
        default=None,
        nullable=True,
        sa_type=DateTime(timezone=True),
    )
    countdown_end_time: datetime | None = Field(  # type: ignore[call-overload]
        default=None,
        nullable=True,
        sa_type=DateTime(timezone=True),
    )
    timezone: str = Field(default="UTC", max_length=64)

    # Behavior
    show_close_button: bool = Field(default=True)
    close_button_position: CloseButtonPosition = Field(
        default=CloseButtonPosition.RIGHT,
        sa_type=String(10),
        nullable=False,
    )
    display_before_delay: str | None = Field(default=None, max_length=50)
    show_after_closing: str | None = Field(default=None, max_length=50)
    show_after_cta: str | None = Field(default=None, max_length=50)
    campaign_timing: str | None = Field(default=None, max_length=50)

    is_active: bool = Field(default=True)


class Announcement(AnnouncementBase, UUIDMixin, ShopOwnedMixin, TimestampMixin, table=True):
    """Announcement header row, one per banner campaign."""

    __tablename__ = "announcements"


class AnnouncementText(UUIDMixin, table=True):
    """A message block shown inside a banner."""

    __tablename__ = "announcement_texts"

    announcement_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("announcements.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    position: int = Field(default=0)
    text_message: str = Field(sa_column=Column(Text, nullable=False))
    text_color: str = Field(max_length=32)
    font_size: float = Field(default=16)
    font_type: str = Field(default="site", max_length=20)  # site | dynamic | custom
    custom_font: str | None = Field(default=None, max_length=255)
    language_code: str | None = Field(default=None, max_length=10)


class CallToAction(UUIDMixin, table=True):
    """Clickable element attached to a text block."""

    __tablename__ = "call_to_actions"

    announcement_text_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("announcement_texts.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    position: int = Field(default=0)
    cta_type: str = Field(
        sa_column=Column(String(20), nullable=False, server_default=text("'none'")),
    )
    text: str | None = Field(default=None, max_length=255)
    link: str | None = Field(default=None, max_length=2048)
    button_font_color: str | None = Field(default=None, max_length=32)
    button_background_color: str | None = Field(default=None, max_length=32)
    font_type: str = Field(default="site", max_length=20)
    padding_top: int = Field(default=0)
    padding_right: int = Field(default=0)
    padding_bottom: int = Field(default=0)
    padding_left: int = Field(default=0)


class BannerBackground(UUIDMixin, table=True):
    """Background styling, at most one per announcement."""

    __tablename__ = "banner_backgrounds"

    announcement_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("announcements.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
    )
    background_type: str = Field(max_length=20)
    color1: str = Field(max_length=32)
    color2: str | None = Field(default=None, max_length=32)
    color3: str | None = Field(default=None, max_length=32)
    pattern: str | None = Field(default=None, max_length=100)
    padding_right: int = Field(default=0)


class BannerFormField(UUIDMixin, table=True):
    """Input rendered by email-signup banners."""

    __tablename__ = "banner_form_fields"

    announcement_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("announcements.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    position: int = Field(default=0)
    input_type: str = Field(max_length=20)  # email | text | checkbox
    placeholder: str | None = Field(default=None, max_length=255)
    label: str | None = Field(default=None, max_length=255)
    is_required: bool = Field(default=False)
    validation_regex: str | None = Field(default=None, max_length=500)


class PagePattern(UUIDMixin, table=True):
    """Shared dictionary of page-matching rules (regex or the global sentinel)."""

    __tablename__ = "page_patterns"

    pattern: str = Field(max_length=500, unique=True, index=True)


class AnnouncementPagePattern(SQLModel, table=True):
    """Link table between announcements and page patterns."""

    __tablename__ = "announcement_page_patterns"

    announcement_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("announcements.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    page_pattern_id: uuid_pkg.UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("page_patterns.id", ondelete="CASCADE"),
            primary_key=True,
            index=True,
        ),
    )
    position: int = Field(default=0)


# ─────────────────────────────────────────────────────────────────────────────
# Request/Response schemas
# ─────────────────────────────────────────────────────────────────────────────


class CallToActionData(SQLModel):
    """A call-to-action as written to and read from the store."""

    cta_type: CtaTypeValue = "none"
    text: str | None = None
    link: str | None = None
    button_font_color: str | None = None
    button_background_color: str | None = None
    font_type: str = "site"
    padding_top: int = Field(default=0, ge=0)
    padding_right: int = Field(default=0, ge=0)
    padding_bottom: int = Field(default=0, ge=0)
    padding_left: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_required_for_type(self) -> "CallToActionData":
        required: tuple[str, ...] = {
            "none": (),
            "link": ("text", "link"),
            "bar": ("link",),
            "regular": ("text", "link", "button_font_color", "button_background_color"),
        }[self.cta_type]
        missing = [name for name in required if not getattr(self, name)]
        if missing:
            raise ValueError(f"{self.cta_type} call to action requires {', '.join(missing)}")
        return self


class AnnouncementTextData(SQLModel):
    """A text block with its nested calls to action."""

    text_message: str = Field(min_length=1)
    text_color: str
    font_size: float = Field(default=16, ge=8, le=72)
    font_type: str = "site"
    custom_font: str | None = None
    language_code: str | None = None
    call_to_actions: list[CallToActionData] = Field(default_factory=list)


class BannerBackgroundData(SQLModel):
    background_type: str
    color1: str
    color2: str | None = None
    color3: str | None = None
    pattern: str | None = None
    padding_right: int = Field(default=0, ge=0)


class BannerFormFieldData(SQLModel):
    input_type: FormInputType
    placeholder: str | None = None
    label: str | None = None
    is_required: bool = False
    validation_regex: str | None = None


class AnnouncementCreate(AnnouncementBase):
    """Schema for creating an announcement with all of its sections."""

    shop_id: str
    texts: list[AnnouncementTextData] = Field(default_factory=list)
    background: BannerBackgroundData | None = None
    form: list[BannerFormFieldData] = Field(default_factory=list)
    page_patterns: list[str] = Field(default_factory=lambda: [GLOBAL_PAGE_PATTERN])

    @field_validator("page_patterns")
    @classmethod
    def default_to_global(cls, v: list[str]) -> list[str]:
        return normalize_page_patterns(v) or [GLOBAL_PAGE_PATTERN]


class AnnouncementUpdate(SQLModel):
    """Schema for a partial update.

    Header fields are patched individually. A supplied section (texts,
    background, form, page_patterns) replaces the stored collection as a
    whole; omitted sections are left untouched.
    """

    type: AnnouncementType | None = None
    title: str | None = None
    size: AnnouncementSize | None = None
    height_px: int | None = Field(default=None, gt=0)
    width_percent: float | None = Field(default=None, gt=0, le=100)
    start_type: StartType | None = None
    end_type: EndType | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    countdown_end_time: datetime | None = None
    timezone: str | None = None
    show_close_button: bool | None = None
    close_button_position: CloseButtonPosition | None = None
    display_before_delay: str | None = None
    show_after_closing: str | None = None
    show_after_cta: str | None = None
    campaign_timing: str | None = None
    is_active: bool | None = None

    texts: list[AnnouncementTextData] | None = None
    background: BannerBackgroundData | None = None
    form: list[BannerFormFieldData] | None = None
    page_patterns: list[str] | None = None

    @field_validator("page_patterns")
    @classmethod
    def default_to_global(cls, v: list[str] | None) -> list[str] | None:
        return normalize_page_patterns(v)


class AnnouncementRead(AnnouncementBase):
    """A fully recomposed announcement (API response and serving payload)."""

    id: uuid_pkg.UUID
    shop_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    texts: list[AnnouncementTextData] = Field(default_factory=list)
    background: BannerBackgroundData | None = None
    form: list[BannerFormFieldData] = Field(default_factory=list)
    page_patterns: list[str] = Field(default_factory=list)


class AnnouncementStatusUpdate(SQLModel):
    """Schema for toggling an announcement on or off."""

    is_active: bool
