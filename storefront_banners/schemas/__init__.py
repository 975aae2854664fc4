"""Pydantic schemas for API request/response validation."""

from storefront_banners.schemas.announcement_config import (
    CTA_VARIANTS,
    AnnouncementConfig,
    BackgroundSection,
    BarCta,
    BasicSection,
    CtaSection,
    FieldError,
    LinkCta,
    NoneCta,
    OtherSection,
    Padding,
    RegularCta,
    TextSection,
)

__all__ = [
    "AnnouncementConfig",
    "BackgroundSection",
    "BarCta",
    "BasicSection",
    "CTA_VARIANTS",
    "CtaSection",
    "FieldError",
    "LinkCta",
    "NoneCta",
    "OtherSection",
    "Padding",
    "RegularCta",
    "TextSection",
]
