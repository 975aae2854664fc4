"""Test data factories for editor payloads and stored announcements.

Editor payloads use the form's camelCase keys. All titles carry a
[TEST] prefix so fixtures are easy to identify.
"""

from __future__ import annotations

import copy
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from storefront_banners.domain.announcement_operations import announcement_ops
from storefront_banners.models import (
    Announcement,
    AnnouncementCreate,
    AnnouncementTextData,
    BannerBackgroundData,
    BannerFormFieldData,
    CallToActionData,
)

_VALID_CONFIG: dict[str, Any] = {
    "basic": {
        "size": "medium",
        "sizeHeight": "",
        "sizeWidth": "",
        "campaignTitle": "[TEST] Summer sale",
        "startType": "now",
        "endType": "until_stop",
    },
    "text": {
        "announcementText": "Free shipping on orders over $50",
        "textColor": "#ffffff",
        "fontSize": 16,
        "fontType": "site",
    },
    "cta": {
        "ctaType": "regular",
        "ctaText": "Shop now",
        "ctaLink": "https://example.com/sale",
        "buttonFontColor": "#000000",
        "buttonBackgroundColor": "#ffcc00",
        "padding": {"top": 4, "right": 8, "bottom": 4, "left": 8},
        "fontType": "site",
    },
    "background": {
        "backgroundType": "solid",
        "color1": "#111111",
        "paddingRight": 0,
    },
    "other": {
        "closeButtonPosition": "right",
        "displayBeforeDelay": "",
        "showAfterClosing": "",
        "showAfterCTA": "",
        "selectedPages": [],
        "campaignTiming": "",
    },
}


def make_config(**sections: dict[str, Any]) -> dict[str, Any]:
    """A valid editor payload; keyword sections are merged over the defaults."""
    config = copy.deepcopy(_VALID_CONFIG)
    for name, values in sections.items():
        config[name] = {**config[name], **values}
    return config


def make_announcement_create(shop_id: str, **overrides: Any) -> AnnouncementCreate:
    """A fully populated create payload (texts, CTA, background, form, patterns)."""
    data: dict[str, Any] = {
        "shop_id": shop_id,
        "title": "[TEST] Announcement",
        "start_date": datetime(2026, 1, 1, tzinfo=UTC),
        "texts": [
            AnnouncementTextData(
                text_message="Hello shoppers",
                text_color="#ffffff",
                call_to_actions=[
                    CallToActionData(cta_type="link", text="Shop", link="https://example.com")
                ],
            ),
            AnnouncementTextData(text_message="Second message", text_color="#eeeeee"),
        ],
        "background": BannerBackgroundData(background_type="solid", color1="#000000"),
        "form": [BannerFormFieldData(input_type="email", placeholder="you@example.com")],
        "page_patterns": ["^/products"],
    }
    data.update(overrides)
    return AnnouncementCreate(**data)


async def create_announcement(
    db: AsyncSession,
    shop_id: str,
    **overrides: Any,
) -> Announcement:
    """Create an announcement through the domain operations and flush it."""
    announcement = await announcement_ops.create(db, make_announcement_create(shop_id, **overrides))
    await db.flush()
    return announcement
