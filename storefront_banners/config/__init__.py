"""Configuration package."""

from storefront_banners.config.settings import Settings, settings

__all__ = [
    "Settings",
    "settings",
]
