from storefront_banners.api.v1 import announcements

__all__ = [
    "announcements",
]
