from storefront_banners.domain.announcement_operations import announcement_ops

__all__ = [
    "announcement_ops",
]
