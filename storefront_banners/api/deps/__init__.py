"""API dependencies."""

from .shop import CurrentShop, DbSession, get_current_shop

__all__ = [
    "CurrentShop",
    "DbSession",
    "get_current_shop",
]
