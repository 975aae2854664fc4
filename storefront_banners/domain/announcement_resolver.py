"""Selection of the announcements a storefront page should render.

An announcement is served when it is active, its schedule window contains
the current instant, and (if a path is given) one of its page patterns
targets that path. Patterns are regular expressions matched anywhere in
the path, or the "__global" sentinel that targets every page.
"""

import logging
import re
from collections.abc import Iterable
from datetime import datetime

from cachetools import LRUCache, cached  # type: ignore[import-untyped]
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_banners.domain.announcement_operations import announcement_ops
from storefront_banners.models.announcement import GLOBAL_PAGE_PATTERN, AnnouncementRead

logger = logging.getLogger(__name__)


# Keyed by pattern string; invalid patterns are cached as None
@cached(LRUCache(maxsize=1024))
def _compile(pattern: str) -> re.Pattern[str] | None:
    """Compile a stored page pattern; None if it is not a valid regex."""
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.debug(f"Ignoring invalid page pattern {pattern!r}: {e}")
        return None


def matches_path(patterns: Iterable[str], path: str) -> bool:
    """Check whether any pattern targets the given storefront path."""
    for pattern in patterns:
        if pattern == GLOBAL_PAGE_PATTERN:
            return True
        compiled = _compile(pattern)
        if compiled is not None and compiled.search(path):
            return True
    return False


async def resolve(
    db: AsyncSession,
    shop_id: str,
    current_path: str | None = None,
    now: datetime | None = None,
) -> list[AnnouncementRead]:
    """Announcements to render for a shop, optionally narrowed to one page."""
    announcements = await announcement_ops.get_active_by_shop(db, shop_id, now=now)
    if not current_path:
        return announcements
    return [a for a in announcements if matches_path(a.page_patterns, current_path)]
