"""Shop session dependency.

The embedding admin app authenticates the merchant and forwards the shop
domain on every request. Handlers only ever see announcements owned by
that shop.
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_banners.config import settings
from storefront_banners.core.database import get_db

logger = logging.getLogger(__name__)


async def get_current_shop(request: Request) -> str:
    """Return the authenticated shop domain, or 401 if none was forwarded."""
    shop = request.headers.get(settings.shop_header, "").strip()
    if not shop:
        logger.warning(f"Request to {request.url.path} without {settings.shop_header} header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Shop session required",
        )
    return shop


DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentShop = Annotated[str, Depends(get_current_shop)]
