"""Announcements API endpoints for storefront banners.

Admin endpoints are scoped to the shop forwarded by the session seam.
The /active endpoint is read by the storefront runtime and takes the shop
as a query parameter.
"""

import logging
import uuid as uuid_pkg
from typing import Any

from fastapi import APIRouter, Body, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_banners.api.deps import CurrentShop, DbSession
from storefront_banners.core.exceptions import NotFoundError, ValidationError
from storefront_banners.domain import announcement_ops
from storefront_banners.domain.announcement_mapper import from_config, to_config
from storefront_banners.domain.announcement_resolver import resolve
from storefront_banners.domain.config_validator import validate_announcement_config
from storefront_banners.models import (
    AnnouncementRead,
    AnnouncementStatusUpdate,
    AnnouncementType,
    AnnouncementUpdate,
)
from storefront_banners.schemas import AnnouncementConfig

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/announcements", tags=["announcements"])


def _validated_config(raw: Any) -> AnnouncementConfig:
    """Validate an editor payload or raise a 422 listing every field error."""
    result = validate_announcement_config(raw)
    if not result.is_valid or result.config is None:
        raise ValidationError([error.model_dump() for error in result.errors])
    return result.config


async def _require_owned(db: AsyncSession, shop: str, announcement_id: uuid_pkg.UUID) -> None:
    if not await announcement_ops.get_by_shop(db, shop_id=shop, id=announcement_id):
        raise NotFoundError("Announcement")


# ─────────────────────────────────────────────────────────────────────────────
# Storefront
# ─────────────────────────────────────────────────────────────────────────────


@router.get("/active", response_model=list[AnnouncementRead])
async def get_active_announcements(
    db: DbSession,
    shop: str = Query(min_length=1),
    path: str | None = None,
) -> list[AnnouncementRead]:
    """Get the announcements a storefront page should render.

    Returns announcements that are:
    - Marked as active
    - Within their scheduled window (open-ended if no end date)
    - Targeting `path` through one of their page patterns (if given)
    """
    return await resolve(db, shop, current_path=path)


# ─────────────────────────────────────────────────────────────────────────────
# Admin
# ─────────────────────────────────────────────────────────────────────────────


@router.post("", response_model=AnnouncementRead, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    db: DbSession,
    shop: CurrentShop,
    config: dict[str, Any] = Body(...),
    type: AnnouncementType = AnnouncementType.BASIC,
) -> AnnouncementRead:
    """Create an announcement from the banner editor payload."""
    validated = _validated_config(config)
    announcement = await announcement_ops.create(db, from_config(validated, shop, type=type))
    created = await announcement_ops.read(db, announcement.id)
    if created is None:
        raise NotFoundError("Announcement")
    return created


@router.get("", response_model=list[AnnouncementRead])
async def list_announcements(
    db: DbSession,
    shop: CurrentShop,
) -> list[AnnouncementRead]:
    """List every announcement of the current shop, latest start first."""
    return await announcement_ops.list_by_shop(db, shop)


@router.get("/{announcement_id}", response_model=AnnouncementRead)
async def get_announcement(
    announcement_id: uuid_pkg.UUID,
    db: DbSession,
    shop: CurrentShop,
) -> AnnouncementRead:
    """Get a single announcement with all of its sections."""
    announcement = await announcement_ops.get_for_shop(db, shop, announcement_id)
    if not announcement:
        raise NotFoundError("Announcement")
    return announcement


@router.get("/{announcement_id}/config")
async def get_announcement_config(
    announcement_id: uuid_pkg.UUID,
    db: DbSession,
    shop: CurrentShop,
) -> dict[str, Any]:
    """Get the editor form state for re-opening an announcement."""
    announcement = await announcement_ops.get_for_shop(db, shop, announcement_id)
    if not announcement:
        raise NotFoundError("Announcement")
    return to_config(announcement)


@router.put("/{announcement_id}", response_model=AnnouncementRead)
async def replace_announcement(
    announcement_id: uuid_pkg.UUID,
    db: DbSession,
    shop: CurrentShop,
    config: dict[str, Any] = Body(...),
    type: AnnouncementType | None = None,
) -> AnnouncementRead:
    """Replace every section of an announcement from an editor payload.

    The active flag is preserved; use the status endpoint to change it.
    """
    await _require_owned(db, shop, announcement_id)
    validated = _validated_config(config)
    stored = from_config(validated, shop, type=type or AnnouncementType.BASIC)
    exclude = {"shop_id", "is_active"} if type else {"shop_id", "is_active", "type"}
    data = AnnouncementUpdate.model_validate(stored.model_dump(exclude=exclude))
    return await announcement_ops.update(db, announcement_id, data)


@router.patch("/{announcement_id}", response_model=AnnouncementRead)
async def update_announcement(
    announcement_id: uuid_pkg.UUID,
    data: AnnouncementUpdate,
    db: DbSession,
    shop: CurrentShop,
) -> AnnouncementRead:
    """Patch header fields; any supplied section replaces the stored one."""
    await _require_owned(db, shop, announcement_id)
    return await announcement_ops.update(db, announcement_id, data)


@router.patch("/{announcement_id}/status", response_model=AnnouncementRead)
async def set_announcement_status(
    announcement_id: uuid_pkg.UUID,
    data: AnnouncementStatusUpdate,
    db: DbSession,
    shop: CurrentShop,
) -> AnnouncementRead:
    """Activate or pause an announcement."""
    await _require_owned(db, shop, announcement_id)
    if not await announcement_ops.set_active(db, announcement_id, data.is_active):
        raise NotFoundError("Announcement")
    logger.info(f"Announcement {announcement_id} is_active={data.is_active}")
    announcement = await announcement_ops.read(db, announcement_id)
    if announcement is None:
        raise NotFoundError("Announcement")
    return announcement


@router.delete("/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_announcement(
    announcement_id: uuid_pkg.UUID,
    db: DbSession,
    shop: CurrentShop,
) -> Response:
    """Delete an announcement and everything it owns.

    Deleting an announcement that no longer exists is not an error.
    """
    if await announcement_ops.get_by_shop(db, shop_id=shop, id=announcement_id):
        await announcement_ops.delete(db, announcement_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
