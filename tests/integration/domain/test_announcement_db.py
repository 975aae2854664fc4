"""DB integration tests for AnnouncementOperations and the resolver."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_banners.core.exceptions import NotFoundError, TransactionFailure
from storefront_banners.domain.announcement_operations import announcement_ops
from storefront_banners.domain.announcement_resolver import resolve
from storefront_banners.models import (
    GLOBAL_PAGE_PATTERN,
    Announcement,
    AnnouncementPagePattern,
    AnnouncementText,
    AnnouncementTextData,
    AnnouncementUpdate,
    BannerBackground,
    BannerBackgroundData,
    BannerFormField,
    CallToAction,
    CallToActionData,
    PagePattern,
)

from tests.helpers.factories import create_announcement, make_announcement_create

NOW = datetime(2026, 6, 1, tzinfo=UTC)


async def _count(db: AsyncSession, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


# ─────────────────────────────────────────────────────────────────────────────
# Create / Read
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_and_read_round_trip(db_session: AsyncSession, test_shop: str):
    data = make_announcement_create(test_shop)
    announcement = await announcement_ops.create(db_session, data)

    result = await announcement_ops.read(db_session, announcement.id)

    assert result is not None
    assert result.id == announcement.id
    assert result.start_date == data.start_date
    assert [t.text_message for t in result.texts] == ["Hello shoppers", "Second message"]
    assert result.texts[0].call_to_actions[0].cta_type == "link"
    assert result.texts[1].call_to_actions == []
    assert result.background == data.background
    assert result.form == data.form
    assert result.page_patterns == ["^/products"]
    assert result.is_active is True


@pytest.mark.asyncio
async def test_create_without_optional_sections(db_session: AsyncSession, test_shop: str):
    announcement = await create_announcement(
        db_session, test_shop, texts=[], background=None, form=[], page_patterns=[]
    )

    result = await announcement_ops.read(db_session, announcement.id)

    assert result.texts == []
    assert result.background is None
    assert result.form == []
    assert result.page_patterns == [GLOBAL_PAGE_PATTERN]


@pytest.mark.asyncio
async def test_identical_patterns_share_one_dictionary_row(db_session: AsyncSession, test_shop: str):
    await create_announcement(db_session, test_shop, page_patterns=["^/cart", "^/cart", "^/blog"])
    await create_announcement(db_session, test_shop, page_patterns=["^/cart"])

    assert await _count(db_session, PagePattern) == 2
    assert await _count(db_session, AnnouncementPagePattern) == 3


@pytest.mark.asyncio
async def test_pattern_stored_by_another_session_is_reused(
    db_engine, db_session: AsyncSession, test_shop: str
):
    async with AsyncSession(bind=db_engine) as other:
        other.add(PagePattern(pattern="^/cart"))
        await other.commit()

    announcement = await create_announcement(db_session, test_shop, page_patterns=["^/cart"])

    result = await announcement_ops.read(db_session, announcement.id)
    assert result.page_patterns == ["^/cart"]
    assert await _count(db_session, PagePattern) == 1


@pytest.mark.asyncio
async def test_get_for_shop_is_scoped(db_session: AsyncSession, test_shop: str):
    announcement = await create_announcement(db_session, test_shop)

    assert await announcement_ops.get_for_shop(db_session, test_shop, announcement.id)
    assert await announcement_ops.get_for_shop(db_session, "other.myshopify.com", announcement.id) is None


@pytest.mark.asyncio
async def test_list_by_shop_orders_by_start_date_desc(db_session: AsyncSession, test_shop: str):
    for month in (1, 3, 2):
        await create_announcement(
            db_session,
            test_shop,
            title=f"[TEST] Month {month}",
            start_date=datetime(2026, month, 1, tzinfo=UTC),
        )
    await create_announcement(db_session, "other.myshopify.com")

    result = await announcement_ops.list_by_shop(db_session, test_shop)

    assert [a.title for a in result] == ["[TEST] Month 3", "[TEST] Month 2", "[TEST] Month 1"]


# ─────────────────────────────────────────────────────────────────────────────
# Update
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_background_only_update_leaves_texts_and_form(db_session: AsyncSession, test_shop: str):
    announcement = await create_announcement(db_session, test_shop)
    before = await announcement_ops.read(db_session, announcement.id)

    result = await announcement_ops.update(
        db_session,
        announcement.id,
        AnnouncementUpdate(
            background=BannerBackgroundData(background_type="gradient", color1="#f00", color2="#00f")
        ),
    )

    assert result.background.background_type == "gradient"
    assert result.texts == before.texts
    assert result.form == before.form
    assert result.page_patterns == before.page_patterns
    assert await _count(db_session, BannerBackground) == 1


@pytest.mark.asyncio
async def test_texts_update_replaces_texts_and_ctas(db_session: AsyncSession, test_shop: str):
    announcement = await create_announcement(db_session, test_shop)

    result = await announcement_ops.update(
        db_session,
        announcement.id,
        AnnouncementUpdate(
            texts=[
                AnnouncementTextData(
                    text_message="Only message",
                    text_color="#000",
                    call_to_actions=[CallToActionData(cta_type="bar", link="https://example.com/bar")],
                )
            ]
        ),
    )

    assert [t.text_message for t in result.texts] == ["Only message"]
    assert await _count(db_session, AnnouncementText) == 1
    assert await _count(db_session, CallToAction) == 1


@pytest.mark.asyncio
async def test_explicit_null_background_removes_it(db_session: AsyncSession, test_shop: str):
    announcement = await create_announcement(db_session, test_shop)

    result = await announcement_ops.update(
        db_session, announcement.id, AnnouncementUpdate(background=None)
    )

    assert result.background is None
    assert await _count(db_session, BannerBackground) == 0


@pytest.mark.asyncio
async def test_header_update_keeps_sections(db_session: AsyncSession, test_shop: str):
    announcement = await create_announcement(db_session, test_shop)

    result = await announcement_ops.update(
        db_session, announcement.id, AnnouncementUpdate(title="[TEST] Renamed")
    )

    assert result.title == "[TEST] Renamed"
    assert len(result.texts) == 2
    assert result.page_patterns == ["^/products"]


@pytest.mark.asyncio
async def test_update_unknown_id_raises_not_found(db_session: AsyncSession):
    with pytest.raises(NotFoundError):
        await announcement_ops.update(db_session, uuid4(), AnnouncementUpdate(title="x"))


# ─────────────────────────────────────────────────────────────────────────────
# Delete / Status
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_delete_removes_every_row_and_is_idempotent(db_session: AsyncSession, test_shop: str):
    announcement = await create_announcement(db_session, test_shop)

    assert await announcement_ops.delete(db_session, announcement.id) is True

    for model in (
        Announcement,
        AnnouncementText,
        CallToAction,
        BannerBackground,
        BannerFormField,
        AnnouncementPagePattern,
    ):
        assert await _count(db_session, model) == 0, model.__tablename__

    assert await announcement_ops.delete(db_session, announcement.id) is False


@pytest.mark.asyncio
async def test_delete_leaves_other_announcements(db_session: AsyncSession, test_shop: str):
    doomed = await create_announcement(db_session, test_shop)
    kept = await create_announcement(db_session, test_shop)

    await announcement_ops.delete(db_session, doomed.id)

    result = await announcement_ops.read(db_session, kept.id)
    assert len(result.texts) == 2
    assert result.background is not None


@pytest.mark.asyncio
async def test_set_active_flips_flag(db_session: AsyncSession, test_shop: str):
    announcement = await create_announcement(db_session, test_shop)

    await announcement_ops.set_active(db_session, announcement.id, False)

    result = await announcement_ops.read(db_session, announcement.id)
    assert result.is_active is False
    assert len(result.texts) == 2


# ─────────────────────────────────────────────────────────────────────────────
# Transactions
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_failed_create_leaves_no_rows(db_session: AsyncSession, test_shop: str):
    failure = AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("duplicate")))

    with patch.object(announcement_ops, "_link_page_patterns", failure):
        with pytest.raises(TransactionFailure) as exc_info:
            await announcement_ops.create(db_session, make_announcement_create(test_shop))

    assert exc_info.value.operation == "create"
    assert await _count(db_session, Announcement) == 0
    assert await _count(db_session, AnnouncementText) == 0
    assert await _count(db_session, CallToAction) == 0


# ─────────────────────────────────────────────────────────────────────────────
# Activation and resolution
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_get_active_by_shop_respects_window_and_flag(db_session: AsyncSession, test_shop: str):
    open_ended = await create_announcement(db_session, test_shop, title="[TEST] open")
    bounded = await create_announcement(
        db_session, test_shop, title="[TEST] bounded", end_date=datetime(2026, 12, 31, tzinfo=UTC)
    )
    await create_announcement(
        db_session, test_shop, title="[TEST] ended", end_date=datetime(2026, 2, 1, tzinfo=UTC)
    )
    await create_announcement(
        db_session, test_shop, title="[TEST] future", start_date=datetime(2026, 9, 1, tzinfo=UTC)
    )
    await create_announcement(db_session, test_shop, title="[TEST] paused", is_active=False)

    result = await announcement_ops.get_active_by_shop(db_session, test_shop, now=NOW)

    assert {a.id for a in result} == {open_ended.id, bounded.id}


@pytest.mark.asyncio
async def test_resolve_filters_by_page_pattern(db_session: AsyncSession, test_shop: str):
    cart = await create_announcement(db_session, test_shop, page_patterns=["^/cart"])
    everywhere = await create_announcement(db_session, test_shop, page_patterns=[GLOBAL_PAGE_PATTERN])
    broken = await create_announcement(db_session, test_shop, page_patterns=["("])

    on_product = await resolve(db_session, test_shop, "/products/widget", now=NOW)
    unfiltered = await resolve(db_session, test_shop, now=NOW)
    empty_path = await resolve(db_session, test_shop, "", now=NOW)

    assert [a.id for a in on_product] == [everywhere.id]
    assert {a.id for a in unfiltered} == {cart.id, everywhere.id, broken.id}
    assert {a.id for a in empty_path} == {cart.id, everywhere.id, broken.id}
