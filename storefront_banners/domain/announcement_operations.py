"""Domain operations for Announcement and its owned rows.

Every write is one unit of work on the request session: rows are flushed
in parent-before-child order and, if any statement fails, the session is
rolled back and a TransactionFailure is raised. The request dependency
commits on success.

Owned collections (texts with their CTAs, background, form fields, page
pattern links) use replace-all semantics on update: a supplied collection
deletes the stored one and reinserts the new set; it is never diffed.
"""

import logging
import uuid as uuid_pkg
from collections import defaultdict
from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_banners.core.exceptions import NotFoundError, TransactionFailure
from storefront_banners.domain.announcement_mapper import (
    SECTION_FIELDS,
    RecordSet,
    TextRecord,
    build_background,
    build_form_fields,
    build_text_records,
    decompose,
    recompose,
)
from storefront_banners.domain.base_operations import BaseOperations
from storefront_banners.models.announcement import (
    Announcement,
    AnnouncementCreate,
    AnnouncementPagePattern,
    AnnouncementRead,
    AnnouncementText,
    AnnouncementTextData,
    AnnouncementUpdate,
    BannerBackground,
    BannerBackgroundData,
    BannerFormField,
    BannerFormFieldData,
    CallToAction,
    PagePattern,
)

logger = logging.getLogger(__name__)

# Header columns that cannot be cleared by an explicit null in a patch
_REQUIRED_HEADER_FIELDS = frozenset(
    {
        "type",
        "title",
        "size",
        "start_type",
        "end_type",
        "start_date",
        "timezone",
        "show_close_button",
        "close_button_position",
        "is_active",
    }
)


class AnnouncementOperations(BaseOperations[Announcement]):
    """Create/read/update/delete for announcements and their child rows."""

    def __init__(self) -> None:
        super().__init__(Announcement)

    # ─────────────────────────────────────────────────────────────────────
    # Writes
    # ─────────────────────────────────────────────────────────────────────

    async def create(
        self,
        db: AsyncSession,
        data: AnnouncementCreate,
    ) -> Announcement:
        """Insert an announcement with its texts, CTAs, background, form and patterns.

        Returns the header row.
        """
        record_set = decompose(data)
        announcement = record_set.announcement
        try:
            db.add(announcement)
            await db.flush()
            await self._insert_texts(db, record_set.texts)
            if record_set.background is not None:
                db.add(record_set.background)
            db.add_all(record_set.form)
            await db.flush()
            await self._link_page_patterns(db, announcement.id, record_set.page_patterns)
            await db.refresh(announcement)
        except SQLAlchemyError as e:
            await self._fail(db, "create", announcement.id, e)

        logger.info(f"Created announcement {announcement.id} for shop {announcement.shop_id}")
        return announcement

    async def update(
        self,
        db: AsyncSession,
        id: uuid_pkg.UUID,
        data: AnnouncementUpdate,
    ) -> AnnouncementRead:
        """Patch header fields and replace each supplied section.

        Sections left out of the payload are not touched. Raises
        NotFoundError for an unknown id.
        """
        announcement = await self.get(db, id)
        if not announcement:
            raise NotFoundError("Announcement")

        changes = data.model_dump(exclude_unset=True)
        header = {
            field: value
            for field, value in changes.items()
            if field not in SECTION_FIELDS
            and not (value is None and field in _REQUIRED_HEADER_FIELDS)
        }
        header["updated_at"] = datetime.now(UTC)

        try:
            await self.update_fields(db, announcement, header)
            if "texts" in changes:
                await self.set_texts(db, id, data.texts or [])
            if "background" in changes:
                await self.set_background(db, id, data.background)
            if "form" in changes:
                await self.set_form(db, id, data.form or [])
            if "page_patterns" in changes:
                await self.set_page_patterns(db, id, data.page_patterns or [])
        except SQLAlchemyError as e:
            await self._fail(db, "update", id, e)

        logger.info(
            f"Updated announcement {id} "
            f"(sections: {sorted(SECTION_FIELDS & changes.keys()) or 'header only'})"
        )
        result = await self.read(db, id)
        if result is None:
            raise NotFoundError("Announcement")
        return result

    async def set_texts(
        self,
        db: AsyncSession,
        announcement_id: uuid_pkg.UUID,
        texts: list[AnnouncementTextData],
    ) -> None:
        """Replace every text block (and its CTAs) of an announcement."""
        await self._delete_texts(db, announcement_id)
        await self._insert_texts(db, build_text_records(announcement_id, texts))

    async def set_background(
        self,
        db: AsyncSession,
        announcement_id: uuid_pkg.UUID,
        background: BannerBackgroundData | None,
    ) -> None:
        """Replace the background; None removes it."""
        await db.execute(
            delete(BannerBackground).where(
                BannerBackground.announcement_id == announcement_id  # type: ignore[arg-type]
            )
        )
        row = build_background(announcement_id, background)
        if row is not None:
            db.add(row)
        await db.flush()

    async def set_form(
        self,
        db: AsyncSession,
        announcement_id: uuid_pkg.UUID,
        form: list[BannerFormFieldData],
    ) -> None:
        """Replace every form field of an announcement."""
        await db.execute(
            delete(BannerFormField).where(
                BannerFormField.announcement_id == announcement_id  # type: ignore[arg-type]
            )
        )
        db.add_all(build_form_fields(announcement_id, form))
        await db.flush()

    async def set_page_patterns(
        self,
        db: AsyncSession,
        announcement_id: uuid_pkg.UUID,
        patterns: list[str],
    ) -> None:
        """Replace the page-pattern links of an announcement."""
        await db.execute(
            delete(AnnouncementPagePattern).where(
                AnnouncementPagePattern.announcement_id == announcement_id  # type: ignore[arg-type]
            )
        )
        await self._link_page_patterns(db, announcement_id, patterns)

    async def set_active(
        self,
        db: AsyncSession,
        id: uuid_pkg.UUID,
        is_active: bool,
    ) -> Announcement | None:
        """Flip the active flag only. Returns None if the announcement is missing."""
        announcement = await self.get(db, id)
        if not announcement:
            return None
        return await self.update_fields(db, announcement, {"is_active": is_active})

    async def delete(
        self,
        db: AsyncSession,
        id: uuid_pkg.UUID,
    ) -> bool:
        """Delete an announcement and all of its rows, children first.

        Idempotent: deleting a missing id is not an error. Returns whether
        a header row was removed.
        """
        try:
            await db.execute(
                delete(AnnouncementPagePattern).where(
                    AnnouncementPagePattern.announcement_id == id  # type: ignore[arg-type]
                )
            )
            await self._delete_texts(db, id)
            await db.execute(
                delete(BannerBackground).where(
                    BannerBackground.announcement_id == id  # type: ignore[arg-type]
                )
            )
            await db.execute(
                delete(BannerFormField).where(
                    BannerFormField.announcement_id == id  # type: ignore[arg-type]
                )
            )
            result = await db.execute(delete(Announcement).where(Announcement.id == id))  # type: ignore[arg-type]
            await db.flush()
        except SQLAlchemyError as e:
            await self._fail(db, "delete", id, e)

        deleted = bool(result.rowcount)
        if deleted:
            logger.info(f"Deleted announcement {id}")
        return deleted

    # ─────────────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────────────

    async def read(
        self,
        db: AsyncSession,
        id: uuid_pkg.UUID,
    ) -> AnnouncementRead | None:
        """Get an announcement with all of its sections, or None if missing."""
        announcement = await self.get(db, id)
        if not announcement:
            return None
        record_sets = await self._load_record_sets(db, [announcement])
        return recompose(record_sets[0])

    async def get_for_shop(
        self,
        db: AsyncSession,
        shop_id: str,
        id: uuid_pkg.UUID,
    ) -> AnnouncementRead | None:
        """Get a fully recomposed announcement, scoped to a shop."""
        announcement = await self.get_by_shop(db, shop_id=shop_id, id=id)
        if not announcement:
            return None
        record_sets = await self._load_record_sets(db, [announcement])
        return recompose(record_sets[0])

    async def list_by_shop(
        self,
        db: AsyncSession,
        shop_id: str,
    ) -> list[AnnouncementRead]:
        """All announcements for a shop, most recently scheduled first."""
        statement = (
            select(Announcement)
            .where(Announcement.shop_id == shop_id)  # type: ignore[arg-type]
            .order_by(
                Announcement.start_date.desc(),  # type: ignore[attr-defined]
                Announcement.created_at.desc(),  # type: ignore[attr-defined]
            )
        )
        result = await db.execute(statement)
        announcements = list(result.scalars().all())
        return [recompose(rs) for rs in await self._load_record_sets(db, announcements)]

    async def get_active_by_shop(
        self,
        db: AsyncSession,
        shop_id: str,
        now: datetime | None = None,
    ) -> list[AnnouncementRead]:
        """Active announcements whose schedule window contains `now`.

        Returns announcements where:
        - is_active = true
        - start_date <= now
        - end_date IS NULL OR end_date >= now (both bounds inclusive)
        """
        now = now or datetime.now(UTC)
        statement = (
            select(Announcement)
            .where(
                Announcement.shop_id == shop_id,  # type: ignore[arg-type]
                Announcement.is_active == True,  # type: ignore[arg-type]  # noqa: E712
                Announcement.start_date <= now,  # type: ignore[operator]
                (Announcement.end_date.is_(None))  # type: ignore[union-attr]
                | (Announcement.end_date >= now),  # type: ignore[operator]
            )
            .order_by(Announcement.start_date.desc())  # type: ignore[attr-defined]
        )
        result = await db.execute(statement)
        announcements = list(result.scalars().all())
        return [recompose(rs) for rs in await self._load_record_sets(db, announcements)]

    # ─────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────

    async def _insert_texts(self, db: AsyncSession, records: list[TextRecord]) -> None:
        """Insert text rows, then the CTA rows that reference them."""
        if not records:
            return
        db.add_all([record.text for record in records])
        await db.flush()
        ctas = [cta for record in records for cta in record.call_to_actions]
        if ctas:
            db.add_all(ctas)
            await db.flush()

    async def _delete_texts(self, db: AsyncSession, announcement_id: uuid_pkg.UUID) -> None:
        """Delete the CTA rows of every text block, then the text blocks."""
        text_ids = select(AnnouncementText.id).where(
            AnnouncementText.announcement_id == announcement_id  # type: ignore[arg-type]
        )
        await db.execute(
            delete(CallToAction).where(
                CallToAction.announcement_text_id.in_(text_ids)  # type: ignore[attr-defined]
            )
        )
        await db.execute(
            delete(AnnouncementText).where(
                AnnouncementText.announcement_id == announcement_id  # type: ignore[arg-type]
            )
        )

    async def _get_or_create_pattern(self, db: AsyncSession, pattern: str) -> uuid_pkg.UUID:
        """Id of a page pattern, inserting it on first use.

        The insert is a no-op when the pattern is already stored, including
        when a concurrent transaction stored it first.
        """
        insert = sqlite.insert if db.get_bind().dialect.name == "sqlite" else postgresql.insert
        await db.execute(
            insert(PagePattern)
            .values(id=uuid_pkg.uuid4(), pattern=pattern)
            .on_conflict_do_nothing(index_elements=["pattern"])
        )
        result = await db.execute(
            select(PagePattern.id).where(PagePattern.pattern == pattern)  # type: ignore[arg-type]
        )
        return result.scalar_one()

    async def _link_page_patterns(
        self,
        db: AsyncSession,
        announcement_id: uuid_pkg.UUID,
        patterns: Sequence[str],
    ) -> None:
        # dict.fromkeys drops repeats but keeps the requested order
        for position, pattern in enumerate(dict.fromkeys(patterns)):
            page_pattern_id = await self._get_or_create_pattern(db, pattern)
            db.add(
                AnnouncementPagePattern(
                    announcement_id=announcement_id,
                    page_pattern_id=page_pattern_id,
                    position=position,
                )
            )
        await db.flush()

    async def _load_record_sets(
        self,
        db: AsyncSession,
        announcements: list[Announcement],
    ) -> list[RecordSet]:
        """Fetch every child collection with one query each, grouped by foreign key."""
        if not announcements:
            return []
        ids = [a.id for a in announcements]

        texts_result = await db.execute(
            select(AnnouncementText)
            .where(AnnouncementText.announcement_id.in_(ids))  # type: ignore[attr-defined]
            .order_by(AnnouncementText.position)
        )
        texts = list(texts_result.scalars().all())

        ctas_by_text: dict[uuid_pkg.UUID, list[CallToAction]] = defaultdict(list)
        if texts:
            ctas_result = await db.execute(
                select(CallToAction)
                .where(
                    CallToAction.announcement_text_id.in_([t.id for t in texts])  # type: ignore[attr-defined]
                )
                .order_by(CallToAction.position)
            )
            for cta in ctas_result.scalars().all():
                ctas_by_text[cta.announcement_text_id].append(cta)

        backgrounds_result = await db.execute(
            select(BannerBackground).where(
                BannerBackground.announcement_id.in_(ids)  # type: ignore[attr-defined]
            )
        )
        background_by_announcement = {
            bg.announcement_id: bg for bg in backgrounds_result.scalars().all()
        }

        form_result = await db.execute(
            select(BannerFormField)
            .where(BannerFormField.announcement_id.in_(ids))  # type: ignore[attr-defined]
            .order_by(BannerFormField.position)
        )
        form_by_announcement: dict[uuid_pkg.UUID, list[BannerFormField]] = defaultdict(list)
        for form_field in form_result.scalars().all():
            form_by_announcement[form_field.announcement_id].append(form_field)

        patterns_result = await db.execute(
            select(AnnouncementPagePattern.announcement_id, PagePattern.pattern)
            .join(PagePattern, PagePattern.id == AnnouncementPagePattern.page_pattern_id)  # type: ignore[arg-type]
            .where(AnnouncementPagePattern.announcement_id.in_(ids))  # type: ignore[attr-defined]
            .order_by(AnnouncementPagePattern.position)
        )
        patterns_by_announcement: dict[uuid_pkg.UUID, list[str]] = defaultdict(list)
        for announcement_id, pattern in patterns_result.all():
            patterns_by_announcement[announcement_id].append(pattern)

        texts_by_announcement: dict[uuid_pkg.UUID, list[TextRecord]] = defaultdict(list)
        for text in texts:
            texts_by_announcement[text.announcement_id].append(
                TextRecord(text=text, call_to_actions=ctas_by_text.get(text.id, []))
            )

        return [
            RecordSet(
                announcement=announcement,
                texts=texts_by_announcement.get(announcement.id, []),
                background=background_by_announcement.get(announcement.id),
                form=form_by_announcement.get(announcement.id, []),
                page_patterns=patterns_by_announcement.get(announcement.id, []),
            )
            for announcement in announcements
        ]

    async def _fail(
        self,
        db: AsyncSession,
        operation: str,
        announcement_id: uuid_pkg.UUID | None,
        error: SQLAlchemyError,
    ) -> None:
        """Roll back the unit of work and raise a TransactionFailure."""
        await db.rollback()
        logger.error(f"Announcement {operation} failed for {announcement_id}: {error}")
        raise TransactionFailure(operation, announcement_id, reason=type(error).__name__) from error


announcement_ops = AnnouncementOperations()
