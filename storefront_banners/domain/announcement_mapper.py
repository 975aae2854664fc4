"""Mapping between the nested announcement shape and its relational rows.

decompose() fans an AnnouncementCreate out into unsaved table rows with
their foreign keys already wired (ids are generated client-side), and
recompose() rebuilds the nested AnnouncementRead from rows fetched by the
store. from_config()/to_config() translate between the editor payload and
the stored shape.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from sqlmodel import SQLModel

from storefront_banners.domain.config_validator import parse_number
from storefront_banners.domain.time_utils import combine_date_time, ensure_utc, minutes_to_time
from storefront_banners.models.announcement import (
    Announcement,
    AnnouncementCreate,
    AnnouncementRead,
    AnnouncementSize,
    AnnouncementText,
    AnnouncementTextData,
    AnnouncementType,
    BannerBackground,
    BannerBackgroundData,
    BannerFormField,
    BannerFormFieldData,
    CallToAction,
    CallToActionData,
    CloseButtonPosition,
    EndType,
    StartType,
)
from storefront_banners.schemas.announcement_config import AnnouncementConfig

# Keys of the nested shape that live in child tables, not on the header row
SECTION_FIELDS = frozenset({"texts", "background", "form", "page_patterns"})

_DATETIME_FIELDS = ("start_date", "end_date", "countdown_end_time", "created_at", "updated_at")


@dataclass
class TextRecord:
    """A text row together with the CTA rows that belong to it."""

    text: AnnouncementText
    call_to_actions: list[CallToAction] = field(default_factory=list)


@dataclass
class RecordSet:
    """All rows that make up one announcement."""

    announcement: Announcement
    texts: list[TextRecord] = field(default_factory=list)
    background: BannerBackground | None = None
    form: list[BannerFormField] = field(default_factory=list)
    page_patterns: list[str] = field(default_factory=list)


def _row_fields(row: SQLModel, schema: type[SQLModel]) -> dict[str, Any]:
    """Copy the attributes of a row that the schema declares."""
    return {name: getattr(row, name) for name in schema.model_fields if hasattr(row, name)}


# ─────────────────────────────────────────────────────────────────────────────
# Decompose (write side)
# ─────────────────────────────────────────────────────────────────────────────


def header_fields(data: AnnouncementCreate) -> dict[str, Any]:
    """Header-row values of a create payload, without the nested sections."""
    return data.model_dump(exclude=set(SECTION_FIELDS))


def build_text_records(
    announcement_id: Any,
    texts: list[AnnouncementTextData],
) -> list[TextRecord]:
    records = []
    for position, text in enumerate(texts):
        text_row = AnnouncementText(
            announcement_id=announcement_id,
            position=position,
            **text.model_dump(exclude={"call_to_actions"}),
        )
        ctas = [
            CallToAction(announcement_text_id=text_row.id, position=cta_position, **cta.model_dump())
            for cta_position, cta in enumerate(text.call_to_actions)
        ]
        records.append(TextRecord(text=text_row, call_to_actions=ctas))
    return records


def build_background(
    announcement_id: Any,
    background: BannerBackgroundData | None,
) -> BannerBackground | None:
    if background is None:
        return None
    return BannerBackground(announcement_id=announcement_id, **background.model_dump())


def build_form_fields(
    announcement_id: Any,
    form: list[BannerFormFieldData],
) -> list[BannerFormField]:
    return [
        BannerFormField(announcement_id=announcement_id, position=position, **item.model_dump())
        for position, item in enumerate(form)
    ]


def decompose(data: AnnouncementCreate) -> RecordSet:
    """Split a create payload into its header row and child rows."""
    announcement = Announcement(**header_fields(data))
    return RecordSet(
        announcement=announcement,
        texts=build_text_records(announcement.id, data.texts),
        background=build_background(announcement.id, data.background),
        form=build_form_fields(announcement.id, data.form),
        page_patterns=list(data.page_patterns),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Recompose (read side)
# ─────────────────────────────────────────────────────────────────────────────


def recompose(record_set: RecordSet) -> AnnouncementRead:
    """Rebuild the nested announcement from its rows.

    Empty child collections come back as empty lists, never missing keys.
    """
    header = _row_fields(record_set.announcement, AnnouncementRead)
    for name in _DATETIME_FIELDS:
        if header.get(name) is not None:
            header[name] = ensure_utc(header[name])

    texts = []
    for record in sorted(record_set.texts, key=lambda r: r.text.position):
        ctas = sorted(record.call_to_actions, key=lambda c: c.position)
        texts.append(
            AnnouncementTextData(
                **_row_fields(record.text, AnnouncementTextData),
                call_to_actions=[_row_fields(cta, CallToActionData) for cta in ctas],
            )
        )

    background = None
    if record_set.background is not None:
        background = BannerBackgroundData(
            **_row_fields(record_set.background, BannerBackgroundData)
        )

    form = [
        BannerFormFieldData(**_row_fields(row, BannerFormFieldData))
        for row in sorted(record_set.form, key=lambda f: f.position)
    ]

    return AnnouncementRead(
        **header,
        texts=texts,
        background=background,
        form=form,
        page_patterns=list(record_set.page_patterns),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Editor payload <-> stored shape
# ─────────────────────────────────────────────────────────────────────────────


def _blank_to_none(value: str | None) -> str | None:
    return value if value else None


def from_config(
    config: AnnouncementConfig,
    shop_id: str,
    type: AnnouncementType = AnnouncementType.BASIC,
    now: datetime | None = None,
    form: list[BannerFormFieldData] | None = None,
) -> AnnouncementCreate:
    """Translate a validated editor payload into the stored announcement shape.

    A "now" start is pinned to the current instant; an "until_stop" end is
    stored as NULL (open-ended).
    """
    now = now or datetime.now(UTC)
    basic, text, cta, background, other = (
        config.basic,
        config.text,
        config.cta,
        config.background,
        config.other,
    )

    height_px = width_percent = None
    if basic.size == "custom":
        height = parse_number(basic.size_height)
        height_px = max(1, round(height)) if height is not None else None
        width_percent = parse_number(basic.size_width)

    start_date = now
    if basic.start_type == "specific" and basic.start_date and basic.start_time:
        start_date = combine_date_time(basic.start_date, basic.start_time)
    end_date = None
    if basic.end_type == "specific" and basic.end_date and basic.end_time:
        end_date = combine_date_time(basic.end_date, basic.end_time)

    call_to_action = CallToActionData(
        cta_type=cta.cta_type,
        text=_blank_to_none(cta.cta_text),
        link=_blank_to_none(cta.cta_link),
        button_font_color=_blank_to_none(cta.button_font_color),
        button_background_color=_blank_to_none(cta.button_background_color),
        font_type=cta.font_type,
        padding_top=cta.padding.top,
        padding_right=cta.padding.right,
        padding_bottom=cta.padding.bottom,
        padding_left=cta.padding.left,
    )

    return AnnouncementCreate(
        shop_id=shop_id,
        type=type,
        title=basic.campaign_title.strip(),
        size=basic.size,
        height_px=height_px,
        width_percent=width_percent,
        start_type=basic.start_type,
        end_type=basic.end_type,
        start_date=start_date,
        end_date=end_date,
        close_button_position=other.close_button_position,
        display_before_delay=_blank_to_none(other.display_before_delay),
        show_after_closing=_blank_to_none(other.show_after_closing),
        show_after_cta=_blank_to_none(other.show_after_cta),
        campaign_timing=_blank_to_none(other.campaign_timing),
        texts=[
            AnnouncementTextData(
                text_message=text.announcement_text,
                text_color=text.text_color,
                font_size=text.font_size,
                font_type=text.font_type,
                call_to_actions=[call_to_action],
            )
        ],
        background=BannerBackgroundData(
            background_type=background.background_type,
            color1=background.color1,
            color2=_blank_to_none(background.color2),
            color3=_blank_to_none(background.color3),
            pattern=_blank_to_none(background.pattern),
            padding_right=background.padding_right,
        ),
        form=form or [],
        page_patterns=other.selected_pages,
    )


def _clock(dt: datetime) -> str:
    return minutes_to_time(dt.hour * 60 + dt.minute)


def _format_dimension(value: float | None) -> str:
    return "" if value is None else f"{value:g}"


def to_config(announcement: AnnouncementRead) -> dict[str, Any]:
    """Rebuild the editor payload (camelCase) from a stored announcement.

    Only the first text block and its first CTA are editable in the form.
    """
    start = ensure_utc(announcement.start_date)
    end = ensure_utc(announcement.end_date) if announcement.end_date else None
    start_specific = announcement.start_type == "specific"
    end_specific = announcement.end_type == "specific" and end is not None

    first_text = announcement.texts[0] if announcement.texts else None
    first_cta = (
        first_text.call_to_actions[0]
        if first_text and first_text.call_to_actions
        else CallToActionData()
    )
    background = announcement.background

    position = announcement.close_button_position
    if position == CloseButtonPosition.CENTER:
        position = CloseButtonPosition.RIGHT

    cta: dict[str, Any] = {
        "ctaType": first_cta.cta_type,
        "padding": {
            "top": first_cta.padding_top,
            "right": first_cta.padding_right,
            "bottom": first_cta.padding_bottom,
            "left": first_cta.padding_left,
        },
        "fontType": first_cta.font_type,
    }
    for key, value in (
        ("ctaText", first_cta.text),
        ("ctaLink", first_cta.link),
        ("buttonFontColor", first_cta.button_font_color),
        ("buttonBackgroundColor", first_cta.button_background_color),
    ):
        if value is not None:
            cta[key] = value

    return {
        "basic": {
            "size": AnnouncementSize(announcement.size).value,
            "sizeHeight": "" if announcement.height_px is None else str(announcement.height_px),
            "sizeWidth": _format_dimension(announcement.width_percent),
            "campaignTitle": announcement.title,
            "startType": StartType(announcement.start_type).value,
            "endType": EndType.SPECIFIC.value if end_specific else EndType.UNTIL_STOP.value,
            "startDate": start.date().isoformat() if start_specific else None,
            "startTime": _clock(start) if start_specific else None,
            "endDate": end.date().isoformat() if end_specific else None,
            "endTime": _clock(end) if end_specific else None,
        },
        "text": {
            "announcementText": first_text.text_message if first_text else "",
            "textColor": first_text.text_color if first_text else "",
            "fontSize": first_text.font_size if first_text else 16,
            "fontType": first_text.font_type if first_text else "site",
        },
        "cta": cta,
        "background": {
            "backgroundType": background.background_type if background else "solid",
            "color1": background.color1 if background else "",
            "color2": (background.color2 or "") if background else "",
            "color3": (background.color3 or "") if background else "",
            "pattern": (background.pattern or "") if background else "",
            "paddingRight": background.padding_right if background else 0,
        },
        "other": {
            "closeButtonPosition": CloseButtonPosition(position).value,
            "displayBeforeDelay": announcement.display_before_delay or "",
            "showAfterClosing": announcement.show_after_closing or "",
            "showAfterCTA": announcement.show_after_cta or "",
            "selectedPages": list(announcement.page_patterns),
            "campaignTiming": announcement.campaign_timing or "",
        },
    }
