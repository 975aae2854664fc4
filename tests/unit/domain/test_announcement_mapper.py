"""Unit tests for the nested-shape <-> relational-rows mapping."""

from datetime import UTC, date, datetime

from storefront_banners.domain.announcement_mapper import decompose, from_config, recompose, to_config
from storefront_banners.domain.config_validator import validate_announcement_config
from storefront_banners.models import (
    GLOBAL_PAGE_PATTERN,
    AnnouncementCreate,
    AnnouncementTextData,
)

from tests.helpers.factories import make_announcement_create, make_config

SHOP = "__test-shop.myshopify.com"
NOW = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


def _round_trip(data: AnnouncementCreate):
    return recompose(decompose(data))


class TestDecompose:
    def test_child_rows_reference_their_parents(self):
        record_set = decompose(make_announcement_create(SHOP))
        announcement_id = record_set.announcement.id

        assert all(r.text.announcement_id == announcement_id for r in record_set.texts)
        first = record_set.texts[0]
        assert first.call_to_actions[0].announcement_text_id == first.text.id
        assert record_set.background.announcement_id == announcement_id
        assert record_set.form[0].announcement_id == announcement_id

    def test_positions_follow_input_order(self):
        record_set = decompose(make_announcement_create(SHOP))
        assert [r.text.position for r in record_set.texts] == [0, 1]

    def test_header_row_has_no_nested_collections(self):
        record_set = decompose(make_announcement_create(SHOP))
        assert not hasattr(record_set.announcement, "texts")
        assert record_set.page_patterns == ["^/products"]


class TestRoundTrip:
    def test_recompose_reproduces_nested_structure(self):
        data = make_announcement_create(SHOP)

        result = _round_trip(data)

        assert result.title == data.title
        assert result.shop_id == SHOP
        assert [t.text_message for t in result.texts] == ["Hello shoppers", "Second message"]
        assert result.texts[0].call_to_actions[0].link == "https://example.com"
        assert result.texts[1].call_to_actions == []
        assert result.background == data.background
        assert result.form == data.form
        assert result.page_patterns == ["^/products"]

    def test_empty_collections_come_back_as_lists(self):
        data = make_announcement_create(SHOP, texts=[], background=None, form=[])

        dumped = _round_trip(data).model_dump()

        assert dumped["texts"] == []
        assert dumped["form"] == []
        assert dumped["background"] is None
        assert dumped["page_patterns"] == ["^/products"]

    def test_empty_page_patterns_become_global(self):
        data = make_announcement_create(SHOP, page_patterns=[])
        assert _round_trip(data).page_patterns == [GLOBAL_PAGE_PATTERN]

    def test_recompose_orders_by_position(self):
        record_set = decompose(
            make_announcement_create(
                SHOP,
                texts=[
                    AnnouncementTextData(text_message="first", text_color="#fff"),
                    AnnouncementTextData(text_message="second", text_color="#fff"),
                ],
            )
        )
        record_set.texts.reverse()

        assert [t.text_message for t in recompose(record_set).texts] == ["first", "second"]

    def test_naive_timestamps_are_returned_as_utc(self):
        record_set = decompose(make_announcement_create(SHOP))
        record_set.announcement.start_date = datetime(2026, 1, 1, 8, 0)

        assert recompose(record_set).start_date.tzinfo == UTC


class TestFromConfig:
    def _config(self, **sections):
        result = validate_announcement_config(make_config(**sections))
        assert result.is_valid, result.errors
        return result.config

    def test_now_until_stop_is_pinned_and_open_ended(self):
        data = from_config(self._config(), SHOP, now=NOW)

        assert data.start_date == NOW
        assert data.end_date is None
        assert data.page_patterns == [GLOBAL_PAGE_PATTERN]

    def test_specific_schedule_becomes_timestamps(self):
        config = self._config(
            basic={
                "startType": "specific",
                "endType": "specific",
                "startDate": "2026-07-01",
                "startTime": "09:00",
                "endDate": "2026-07-04",
                "endTime": "18:30",
            }
        )

        data = from_config(config, SHOP, now=NOW)

        assert data.start_date == datetime(2026, 7, 1, 9, 0, tzinfo=UTC)
        assert data.end_date == datetime(2026, 7, 4, 18, 30, tzinfo=UTC)

    def test_custom_size_becomes_pixels_and_percent(self):
        config = self._config(basic={"size": "custom", "sizeHeight": "47.6", "sizeWidth": "80"})

        data = from_config(config, SHOP, now=NOW)

        assert data.height_px == 48
        assert data.width_percent == 80.0

    def test_cta_becomes_a_single_row_on_the_first_text(self):
        data = from_config(self._config(), SHOP, now=NOW)

        assert len(data.texts) == 1
        [cta] = data.texts[0].call_to_actions
        assert cta.cta_type == "regular"
        assert cta.padding_right == 8

    def test_blank_optional_strings_are_stored_as_null(self):
        data = from_config(self._config(), SHOP, now=NOW)

        assert data.background.color2 is None
        assert data.show_after_cta is None


class TestToConfig:
    def test_editor_state_survives_a_store_round_trip(self):
        raw = make_config(
            basic={
                "startType": "specific",
                "endType": "specific",
                "startDate": "2026-07-01",
                "startTime": "09:00",
                "endDate": "2026-07-04",
                "endTime": "18:30",
            },
            other={"selectedPages": ["^/collections"], "showAfterCTA": "1d"},
        )
        config = validate_announcement_config(raw).config
        stored = _round_trip(from_config(config, SHOP, now=NOW))

        editor = to_config(stored)

        assert editor["basic"]["startDate"] == date(2026, 7, 1).isoformat()
        assert editor["basic"]["endTime"] == "18:30"
        assert editor["text"]["announcementText"] == raw["text"]["announcementText"]
        assert editor["cta"]["ctaLink"] == "https://example.com/sale"
        assert editor["other"]["selectedPages"] == ["^/collections"]
        assert editor["other"]["showAfterCTA"] == "1d"
        assert validate_announcement_config(editor).is_valid

    def test_open_ended_announcement_has_no_end(self):
        config = validate_announcement_config(make_config()).config
        editor = to_config(_round_trip(from_config(config, SHOP, now=NOW)))

        assert editor["basic"]["endType"] == "until_stop"
        assert editor["basic"]["endDate"] is None
        assert editor["basic"]["startType"] == "now"
