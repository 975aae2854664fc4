"""Create announcement tables

Revision ID: 3b1e9a7c5d20
Revises:
Create Date: 2026-10-19 09:12:44.318207

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3b1e9a7c5d20"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # Header row, one per banner campaign
    op.create_table(
        "announcements",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("shop_id", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column(
            "type",
            sa.String(length=20),
            server_default=sa.text("'basic'"),
            nullable=False,
        ),
        sa.Column("title", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        # Size
        sa.Column(
            "size",
            sa.String(length=20),
            server_default=sa.text("'medium'"),
            nullable=False,
        ),
        sa.Column("height_px", sa.Integer(), nullable=True),
        sa.Column("width_percent", sa.Float(), nullable=True),
        # Schedule (NULL end_date = runs until stopped)
        sa.Column(
            "start_type",
            sa.String(length=20),
            server_default=sa.text("'now'"),
            nullable=False,
        ),
        sa.Column(
            "end_type",
            sa.String(length=20),
            server_default=sa.text("'until_stop'"),
            nullable=False,
        ),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("countdown_end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "timezone",
            sqlmodel.sql.sqltypes.AutoString(length=64),
            server_default=sa.text("'UTC'"),
            nullable=False,
        ),
        # Behavior
        sa.Column("show_close_button", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column(
            "close_button_position",
            sa.String(length=10),
            server_default=sa.text("'right'"),
            nullable=False,
        ),
        sa.Column("display_before_delay", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column("show_after_closing", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column("show_after_cta", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column("campaign_timing", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        # Timestamps
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_announcements_id"), "announcements", ["id"], unique=False)
    op.create_index(op.f("ix_announcements_shop_id"), "announcements", ["shop_id"], unique=False)
    op.create_index(
        op.f("ix_announcements_start_date"), "announcements", ["start_date"], unique=False
    )

    # Composite index for the storefront active-announcement query
    op.create_index(
        "idx_announcements_active",
        "announcements",
        ["shop_id", "is_active", "start_date", "end_date"],
        unique=False,
    )

    op.create_table(
        "announcement_texts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("announcement_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("text_message", sa.Text(), nullable=False),
        sa.Column("text_color", sqlmodel.sql.sqltypes.AutoString(length=32), nullable=False),
        sa.Column("font_size", sa.Float(), nullable=False),
        sa.Column("font_type", sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column("custom_font", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("language_code", sqlmodel.sql.sqltypes.AutoString(length=10), nullable=True),
        sa.ForeignKeyConstraint(["announcement_id"], ["announcements.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_announcement_texts_id"), "announcement_texts", ["id"], unique=False)
    op.create_index(
        op.f("ix_announcement_texts_announcement_id"),
        "announcement_texts",
        ["announcement_id"],
        unique=False,
    )

    op.create_table(
        "call_to_actions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("announcement_text_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column(
            "cta_type",
            sa.String(length=20),
            server_default=sa.text("'none'"),
            nullable=False,
        ),
        sa.Column("text", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("link", sqlmodel.sql.sqltypes.AutoString(length=2048), nullable=True),
        sa.Column("button_font_color", sqlmodel.sql.sqltypes.AutoString(length=32), nullable=True),
        sa.Column(
            "button_background_color", sqlmodel.sql.sqltypes.AutoString(length=32), nullable=True
        ),
        sa.Column("font_type", sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column("padding_top", sa.Integer(), nullable=False),
        sa.Column("padding_right", sa.Integer(), nullable=False),
        sa.Column("padding_bottom", sa.Integer(), nullable=False),
        sa.Column("padding_left", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["announcement_text_id"], ["announcement_texts.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_call_to_actions_id"), "call_to_actions", ["id"], unique=False)
    op.create_index(
        op.f("ix_call_to_actions_announcement_text_id"),
        "call_to_actions",
        ["announcement_text_id"],
        unique=False,
    )

    op.create_table(
        "banner_backgrounds",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("announcement_id", sa.Uuid(), nullable=False),
        sa.Column("background_type", sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column("color1", sqlmodel.sql.sqltypes.AutoString(length=32), nullable=False),
        sa.Column("color2", sqlmodel.sql.sqltypes.AutoString(length=32), nullable=True),
        sa.Column("color3", sqlmodel.sql.sqltypes.AutoString(length=32), nullable=True),
        sa.Column("pattern", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("padding_right", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["announcement_id"], ["announcements.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("announcement_id"),
    )
    op.create_index(op.f("ix_banner_backgrounds_id"), "banner_backgrounds", ["id"], unique=False)

    op.create_table(
        "banner_form_fields",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("announcement_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("input_type", sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column("placeholder", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("label", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("is_required", sa.Boolean(), nullable=False),
        sa.Column("validation_regex", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.ForeignKeyConstraint(["announcement_id"], ["announcements.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_banner_form_fields_id"), "banner_form_fields", ["id"], unique=False)
    op.create_index(
        op.f("ix_banner_form_fields_announcement_id"),
        "banner_form_fields",
        ["announcement_id"],
        unique=False,
    )

    # Shared dictionary of page-matching rules
    op.create_table(
        "page_patterns",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("pattern", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_page_patterns_id"), "page_patterns", ["id"], unique=False)
    op.create_index(op.f("ix_page_patterns_pattern"), "page_patterns", ["pattern"], unique=True)

    op.create_table(
        "announcement_page_patterns",
        sa.Column("announcement_id", sa.Uuid(), nullable=False),
        sa.Column("page_pattern_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["announcement_id"], ["announcements.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["page_pattern_id"], ["page_patterns.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("announcement_id", "page_pattern_id"),
    )
    op.create_index(
        op.f("ix_announcement_page_patterns_page_pattern_id"),
        "announcement_page_patterns",
        ["page_pattern_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        op.f("ix_announcement_page_patterns_page_pattern_id"),
        table_name="announcement_page_patterns",
    )
    op.drop_table("announcement_page_patterns")
    op.drop_index(op.f("ix_page_patterns_pattern"), table_name="page_patterns")
    op.drop_index(op.f("ix_page_patterns_id"), table_name="page_patterns")
    op.drop_table("page_patterns")
    op.drop_index(op.f("ix_banner_form_fields_announcement_id"), table_name="banner_form_fields")
    op.drop_index(op.f("ix_banner_form_fields_id"), table_name="banner_form_fields")
    op.drop_table("banner_form_fields")
    op.drop_index(op.f("ix_banner_backgrounds_id"), table_name="banner_backgrounds")
    op.drop_table("banner_backgrounds")
    op.drop_index(op.f("ix_call_to_actions_announcement_text_id"), table_name="call_to_actions")
    op.drop_index(op.f("ix_call_to_actions_id"), table_name="call_to_actions")
    op.drop_table("call_to_actions")
    op.drop_index(op.f("ix_announcement_texts_announcement_id"), table_name="announcement_texts")
    op.drop_index(op.f("ix_announcement_texts_id"), table_name="announcement_texts")
    op.drop_table("announcement_texts")
    op.drop_index("idx_announcements_active", table_name="announcements")
    op.drop_index(op.f("ix_announcements_start_date"), table_name="announcements")
    op.drop_index(op.f("ix_announcements_shop_id"), table_name="announcements")
    op.drop_index(op.f("ix_announcements_id"), table_name="announcements")
    op.drop_table("announcements")
