"""communities, listing shapes and browse tables

Revision ID: 3c1d5e7f9a20
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "3c1d5e7f9a20"
down_revision = None
branch_labels = None
depends_on = None


def _table_exists(bind, table_name: str) -> bool:
    try:
        return sa.inspect(bind).has_table(table_name)
    except Exception:
        return False


def upgrade():
    bind = op.get_bind()

    if not _table_exists(bind, "communities"):
        op.create_table(
            "communities",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(120), nullable=False),
            sa.Column("default_locale", sa.String(16), nullable=False, server_default="en"),
            sa.Column("locales_json", sa.Text(), nullable=False, server_default='["en"]'),
            sa.Column("default_browse_view", sa.String(16), nullable=True),
            sa.Column("default_currency", sa.String(8), nullable=False, server_default="EUR"),
            sa.Column("show_price_filter", sa.Boolean(), nullable=False, server_default=sa.text("false")),
            sa.Column("price_filter_min", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("price_filter_max", sa.Integer(), nullable=False, server_default="100000"),
            sa.Column("feature_flags_json", sa.Text(), nullable=False, server_default="{}"),
            sa.Column("created_at", sa.DateTime(), nullable=False),
        )

    if not _table_exists(bind, "users"):
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(120), nullable=False),
            sa.Column("email", sa.String(255), nullable=False),
            sa.Column("password_hash", sa.String(255), nullable=False),
            sa.Column("community_id", sa.Integer(), sa.ForeignKey("communities.id"), nullable=True),
            sa.Column("role", sa.String(32), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
        )
        op.create_index("ix_users_email", "users", ["email"], unique=True)
        op.create_index("ix_users_community_id", "users", ["community_id"])

    if not _table_exists(bind, "transaction_processes"):
        op.create_table(
            "transaction_processes",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("community_id", sa.Integer(), sa.ForeignKey("communities.id"), nullable=False),
            sa.Column("process", sa.String(24), nullable=False, server_default="none"),
            sa.Column("author_is_seller", sa.Boolean(), nullable=False, server_default=sa.text("true")),
            sa.Column("created_at", sa.DateTime(), nullable=False),
        )
        op.create_index("ix_transaction_processes_community_id", "transaction_processes", ["community_id"])

    if not _table_exists(bind, "payment_gateways"):
        op.create_table(
            "payment_gateways",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("community_id", sa.Integer(), sa.ForeignKey("communities.id"), nullable=False),
            sa.Column("type", sa.String(32), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
        )
        op.create_index("ix_payment_gateways_community_id", "payment_gateways", ["community_id"])

    if not _table_exists(bind, "categories"):
        op.create_table(
            "categories",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("community_id", sa.Integer(), sa.ForeignKey("communities.id"), nullable=False),
            sa.Column("parent_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=True),
            sa.Column("url", sa.String(140), nullable=False),
            sa.Column("name_json", sa.Text(), nullable=False, server_default="{}"),
            sa.Column("sort_priority", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("created_at", sa.DateTime(), nullable=False),
        )
        op.create_index("ix_categories_community_id", "categories", ["community_id"])
        op.create_index("ix_categories_parent_id", "categories", ["parent_id"])
        op.create_index("ix_categories_url", "categories", ["url"])

    if not _table_exists(bind, "listing_shapes"):
        op.create_table(
            "listing_shapes",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("community_id", sa.Integer(), sa.ForeignKey("communities.id"), nullable=False),
            sa.Column("transaction_process_id", sa.Integer(), sa.ForeignKey("transaction_processes.id"), nullable=True),
            sa.Column("name_tr_key", sa.String(64), nullable=False),
            sa.Column("name_json", sa.Text(), nullable=False, server_default="{}"),
            sa.Column("sort_priority", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("shipping_enabled", sa.Boolean(), nullable=False, server_default=sa.text("false")),
            sa.Column("online_payments", sa.Boolean(), nullable=False, server_default=sa.text("false")),
            sa.Column("price_enabled", sa.Boolean(), nullable=False, server_default=sa.text("false")),
            sa.Column("units_json", sa.Text(), nullable=False, server_default="[]"),
            sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.text("false")),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
        )
        op.create_index("ix_listing_shapes_community_id", "listing_shapes", ["community_id"])
        op.create_index("ix_listing_shapes_sort_priority", "listing_shapes", ["sort_priority"])
        op.create_index("ix_listing_shapes_deleted", "listing_shapes", ["deleted"])

    if not _table_exists(bind, "listing_shape_categories"):
        op.create_table(
            "listing_shape_categories",
            sa.Column("listing_shape_id", sa.Integer(), sa.ForeignKey("listing_shapes.id"), primary_key=True),
            sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), primary_key=True),
        )

    if not _table_exists(bind, "listings"):
        op.create_table(
            "listings",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("community_id", sa.Integer(), sa.ForeignKey("communities.id"), nullable=False),
            sa.Column("author_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
            sa.Column("title", sa.String(120), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=True),
            sa.Column("listing_shape_id", sa.Integer(), sa.ForeignKey("listing_shapes.id"), nullable=True),
            sa.Column("price_cents", sa.Integer(), nullable=True),
            sa.Column("currency", sa.String(8), nullable=True),
            sa.Column("unit_type", sa.String(16), nullable=True),
            sa.Column("open", sa.Boolean(), nullable=False, server_default=sa.text("true")),
            sa.Column("valid_until", sa.DateTime(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
        )
        op.create_index("ix_listings_community_id", "listings", ["community_id"])
        op.create_index("ix_listings_author_id", "listings", ["author_id"])
        op.create_index("ix_listings_category_id", "listings", ["category_id"])
        op.create_index("ix_listings_listing_shape_id", "listings", ["listing_shape_id"])
        op.create_index("ix_listings_open", "listings", ["open"])

    if not _table_exists(bind, "platform_events"):
        op.create_table(
            "platform_events",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("event_type", sa.String(80), nullable=False),
            sa.Column("community_id", sa.Integer(), nullable=True),
            sa.Column("actor_user_id", sa.Integer(), nullable=True),
            sa.Column("subject_type", sa.String(80), nullable=True),
            sa.Column("subject_id", sa.String(120), nullable=True),
            sa.Column("request_id", sa.String(80), nullable=True),
            sa.Column("metadata_json", sa.Text(), nullable=True),
        )
        op.create_index("ix_platform_events_created_at", "platform_events", ["created_at"])
        op.create_index("ix_platform_events_event_type", "platform_events", ["event_type"])
        op.create_index("ix_platform_events_community_id", "platform_events", ["community_id"])
        op.create_index("ix_platform_events_actor_user_id", "platform_events", ["actor_user_id"])
        op.create_index("ix_platform_events_subject_id", "platform_events", ["subject_id"])


def downgrade():
    for table_name in (
        "platform_events",
        "listings",
        "listing_shape_categories",
        "listing_shapes",
        "categories",
        "payment_gateways",
        "transaction_processes",
        "users",
        "communities",
    ):
        op.drop_table(table_name)
