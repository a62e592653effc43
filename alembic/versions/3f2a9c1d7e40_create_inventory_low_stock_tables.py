"""create inventory and low-stock alert tables

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2026-10-18 09:12:40.118204

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7e40"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    # Enum values match Python enum string values
    profilerole_enum = sa.Enum(
        "owner",
        "office_admin",
        "mechanic",
        "operations_manager",
        "team_lead",
        "employee",
        name="profilerole",
    )
    runsource_enum = sa.Enum("cron", "manual", name="runsource")

    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("role", profilerole_enum, server_default="employee", nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f("ix_profiles_id"), "profiles", ["id"], unique=False)
    op.create_index(op.f("ix_profiles_email"), "profiles", ["email"], unique=True)

    op.create_table(
        "inventory_locations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
        sa.Column("location_type", sa.String(length=50), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f("ix_inventory_locations_id"), "inventory_locations", ["id"])
    op.create_index(
        op.f("ix_inventory_locations_location_type"), "inventory_locations", ["location_type"]
    )

    op.create_table(
        "inventory_items",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("external_id", sa.String(length=100), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("quantity", sa.Integer(), server_default="0", nullable=False),
        sa.Column("minimum_quantity", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "location_id",
            sa.Integer(),
            sa.ForeignKey("inventory_locations.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("supplier", sa.String(length=255), nullable=True),
        sa.Column("supplier_link", sa.String(length=500), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f("ix_inventory_items_name"), "inventory_items", ["name"])
    op.create_index(op.f("ix_inventory_items_category"), "inventory_items", ["category"])
    op.create_index(op.f("ix_inventory_items_location_id"), "inventory_items", ["location_id"])
    op.create_index(op.f("ix_inventory_items_is_active"), "inventory_items", ["is_active"])

    op.create_table(
        "inventory_alert_recipients",
        sa.Column(
            "profile_id",
            sa.Integer(),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("is_enabled", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "inventory_low_stock_state",
        sa.Column(
            "item_id",
            sa.String(length=64),
            sa.ForeignKey("inventory_items.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("is_low", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("first_low_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_threshold_email_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "threshold_send_failed", sa.Boolean(), server_default=sa.false(), nullable=False
        ),
        sa.Column("last_daily_digest_local_date", sa.Date(), nullable=True),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.CheckConstraint(
            "(is_low AND first_low_at IS NOT NULL) OR (NOT is_low AND first_low_at IS NULL)",
            name="ck_low_stock_state_first_low_at",
        ),
    )
    op.create_index(
        op.f("ix_inventory_low_stock_state_is_low"), "inventory_low_stock_state", ["is_low"]
    )

    op.create_table(
        "low_stock_run_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("run_source", runsource_enum, nullable=False),
        sa.Column(
            "initiated_by",
            sa.Integer(),
            sa.ForeignKey("profiles.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "ran_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column("success", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("skipped", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("local_date", sa.Date(), nullable=True),
        sa.Column("recipients_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("low_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("newly_low_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("sent_threshold", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("sent_daily", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("error_message", sa.String(), nullable=True),
    )
    op.create_index(op.f("ix_low_stock_run_logs_id"), "low_stock_run_logs", ["id"])
    op.create_index(op.f("ix_low_stock_run_logs_ran_at"), "low_stock_run_logs", ["ran_at"])


def downgrade() -> None:
    op.drop_table("low_stock_run_logs")
    op.drop_table("inventory_low_stock_state")
    op.drop_table("inventory_alert_recipients")
    op.drop_table("inventory_items")
    op.drop_table("inventory_locations")
    op.drop_table("profiles")
    sa.Enum(name="runsource").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="profilerole").drop(op.get_bind(), checkfirst=True)
