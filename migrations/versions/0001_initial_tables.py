"""initial_tables

Users, aid requests, and the event outbox (events + deliveries).

Revision ID: 0001_initial_tables
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial_tables"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # USERS TABLE
    op.create_table(
        "users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", sa.String(32), nullable=False),
        sa.Column("department", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "reset_requested", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    # AID REQUESTS TABLE
    op.create_table(
        "aid_requests",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("requester_name", sa.String(255), nullable=False),
        sa.Column("job_role", sa.String(255), nullable=False),
        sa.Column("event_name", sa.String(512), nullable=False),
        sa.Column("event_location", sa.String(512), nullable=True),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("modality", sa.String(8), nullable=False),
        sa.Column("registration_fee", sa.Numeric(12, 2), nullable=False),
        sa.Column("event_params_text", sa.Text(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column(
            "scientific_approved", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        sa.Column(
            "admin_approved", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("documents", sa.JSON(), nullable=False),
        sa.Column("ethics_committee_proof", sa.JSON(), nullable=True),
        sa.Column("accountability_documents", sa.JSON(), nullable=False),
        sa.Column("submission_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
    )
    op.create_index("idx_aid_requests_owner", "aid_requests", ["owner_id"])
    op.create_index("idx_aid_requests_status", "aid_requests", ["status"])
    op.create_index(
        "idx_aid_requests_submission", "aid_requests", [sa.text("submission_date DESC")]
    )

    # EVENTS TABLE (append-only event log)
    op.create_table(
        "events",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("event_type", sa.String(128), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_events_type_created", "events", ["event_type", sa.text("created_at DESC")]
    )

    # DELIVERIES TABLE (per-consumer-group tracking)
    op.create_table(
        "deliveries",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("event_id", sa.String(), nullable=False),
        sa.Column("consumer_group", sa.String(128), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("delivered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("delivery_error", sa.Text(), nullable=True),
        sa.Column("retry_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"]),
        sa.UniqueConstraint("event_id", "consumer_group", name="uq_delivery_event_consumer"),
    )
    op.create_index(
        "idx_deliveries_claim", "deliveries", ["consumer_group", "status", "event_id"]
    )
    op.create_index("idx_deliveries_stale", "deliveries", ["claimed_at"])


def downgrade() -> None:
    op.drop_index("idx_deliveries_stale", table_name="deliveries")
    op.drop_index("idx_deliveries_claim", table_name="deliveries")
    op.drop_table("deliveries")
    op.drop_index("idx_events_type_created", table_name="events")
    op.drop_table("events")
    op.drop_index("idx_aid_requests_submission", table_name="aid_requests")
    op.drop_index("idx_aid_requests_status", table_name="aid_requests")
    op.drop_index("idx_aid_requests_owner", table_name="aid_requests")
    op.drop_table("aid_requests")
    op.drop_table("users")
