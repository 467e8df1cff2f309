"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL)."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.types import JSON

metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", String, primary_key=True),  # UUID as string
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),  # stored lower-cased
    Column("role", String(32), nullable=False),  # Role name
    Column("department", String(255), nullable=True),
    Column("password_hash", String(255), nullable=False),
    Column("reset_requested", Boolean, nullable=False, server_default=text("false")),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=True),
)


# ============================================================================
# AID REQUESTS TABLE
# ============================================================================
aid_requests_table = Table(
    "aid_requests",
    metadata,
    Column("id", String, primary_key=True),
    Column("owner_id", String, ForeignKey("users.id"), nullable=False),
    Column("requester_name", String(255), nullable=False),
    Column("job_role", String(255), nullable=False),
    Column("event_name", String(512), nullable=False),
    Column("event_location", String(512), nullable=True),
    Column("event_date", Date, nullable=False),
    Column("modality", String(8), nullable=False),
    Column("registration_fee", Numeric(12, 2), nullable=False),
    Column("event_params_text", Text, nullable=True),
    Column("status", String(32), nullable=False),  # RequestStatus value
    Column("scientific_approved", Boolean, nullable=False, server_default=text("false")),
    Column("admin_approved", Boolean, nullable=False, server_default=text("false")),
    Column("rejection_reason", Text, nullable=True),
    Column("documents", JSON, nullable=False),
    Column("ethics_committee_proof", JSON, nullable=True),
    Column("accountability_documents", JSON, nullable=False),
    Column("submission_date", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    # Bumped on every write; saves only succeed against the version they read
    Column("version", Integer, nullable=False, server_default=text("1")),
)

Index("idx_aid_requests_owner", aid_requests_table.c.owner_id)
Index("idx_aid_requests_status", aid_requests_table.c.status)
Index("idx_aid_requests_submission", aid_requests_table.c.submission_date.desc())


# ============================================================================
# EVENTS TABLE (append-only event log)
# ============================================================================
events_table = Table(
    "events",
    metadata,
    Column("id", String, primary_key=True),
    Column("event_type", String(128), nullable=False),
    Column("payload", JSON, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

Index(
    "idx_events_type_created",
    events_table.c.event_type,
    events_table.c.created_at.desc(),
)


# ============================================================================
# DELIVERIES TABLE (per-consumer-group tracking)
# ============================================================================
deliveries_table = Table(
    "deliveries",
    metadata,
    Column("id", String, primary_key=True),
    Column("event_id", String, ForeignKey("events.id"), nullable=False),
    Column("consumer_group", String(128), nullable=False),
    Column("status", String(32), nullable=False, server_default=text("'pending'")),
    Column("claimed_at", DateTime(timezone=True), nullable=True),
    Column("delivered_at", DateTime(timezone=True), nullable=True),
    Column("delivery_error", Text, nullable=True),
    Column("retry_count", Integer, nullable=False, server_default=text("0")),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("event_id", "consumer_group", name="uq_delivery_event_consumer"),
)

Index(
    "idx_deliveries_claim",
    deliveries_table.c.consumer_group,
    deliveries_table.c.status,
    deliveries_table.c.event_id,
)
Index("idx_deliveries_stale", deliveries_table.c.claimed_at)
