"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL)."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", String, primary_key=True),
    Column("email", String, nullable=False, unique=True),
    Column("name", String, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
)


# ============================================================================
# ORGANIZATIONS TABLE
# ============================================================================
organizations_table = Table(
    "organizations",
    metadata,
    Column("id", String, primary_key=True),
    Column("slug", String, nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)


# ============================================================================
# EVENTS TABLE
# ============================================================================
events_table = Table(
    "events",
    metadata,
    Column("id", String, primary_key=True),
    Column("slug", String, nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column(
        "organization_id",
        String,
        ForeignKey("organizations.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("contact_email", Text, nullable=True),  # Encrypted at rest
    Column("created_at", DateTime(timezone=True), nullable=False),
)

Index("idx_events_organization_id", events_table.c.organization_id)


# ============================================================================
# ROLES TABLE (catalog)
# ============================================================================
roles_table = Table(
    "roles",
    metadata,
    Column("id", String, primary_key=True),
    Column("name", String(64), nullable=False, unique=True),
    Column("scope", String(32), nullable=False),  # RoleScope as string
    Column("level", Integer, nullable=False),
    Column("description", Text, nullable=False, server_default=""),
)


# ============================================================================
# USER ROLES TABLE (assignments)
# ============================================================================
user_roles_table = Table(
    "user_roles",
    metadata,
    Column("id", String, primary_key=True),
    Column("user_id", String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("role_id", String, ForeignKey("roles.id"), nullable=False),
    Column("scope_type", String(32), nullable=False),
    Column("scope_id", String, nullable=False),  # "SYSTEM" for system scope
    Column("granted_by", String, ForeignKey("users.id"), nullable=True),
    Column("granted_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint(
        "user_id", "role_id", "scope_type", "scope_id", name="uq_user_roles_grant"
    ),
)

Index("idx_user_roles_user_id", user_roles_table.c.user_id)
Index("idx_user_roles_scope", user_roles_table.c.scope_type, user_roles_table.c.scope_id)


# ============================================================================
# SYSTEM SETTINGS TABLE
# ============================================================================
system_settings_table = Table(
    "system_settings",
    metadata,
    Column("key", String(64), primary_key=True),
    Column("value", Text, nullable=False),  # JSON document
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


# ============================================================================
# INCIDENTS TABLE
# ============================================================================
incidents_table = Table(
    "incidents",
    metadata,
    Column("id", String, primary_key=True),
    Column("event_id", String, ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
    # Encrypted at rest
    Column("description", Text, nullable=False),
    Column("parties", Text, nullable=True),
    Column("location", Text, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

Index("idx_incidents_event_id", incidents_table.c.event_id)


# ============================================================================
# INCIDENT COMMENTS TABLE
# ============================================================================
incident_comments_table = Table(
    "incident_comments",
    metadata,
    Column("id", String, primary_key=True),
    Column(
        "incident_id",
        String,
        ForeignKey("incidents.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("body", Text, nullable=False),  # Encrypted at rest
    Column("created_at", DateTime(timezone=True), nullable=False),
)

Index("idx_incident_comments_incident_id", incident_comments_table.c.incident_id)
