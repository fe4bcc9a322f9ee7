"""SQLAlchemy table metadata for the catalog."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
)

from lineage_sync.domain.model import ProcessStatus

GUID_LENGTH = 36


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def utcnow() -> datetime:
    return datetime.now(UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

# Elements ---------------------------------------------------------------------

asset_table = Table(
    "asset",
    metadata,
    Column("guid", String(GUID_LENGTH), primary_key=True),
    Column("qualified_name", String, nullable=False, index=True),
    Column("display_name", String, nullable=True),
    Column("type_name", String, nullable=False),
    Column("created_at", UTCDateTime(), nullable=False, default=utcnow),
    Column("updated_at", UTCDateTime(), nullable=False, default=utcnow, onupdate=utcnow),
)

process_table = Table(
    "process",
    metadata,
    Column("guid", String(GUID_LENGTH), primary_key=True),
    Column("qualified_name", String, nullable=False, index=True),
    Column("display_name", String, nullable=True),
    Column("description", Text, nullable=True),
    Column(
        "status",
        Enum(
            ProcessStatus,
            native_enum=False,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
    ),
    Column("created_at", UTCDateTime(), nullable=False, default=utcnow),
    Column("updated_at", UTCDateTime(), nullable=False, default=utcnow, onupdate=utcnow),
)

# Schemas ----------------------------------------------------------------------

schema_type_table = Table(
    "schema_type",
    metadata,
    Column("guid", String(GUID_LENGTH), primary_key=True),
    Column("qualified_name", String, nullable=False),
    Column("display_name", String, nullable=True),
    Column("type_name", String, nullable=False),
    Column(
        "owner_guid",
        String(GUID_LENGTH),
        ForeignKey("asset.guid", ondelete="CASCADE"),
        nullable=True,
        unique=True,
    ),
    Column("owner_type_name", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, default=utcnow),
)

schema_attribute_table = Table(
    "schema_attribute",
    metadata,
    Column("guid", String(GUID_LENGTH), primary_key=True),
    Column(
        "schema_type_guid",
        String(GUID_LENGTH),
        ForeignKey("schema_type.guid", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("qualified_name", String, nullable=False),
    Column("display_name", String, nullable=True),
    Column("type_name", String, nullable=True),
    Column("description", Text, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, default=utcnow),
    Index("ix_schema_attribute_schema_type", "schema_type_guid"),
)

# Lineage ----------------------------------------------------------------------

data_flow_table = Table(
    "data_flow",
    metadata,
    Column("guid", String(GUID_LENGTH), primary_key=True),
    # endpoints are assets or processes, so no foreign key
    Column("source_guid", String(GUID_LENGTH), nullable=False),
    Column("target_guid", String(GUID_LENGTH), nullable=False),
    Column("formula", Text, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, default=utcnow),
    Column("updated_at", UTCDateTime(), nullable=False, default=utcnow, onupdate=utcnow),
    UniqueConstraint("source_guid", "target_guid", name="uq_data_flow_endpoints"),
)
