"""Catalog tables for assets, processes, schemas and data flows.

Revision ID: 0001_catalog_tables
Revises:
Create Date: 2026-10-18

"""

from __future__ import annotations

from typing import TYPE_CHECKING

import sqlalchemy as sa
from alembic import op

from lineage_sync.adapters.sqlalchemy.mappings import UTCDateTime

if TYPE_CHECKING:
    from collections.abc import Sequence

revision: str = "0001_catalog_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_PROCESS_STATUSES = (
    "unknown",
    "draft",
    "proposed",
    "approved",
    "active",
    "disabled",
    "deprecated",
    "other",
)


def upgrade() -> None:
    op.create_table(
        "asset",
        sa.Column("guid", sa.String(length=36), nullable=False),
        sa.Column("qualified_name", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("type_name", sa.String(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("guid", name=op.f("pk_asset")),
    )
    with op.batch_alter_table("asset", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_asset_qualified_name"), ["qualified_name"])

    op.create_table(
        "process",
        sa.Column("guid", sa.String(length=36), nullable=False),
        sa.Column("qualified_name", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*_PROCESS_STATUSES, name="processstatus", native_enum=False),
            nullable=False,
        ),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("guid", name=op.f("pk_process")),
    )
    with op.batch_alter_table("process", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_process_qualified_name"), ["qualified_name"])

    op.create_table(
        "schema_type",
        sa.Column("guid", sa.String(length=36), nullable=False),
        sa.Column("qualified_name", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("type_name", sa.String(), nullable=False),
        sa.Column("owner_guid", sa.String(length=36), nullable=True),
        sa.Column("owner_type_name", sa.String(), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["owner_guid"],
            ["asset.guid"],
            name=op.f("fk_schema_type_owner_guid_asset"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("guid", name=op.f("pk_schema_type")),
        sa.UniqueConstraint("owner_guid", name=op.f("uq_schema_type_owner_guid")),
    )

    op.create_table(
        "schema_attribute",
        sa.Column("guid", sa.String(length=36), nullable=False),
        sa.Column("schema_type_guid", sa.String(length=36), nullable=False),
        sa.Column("qualified_name", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("type_name", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["schema_type_guid"],
            ["schema_type.guid"],
            name=op.f("fk_schema_attribute_schema_type_guid_schema_type"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("guid", name=op.f("pk_schema_attribute")),
    )
    with op.batch_alter_table("schema_attribute", schema=None) as batch_op:
        batch_op.create_index("ix_schema_attribute_schema_type", ["schema_type_guid"])

    op.create_table(
        "data_flow",
        sa.Column("guid", sa.String(length=36), nullable=False),
        sa.Column("source_guid", sa.String(length=36), nullable=False),
        sa.Column("target_guid", sa.String(length=36), nullable=False),
        sa.Column("formula", sa.Text(), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("guid", name=op.f("pk_data_flow")),
        sa.UniqueConstraint("source_guid", "target_guid", name="uq_data_flow_endpoints"),
    )


def downgrade() -> None:
    op.drop_table("data_flow")
    with op.batch_alter_table("schema_attribute", schema=None) as batch_op:
        batch_op.drop_index("ix_schema_attribute_schema_type")
    op.drop_table("schema_attribute")
    op.drop_table("schema_type")
    with op.batch_alter_table("process", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_process_qualified_name"))
    op.drop_table("process")
    with op.batch_alter_table("asset", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_asset_qualified_name"))
    op.drop_table("asset")
