"""Reconciliation core: bring a metadata catalog in line with lineage events.

Flow for one event:
1) upsert input assets (and their schemas), collecting guids in event order
2) upsert output assets the same way
3) upsert the process and the data-flow edges between it and those guids

Every step is an idempotent upsert keyed by qualified name (elements) or by
the ordered guid pair (edges), so replaying an event converges.
"""

from __future__ import annotations

from .assets import AssetReconciler
from .contracts import (
    FieldDiff,
    FieldUpdate,
    LineageOutcome,
    ReconcileResult,
    SchemaOutcome,
    UpsertAction,
)
from .diff import diff_schema_fields, field_properties
from .engine import LineageEventReconciler, ReconcileStep, reconcile_event
from .lineage import LineageLinker
from .policy import DEFAULT_SCHEMA_TYPE_NAME, ReconcilePolicy
from .resolve import NameResolution, ResolutionStatus, resolve_by_qualified_name
from .schema import SchemaReconciler

__all__ = [
    "DEFAULT_SCHEMA_TYPE_NAME",
    "AssetReconciler",
    "FieldDiff",
    "FieldUpdate",
    "LineageEventReconciler",
    "LineageLinker",
    "LineageOutcome",
    "NameResolution",
    "ReconcilePolicy",
    "ReconcileResult",
    "ReconcileStep",
    "ResolutionStatus",
    "SchemaOutcome",
    "SchemaReconciler",
    "UpsertAction",
    "diff_schema_fields",
    "field_properties",
    "reconcile_event",
    "resolve_by_qualified_name",
]
