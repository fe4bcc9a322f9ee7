"""Result types shared by the reconciliation components.

None of these drive behaviour; they summarise what one event changed so the
caller can log it or assert on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lineage_sync.domain.model import FieldDescriptor, SchemaField


class UpsertAction(StrEnum):
    """What an upsert did to the catalog element it targeted."""

    CREATED = "created"
    UPDATED = "updated"
    REPLACED = "replaced"


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldUpdate:
    existing: SchemaField
    declared: FieldDescriptor


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldDiff:
    """Partition of an existing field set against a declared one.

    Keys are qualified names. A field appears in at most one bucket.
    """

    deletes: tuple[SchemaField, ...] = ()
    updates: tuple[FieldUpdate, ...] = ()
    creates: tuple[FieldDescriptor, ...] = ()
    unchanged: tuple[SchemaField, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.deletes or self.updates or self.creates)


@dataclass(frozen=True, slots=True, kw_only=True)
class SchemaOutcome:
    asset_guid: str
    structure_guid: str
    action: UpsertAction
    fields_deleted: int = 0
    fields_updated: int = 0
    fields_created: int = 0


@dataclass(frozen=True, slots=True, kw_only=True)
class LineageOutcome:
    process_guid: str
    process_action: UpsertAction
    input_edge_guids: tuple[str, ...] = ()
    output_edge_guids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconcileResult:
    """Summary of one reconciled event."""

    input_asset_guids: tuple[str, ...]
    output_asset_guids: tuple[str, ...]
    lineage: LineageOutcome

    @property
    def process_guid(self) -> str:
        return self.lineage.process_guid
