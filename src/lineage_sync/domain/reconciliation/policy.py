"""Tunable reconciliation policy.

The defaults describe an event-streaming catalog: schemas are catalogued as
``EventType`` structures, new processes start ``active``, the catalog removes a
structure's fields when the structure is deleted, and matching fields are
rewritten on every event.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from lineage_sync.domain.model import ProcessStatus

DEFAULT_SCHEMA_TYPE_NAME: Final[str] = "EventType"


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconcilePolicy:
    schema_type_name: str = DEFAULT_SCHEMA_TYPE_NAME
    process_status: ProcessStatus = ProcessStatus.ACTIVE
    # False when the catalog leaves fields behind after a structure delete
    cascading_structure_delete: bool = True
    skip_unchanged_fields: bool = False
