"""In-memory model of one lineage event.

An event names a process, the assets it reads and the assets it writes. Input
and output descriptors keep the order in which the event listed them, which is
also the order of the identifiers the asset reconciler hands to the lineage
linker. Optional transformation text (SQL) is keyed by the qualified name of
the input asset it applies to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldDescriptor:
    """One declared field of a schema; ``name`` becomes the field display name."""

    qualified_name: str
    name: str
    type_name: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SchemaDescriptor:
    qualified_name: str
    display_name: str | None = None
    fields: tuple[FieldDescriptor, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class AssetDescriptor:
    qualified_name: str
    type_name: str
    display_name: str | None = None
    schema: SchemaDescriptor | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class LineageEvent:
    process_qualified_name: str
    process_display_name: str | None = None
    process_description: str | None = None
    input_assets: tuple[AssetDescriptor, ...] = ()
    output_assets: tuple[AssetDescriptor, ...] = ()
    sql_by_input_asset: Mapping[str, str] = field(default_factory=dict[str, str], hash=False)

    def __post_init__(self) -> None:
        # read-only copy; excluded from the hash
        sql = MappingProxyType(dict(self.sql_by_input_asset))
        object.__setattr__(self, "sql_by_input_asset", sql)

    def sql_for_input_asset(self, qualified_name: str) -> str | None:
        """Return the transformation text supplied for an input asset, if any."""

        return self.sql_by_input_asset.get(qualified_name)
