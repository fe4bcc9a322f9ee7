"""Catalog elements as returned by the metadata catalog.

Elements are immutable snapshots. The catalog owns identity: every element
carries the ``guid`` the catalog assigned when it was created, and the
reconciler never invents one. Properties are split from the element so the
same value object can be sent on create and update calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import ProcessStatus


@dataclass(frozen=True, slots=True, kw_only=True)
class AssetProperties:
    type_name: str
    qualified_name: str
    display_name: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProcessProperties:
    qualified_name: str
    display_name: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SchemaStructureProperties:
    type_name: str
    qualified_name: str
    display_name: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SchemaFieldProperties:
    qualified_name: str
    display_name: str | None = None
    type_name: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class DataFlowProperties:
    """Properties of a data-flow edge; ``formula`` holds the transformation text."""

    formula: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Asset:
    guid: str
    properties: AssetProperties

    @property
    def qualified_name(self) -> str:
        return self.properties.qualified_name


@dataclass(frozen=True, slots=True, kw_only=True)
class Process:
    guid: str
    properties: ProcessProperties
    status: ProcessStatus = ProcessStatus.ACTIVE

    @property
    def qualified_name(self) -> str:
        return self.properties.qualified_name


@dataclass(frozen=True, slots=True, kw_only=True)
class SchemaStructure:
    """Structural root of an asset's payload, attached to at most one asset."""

    guid: str
    properties: SchemaStructureProperties
    owner_guid: str | None = None
    owner_type_name: str | None = None

    @property
    def qualified_name(self) -> str:
        return self.properties.qualified_name


@dataclass(frozen=True, slots=True, kw_only=True)
class SchemaField:
    guid: str
    structure_guid: str
    properties: SchemaFieldProperties

    @property
    def qualified_name(self) -> str:
        return self.properties.qualified_name


@dataclass(frozen=True, slots=True, kw_only=True)
class DataFlowEdge:
    """Directed data movement from ``source_guid`` to ``target_guid``."""

    guid: str
    source_guid: str
    target_guid: str
    properties: DataFlowProperties = field(default_factory=DataFlowProperties)

    @property
    def formula(self) -> str | None:
        return self.properties.formula
