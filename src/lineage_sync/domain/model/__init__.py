"""Catalog element model and lineage event model."""

from __future__ import annotations

from .elements import (
    Asset,
    AssetProperties,
    DataFlowEdge,
    DataFlowProperties,
    Process,
    ProcessProperties,
    SchemaField,
    SchemaFieldProperties,
    SchemaStructure,
    SchemaStructureProperties,
)
from .enums import ElementKind, ProcessStatus
from .event import AssetDescriptor, FieldDescriptor, LineageEvent, SchemaDescriptor

__all__ = [
    "Asset",
    "AssetDescriptor",
    "AssetProperties",
    "DataFlowEdge",
    "DataFlowProperties",
    "ElementKind",
    "FieldDescriptor",
    "LineageEvent",
    "Process",
    "ProcessProperties",
    "ProcessStatus",
    "SchemaDescriptor",
    "SchemaField",
    "SchemaFieldProperties",
    "SchemaStructure",
    "SchemaStructureProperties",
]
