"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ElementKind(StrEnum):
    """Kinds of catalog elements the reconciler touches."""

    ASSET = "asset"
    PROCESS = "process"
    SCHEMA_STRUCTURE = "schema_structure"
    SCHEMA_FIELD = "schema_field"
    DATA_FLOW = "data_flow"


class ProcessStatus(StrEnum):
    """Lifecycle status recorded on a process when it is first catalogued."""

    UNKNOWN = "unknown"
    DRAFT = "draft"
    PROPOSED = "proposed"
    APPROVED = "approved"
    ACTIVE = "active"
    DISABLED = "disabled"
    DEPRECATED = "deprecated"
    OTHER = "other"
