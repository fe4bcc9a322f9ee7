"""Public interface for the JSON lineage event adapter."""

from __future__ import annotations

from .schema import LineageEventInput, LineageEventPayload
from .translator import EventFormatError, load_event, parse_event, to_lineage_event

__all__ = [
    "EventFormatError",
    "LineageEventInput",
    "LineageEventPayload",
    "load_event",
    "parse_event",
    "to_lineage_event",
]
