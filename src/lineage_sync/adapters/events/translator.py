"""Translate lineage event documents into the domain event model."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from lineage_sync.domain.model import (
    AssetDescriptor,
    FieldDescriptor,
    LineageEvent,
    SchemaDescriptor,
)

from .schema import LineageEventPayload

if TYPE_CHECKING:
    from .schema import AssetPayload, LineageEventInput, SchemaPayload

log = getLogger(__name__)


class EventFormatError(ValueError):
    """Raised when an event document cannot be read or does not validate."""


def _ensure_event_payload(document: LineageEventInput) -> LineageEventPayload:
    if isinstance(document, LineageEventPayload):
        return document
    return LineageEventPayload.model_validate(document)


def _to_schema_descriptor(payload: SchemaPayload) -> SchemaDescriptor:
    return SchemaDescriptor(
        qualified_name=payload.qualified_name,
        display_name=payload.display_name,
        fields=tuple(
            FieldDescriptor(
                qualified_name=field.qualified_name,
                name=field.name,
                type_name=field.type_name,
                description=field.description,
            )
            for field in payload.fields
        ),
    )


def _to_asset_descriptor(payload: AssetPayload) -> AssetDescriptor:
    return AssetDescriptor(
        qualified_name=payload.qualified_name,
        type_name=payload.type_name,
        display_name=payload.display_name,
        schema=_to_schema_descriptor(payload.schema_) if payload.schema_ is not None else None,
    )


def to_lineage_event(document: LineageEventInput) -> LineageEvent:
    """Build a :class:`LineageEvent` from a validated payload or a raw mapping."""

    try:
        payload = _ensure_event_payload(document)
    except ValidationError as exc:
        raise EventFormatError(f"Invalid lineage event: {exc}") from exc

    sql_by_input_asset: dict[str, str] = {}
    for asset in payload.inputs:
        if asset.sql is None:
            continue
        if asset.qualified_name in sql_by_input_asset:
            log.warning(
                "Input asset %s listed with SQL more than once; keeping the last",
                asset.qualified_name,
            )
        sql_by_input_asset[asset.qualified_name] = asset.sql

    return LineageEvent(
        process_qualified_name=payload.process.qualified_name,
        process_display_name=payload.process.display_name,
        process_description=payload.process.description,
        input_assets=tuple(_to_asset_descriptor(asset) for asset in payload.inputs),
        output_assets=tuple(_to_asset_descriptor(asset) for asset in payload.outputs),
        sql_by_input_asset=sql_by_input_asset,
    )


def parse_event(text: str | bytes) -> LineageEvent:
    """Parse a JSON event document."""

    try:
        payload = LineageEventPayload.model_validate_json(text)
    except ValidationError as exc:
        raise EventFormatError(f"Invalid lineage event: {exc}") from exc
    return to_lineage_event(payload)


def load_event(path: str | Path) -> LineageEvent:
    """Read and parse a JSON event file."""

    event_path = Path(path)
    try:
        text = event_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise EventFormatError(f"Cannot read event file {event_path}: {exc}") from exc
    try:
        return parse_event(text)
    except EventFormatError as exc:
        raise EventFormatError(f"{event_path}: {exc}") from exc
