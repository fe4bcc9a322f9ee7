"""Pydantic models describing lineage event documents."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class EventBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)


class FieldPayload(EventBaseModel):
    qualified_name: str = Field(alias="qualifiedName", min_length=1)
    name: str = Field(min_length=1)
    type_name: str | None = Field(
        default=None, validation_alias=AliasChoices("type", "typeName", "type_name")
    )
    description: str | None = None

    _normalize_optional = field_validator("type_name", "description", mode="before")(
        _blank_to_none
    )


class SchemaPayload(EventBaseModel):
    qualified_name: str = Field(alias="qualifiedName", min_length=1)
    display_name: str | None = Field(default=None, alias="displayName")
    fields: list[FieldPayload] = Field(
        default_factory=list[FieldPayload],
        validation_alias=AliasChoices("fields", "attributes"),
    )

    _normalize_optional = field_validator("display_name", mode="before")(_blank_to_none)


class AssetPayload(EventBaseModel):
    qualified_name: str = Field(alias="qualifiedName", min_length=1)
    type_name: str = Field(alias="typeName", min_length=1)
    display_name: str | None = Field(default=None, alias="displayName")
    sql: str | None = None
    # "schema" would shadow BaseModel.schema()
    schema_: SchemaPayload | None = Field(
        default=None, validation_alias=AliasChoices("schema", "eventType")
    )

    _normalize_optional = field_validator("display_name", "sql", mode="before")(_blank_to_none)


class ProcessPayload(EventBaseModel):
    qualified_name: str = Field(alias="qualifiedName", min_length=1)
    display_name: str | None = Field(default=None, alias="displayName")
    description: str | None = None

    _normalize_optional = field_validator("display_name", "description", mode="before")(
        _blank_to_none
    )


class LineageEventPayload(EventBaseModel):
    process: ProcessPayload
    inputs: list[AssetPayload] = Field(default_factory=list[AssetPayload])
    outputs: list[AssetPayload] = Field(default_factory=list[AssetPayload])


LineageEventInput = LineageEventPayload | Mapping[str, object]
