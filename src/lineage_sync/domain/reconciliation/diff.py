"""Field-level diff between a stored schema structure and a declared one.

Fields are matched by qualified name only. The diff is pure: it reads the two
field sets and returns the buckets, the schema reconciler executes them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lineage_sync.domain.model import SchemaFieldProperties

from .contracts import FieldDiff, FieldUpdate

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lineage_sync.domain.model import FieldDescriptor, SchemaField

log = logging.getLogger(__name__)


def field_properties(declared: FieldDescriptor) -> SchemaFieldProperties:
    """Map a declared field onto the catalog's field properties."""

    return SchemaFieldProperties(
        qualified_name=declared.qualified_name,
        display_name=declared.name,
        type_name=declared.type_name,
        description=declared.description,
    )


def diff_schema_fields(
    existing: Iterable[SchemaField],
    declared: Iterable[FieldDescriptor],
    *,
    skip_unchanged: bool = False,
) -> FieldDiff:
    """Partition ``existing`` against ``declared`` into delete/update/create buckets.

    - stored only -> delete
    - stored and declared -> update with the declared values; the update is
      unconditional unless ``skip_unchanged`` is set, in which case fields whose
      stored properties already match land in ``unchanged``
    - declared only -> create

    A qualified name stored more than once keeps its first field; the later
    copies are deleted so the structure converges to one field per name. A
    qualified name declared more than once keeps its first declaration.
    """

    declared_by_name: dict[str, FieldDescriptor] = {}
    for descriptor in declared:
        if descriptor.qualified_name in declared_by_name:
            log.warning(
                "Schema declares field %r more than once; keeping the first declaration",
                descriptor.qualified_name,
            )
            continue
        declared_by_name[descriptor.qualified_name] = descriptor

    deletes: list[SchemaField] = []
    updates: list[FieldUpdate] = []
    unchanged: list[SchemaField] = []
    matched: set[str] = set()
    for schema_field in existing:
        qualified_name = schema_field.qualified_name
        descriptor = declared_by_name.get(qualified_name)
        if descriptor is None or qualified_name in matched:
            deletes.append(schema_field)
            continue
        matched.add(qualified_name)
        if skip_unchanged and schema_field.properties == field_properties(descriptor):
            unchanged.append(schema_field)
            continue
        updates.append(FieldUpdate(existing=schema_field, declared=descriptor))

    creates = tuple(
        descriptor
        for qualified_name, descriptor in declared_by_name.items()
        if qualified_name not in matched
    )
    return FieldDiff(
        deletes=tuple(deletes),
        updates=tuple(updates),
        creates=creates,
        unchanged=tuple(unchanged),
    )
