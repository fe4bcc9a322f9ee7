"""Reconcile the schema structure attached to one asset.

Three cases, decided per call:

- nothing attached: create the structure, attach it, create its fields
- attached structure has the declared qualified name: update it in place and
  apply the field diff (deletes first, then updates, then creates)
- attached structure has another qualified name: delete it with its fields and
  build the declared structure from scratch

A changed structure qualified name means a different schema, not a revision of
the old one, so no field history is carried across a replacement.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lineage_sync.domain.model import SchemaStructureProperties

from .contracts import SchemaOutcome, UpsertAction
from .diff import diff_schema_fields, field_properties
from .policy import ReconcilePolicy

if TYPE_CHECKING:
    from lineage_sync.domain.model import AssetDescriptor, SchemaDescriptor, SchemaStructure
    from lineage_sync.domain.ports import SchemaFieldRepository, SchemaStructureRepository

log = logging.getLogger(__name__)


@dataclass(slots=True)
class SchemaReconciler:
    structures: SchemaStructureRepository
    schema_fields: SchemaFieldRepository
    policy: ReconcilePolicy = field(default_factory=ReconcilePolicy)

    def reconcile(self, asset: AssetDescriptor, asset_guid: str) -> SchemaOutcome:
        """Bring the structure attached to ``asset_guid`` in line with ``asset.schema``."""

        declared = asset.schema
        if declared is None:
            raise ValueError(f"Asset {asset.qualified_name!r} does not declare a schema")

        existing = self.structures.find_for_asset(asset_guid, asset.type_name)
        if existing is None:
            return self._build(asset, asset_guid, declared, action=UpsertAction.CREATED)
        if existing.qualified_name == declared.qualified_name:
            return self._update_in_place(asset_guid, existing, declared)
        return self._replace(asset, asset_guid, existing, declared)

    def _structure_properties(self, declared: SchemaDescriptor) -> SchemaStructureProperties:
        return SchemaStructureProperties(
            type_name=self.policy.schema_type_name,
            qualified_name=declared.qualified_name,
            display_name=declared.display_name,
        )

    def _build(
        self,
        asset: AssetDescriptor,
        asset_guid: str,
        declared: SchemaDescriptor,
        *,
        action: UpsertAction,
    ) -> SchemaOutcome:
        structure_guid = self.structures.create(self._structure_properties(declared))
        self.structures.attach_to_asset(structure_guid, asset_guid, asset.type_name)
        log.debug(
            "Created schema structure %s (%s) for asset %s",
            structure_guid,
            declared.qualified_name,
            asset_guid,
        )

        # an empty stored side turns the diff into a de-duplicated create list
        creates = diff_schema_fields((), declared.fields).creates
        for descriptor in creates:
            self.schema_fields.create(structure_guid, field_properties(descriptor))

        return SchemaOutcome(
            asset_guid=asset_guid,
            structure_guid=structure_guid,
            action=action,
            fields_created=len(creates),
        )

    def _update_in_place(
        self,
        asset_guid: str,
        existing: SchemaStructure,
        declared: SchemaDescriptor,
    ) -> SchemaOutcome:
        self.structures.update(existing.guid, self._structure_properties(declared))

        stored = self.schema_fields.list_for_structure(existing.guid)
        diff = diff_schema_fields(
            stored,
            declared.fields,
            skip_unchanged=self.policy.skip_unchanged_fields,
        )
        for schema_field in diff.deletes:
            self.schema_fields.delete(schema_field.guid)
        for update in diff.updates:
            self.schema_fields.update(update.existing.guid, field_properties(update.declared))
        for descriptor in diff.creates:
            self.schema_fields.create(existing.guid, field_properties(descriptor))

        log.debug(
            "Updated schema structure %s: deleted=%d updated=%d created=%d unchanged=%d",
            existing.guid,
            len(diff.deletes),
            len(diff.updates),
            len(diff.creates),
            len(diff.unchanged),
        )
        return SchemaOutcome(
            asset_guid=asset_guid,
            structure_guid=existing.guid,
            action=UpsertAction.UPDATED,
            fields_deleted=len(diff.deletes),
            fields_updated=len(diff.updates),
            fields_created=len(diff.creates),
        )

    def _replace(
        self,
        asset: AssetDescriptor,
        asset_guid: str,
        existing: SchemaStructure,
        declared: SchemaDescriptor,
    ) -> SchemaOutcome:
        log.info(
            "Replacing schema structure %r with %r on asset %s",
            existing.qualified_name,
            declared.qualified_name,
            asset_guid,
        )
        deleted = 0
        if not self.policy.cascading_structure_delete:
            for schema_field in self.schema_fields.list_for_structure(existing.guid):
                self.schema_fields.delete(schema_field.guid)
                deleted += 1
        self.structures.delete(existing.guid)

        outcome = self._build(asset, asset_guid, declared, action=UpsertAction.REPLACED)
        return SchemaOutcome(
            asset_guid=outcome.asset_guid,
            structure_guid=outcome.structure_guid,
            action=outcome.action,
            fields_deleted=deleted,
            fields_created=outcome.fields_created,
        )
