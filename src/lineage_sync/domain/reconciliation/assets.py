"""Upsert the data assets named by a lineage event."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lineage_sync.domain.model import AssetProperties, ElementKind

from .resolve import resolve_by_qualified_name

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lineage_sync.domain.model import AssetDescriptor
    from lineage_sync.domain.ports import AssetRepository

    from .schema import SchemaReconciler

log = logging.getLogger(__name__)


@dataclass(slots=True)
class AssetReconciler:
    assets: AssetRepository
    schemas: SchemaReconciler

    def upsert_assets(self, descriptors: Iterable[AssetDescriptor]) -> list[str]:
        """Create or update each asset and return the catalog guids in input order.

        A descriptor for which the catalog yields no guid is skipped with a
        warning, so it contributes no lineage edge.
        """

        guids: list[str] = []
        for descriptor in descriptors:
            guid = self.upsert_asset(descriptor)
            if guid is None:
                log.warning(
                    "Catalog returned no guid for asset %r; skipping it",
                    descriptor.qualified_name,
                )
                continue
            guids.append(guid)
        return guids

    def upsert_asset(self, descriptor: AssetDescriptor) -> str | None:
        qualified_name = descriptor.qualified_name
        properties = AssetProperties(
            type_name=descriptor.type_name,
            qualified_name=qualified_name,
            display_name=descriptor.display_name,
        )

        resolution = resolve_by_qualified_name(
            self.assets.find_by_name(qualified_name),
            kind=ElementKind.ASSET,
            qualified_name=qualified_name,
        )
        if resolution.target is None:
            guid = self.assets.create(properties) or None
            log.debug("Created asset %s (%s)", guid, qualified_name)
        else:
            guid = resolution.target.guid or None
            if guid is not None:
                self.assets.update(guid, properties)
                log.debug("Updated asset %s (%s)", guid, qualified_name)

        if guid is None:
            return None

        if descriptor.schema is not None:
            outcome = self.schemas.reconcile(descriptor, guid)
            log.debug(
                "Schema %s for asset %s: %s",
                outcome.structure_guid,
                qualified_name,
                outcome.action,
            )
        return guid
