"""Orchestrator for reconciling one lineage event.

The engine composes the asset reconciler and the lineage linker. It keeps no
per-event state: the guids produced while upserting assets are local values
handed to the linker explicitly, so one engine can serve any number of events.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from lineage_sync.domain.errors import CatalogError, ReconciliationError

from .assets import AssetReconciler
from .contracts import ReconcileResult
from .lineage import LineageLinker
from .policy import ReconcilePolicy
from .schema import SchemaReconciler

if TYPE_CHECKING:
    from lineage_sync.domain.model import LineageEvent
    from lineage_sync.domain.ports import CatalogRepositories

log = logging.getLogger(__name__)


class ReconcileStep(StrEnum):
    INPUT_ASSETS = "input_assets"
    OUTPUT_ASSETS = "output_assets"
    LINEAGE = "lineage"


@dataclass(slots=True)
class LineageEventReconciler:
    """Run asset upserts and lineage linking for one event at a time."""

    assets: AssetReconciler
    lineage: LineageLinker

    @classmethod
    def from_repositories(
        cls,
        repositories: CatalogRepositories,
        *,
        policy: ReconcilePolicy | None = None,
    ) -> LineageEventReconciler:
        effective_policy = policy or ReconcilePolicy()
        schemas = SchemaReconciler(
            structures=repositories.schema_structures,
            schema_fields=repositories.schema_fields,
            policy=effective_policy,
        )
        return cls(
            assets=AssetReconciler(assets=repositories.assets, schemas=schemas),
            lineage=LineageLinker(
                processes=repositories.processes,
                assets=repositories.assets,
                data_flows=repositories.data_flows,
                policy=effective_policy,
            ),
        )

    def reconcile(self, event: LineageEvent) -> ReconcileResult:
        """Bring the catalog in line with ``event``.

        The first catalog failure aborts the event. Steps that already ran stay
        applied; replaying the event converges instead of duplicating.
        """

        step = ReconcileStep.INPUT_ASSETS
        try:
            input_guids = self.assets.upsert_assets(event.input_assets)
            step = ReconcileStep.OUTPUT_ASSETS
            output_guids = self.assets.upsert_assets(event.output_assets)
            step = ReconcileStep.LINEAGE
            lineage = self.lineage.link(
                event,
                input_asset_guids=input_guids,
                output_asset_guids=output_guids,
            )
        except CatalogError as exc:
            raise ReconciliationError(
                f"Reconciling process {event.process_qualified_name!r} failed "
                f"during {step}: {exc}",
                step=step,
                cause=exc,
            ) from exc

        log.info(
            "Reconciled process %r (%s): inputs=%d outputs=%d",
            event.process_qualified_name,
            lineage.process_action,
            len(input_guids),
            len(output_guids),
        )
        return ReconcileResult(
            input_asset_guids=tuple(input_guids),
            output_asset_guids=tuple(output_guids),
            lineage=lineage,
        )


def reconcile_event(
    event: LineageEvent,
    *,
    repositories: CatalogRepositories,
    policy: ReconcilePolicy | None = None,
) -> ReconcileResult:
    """Reconcile ``event`` against ``repositories`` with a throwaway engine."""

    return LineageEventReconciler.from_repositories(repositories, policy=policy).reconcile(event)
