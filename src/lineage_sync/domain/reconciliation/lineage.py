"""Upsert the process of a lineage event and its data-flow edges.

Edges run asset -> process for inputs and process -> asset for outputs. Only
input edges carry a formula, taken from the event's transformation text for
that asset. Lineage is recorded at asset level; columns are not linked.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lineage_sync.domain.model import DataFlowProperties, ElementKind, ProcessProperties

from .contracts import LineageOutcome, UpsertAction
from .policy import ReconcilePolicy
from .resolve import resolve_by_qualified_name

if TYPE_CHECKING:
    from collections.abc import Sequence

    from lineage_sync.domain.model import LineageEvent
    from lineage_sync.domain.ports import AssetRepository, DataFlowRepository, ProcessRepository

log = logging.getLogger(__name__)


@dataclass(slots=True)
class LineageLinker:
    processes: ProcessRepository
    assets: AssetRepository
    data_flows: DataFlowRepository
    policy: ReconcilePolicy = field(default_factory=ReconcilePolicy)

    def link(
        self,
        event: LineageEvent,
        *,
        input_asset_guids: Sequence[str],
        output_asset_guids: Sequence[str],
    ) -> LineageOutcome:
        """Upsert the event's process and connect it to the given assets."""

        process_guid, process_action = self.upsert_process(event)

        input_edges: list[str] = []
        for asset_guid in input_asset_guids:
            asset = self.assets.get(asset_guid)
            formula = event.sql_for_input_asset(asset.qualified_name)
            input_edges.append(
                self._upsert_edge(asset_guid, process_guid, DataFlowProperties(formula=formula))
            )

        output_edges = [
            self._upsert_edge(process_guid, asset_guid, DataFlowProperties())
            for asset_guid in output_asset_guids
        ]

        return LineageOutcome(
            process_guid=process_guid,
            process_action=process_action,
            input_edge_guids=tuple(input_edges),
            output_edge_guids=tuple(output_edges),
        )

    def upsert_process(self, event: LineageEvent) -> tuple[str, UpsertAction]:
        qualified_name = event.process_qualified_name
        properties = ProcessProperties(
            qualified_name=qualified_name,
            display_name=event.process_display_name,
            description=event.process_description,
        )
        resolution = resolve_by_qualified_name(
            self.processes.find_by_name(qualified_name),
            kind=ElementKind.PROCESS,
            qualified_name=qualified_name,
        )
        if resolution.target is None:
            guid = self.processes.create(properties, self.policy.process_status)
            log.debug("Created process %s (%s)", guid, qualified_name)
            return guid, UpsertAction.CREATED

        guid = resolution.target.guid
        self.processes.update(guid, properties)
        log.debug("Updated process %s (%s)", guid, qualified_name)
        return guid, UpsertAction.UPDATED

    def _upsert_edge(
        self,
        source_guid: str,
        target_guid: str,
        properties: DataFlowProperties,
    ) -> str:
        existing = self.data_flows.find(source_guid, target_guid)
        if existing is None:
            guid = self.data_flows.create(source_guid, target_guid, properties)
            log.debug("Created data flow %s: %s -> %s", guid, source_guid, target_guid)
            return guid

        self.data_flows.update(existing.guid, properties)
        log.debug("Updated data flow %s: %s -> %s", existing.guid, source_guid, target_guid)
        return existing.guid
