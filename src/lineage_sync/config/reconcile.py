"""Reconciliation policy loaded from the environment."""

from __future__ import annotations

from lineage_sync.domain.model import ProcessStatus
from lineage_sync.domain.reconciliation.policy import DEFAULT_SCHEMA_TYPE_NAME, ReconcilePolicy

from .env import env_flag, optional_env_var
from .errors import InvalidConfigurationError


def get_reconcile_policy() -> ReconcilePolicy:
    """Build the reconcile policy, applying ``LINEAGE_SYNC_*`` overrides."""

    schema_type_name = optional_env_var("LINEAGE_SYNC_SCHEMA_TYPE_NAME")
    status_value = optional_env_var("LINEAGE_SYNC_PROCESS_STATUS")
    process_status = ProcessStatus.ACTIVE
    if status_value is not None:
        try:
            process_status = ProcessStatus(status_value.lower())
        except ValueError as exc:
            choices = ", ".join(status.value for status in ProcessStatus)
            raise InvalidConfigurationError(
                "LINEAGE_SYNC_PROCESS_STATUS", status_value, expected=f"one of {choices}"
            ) from exc

    return ReconcilePolicy(
        schema_type_name=schema_type_name or DEFAULT_SCHEMA_TYPE_NAME,
        process_status=process_status,
        cascading_structure_delete=env_flag(
            "LINEAGE_SYNC_CASCADING_STRUCTURE_DELETE", default=True
        ),
        skip_unchanged_fields=env_flag("LINEAGE_SYNC_SKIP_UNCHANGED_FIELDS", default=False),
    )
