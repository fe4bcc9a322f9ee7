"""Qualified-name resolution against catalog lookup results.

Catalog lookups by qualified name may return several elements, because the
catalog does not enforce uniqueness of names. Matching policy:

- no candidates -> ``NEW``; the caller creates the element
- one candidate -> ``RESOLVED``
- several candidates -> ``AMBIGUOUS``; the first candidate, in catalog order,
  is used as the target and the rest are left untouched

Ambiguity is logged but not repaired. Whether duplicates should be merged,
rejected or disambiguated by a second key is an open decision.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from lineage_sync.domain.model import ElementKind

log = logging.getLogger(__name__)


class ResolutionStatus(StrEnum):
    NEW = "new"
    RESOLVED = "resolved"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True, slots=True, kw_only=True)
class NameResolution[TElement]:
    """Outcome of resolving one qualified name."""

    status: ResolutionStatus
    target: TElement | None = None
    candidates: tuple[TElement, ...] = ()

    @property
    def is_new(self) -> bool:
        return self.status is ResolutionStatus.NEW


def resolve_by_qualified_name[TElement](
    candidates: Sequence[TElement] | None,
    *,
    kind: ElementKind,
    qualified_name: str,
) -> NameResolution[TElement]:
    """Classify a lookup result and select the canonical element."""

    found = tuple(candidates or ())
    if not found:
        return NameResolution(status=ResolutionStatus.NEW)

    if len(found) == 1:
        return NameResolution(status=ResolutionStatus.RESOLVED, target=found[0], candidates=found)

    log.warning(
        "Found %d %s elements named %r; reconciling the first and ignoring the rest",
        len(found),
        kind,
        qualified_name,
    )
    return NameResolution(status=ResolutionStatus.AMBIGUOUS, target=found[0], candidates=found)
