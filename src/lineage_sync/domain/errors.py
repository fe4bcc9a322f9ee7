"""Errors raised by catalog adapters and by the reconciler.

Catalog adapters report failures as ``CatalogError`` subclasses tagged with a
``CatalogErrorKind``. The reconciler does not branch on the kind: any catalog
error aborts the event and is re-raised as ``ReconciliationError`` with the
original error chained, leaving retry and dead-lettering to the caller.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lineage_sync.domain.model import ElementKind


class CatalogErrorKind(StrEnum):
    INVALID_PARAMETER = "invalid_parameter"
    NOT_AUTHORIZED = "not_authorized"
    SERVER_FAILURE = "server_failure"


class CatalogError(RuntimeError):
    """Base class for failures reported by a metadata catalog."""

    kind: CatalogErrorKind = CatalogErrorKind.SERVER_FAILURE


class InvalidParameterError(CatalogError):
    """The catalog rejected the parameters of a request."""

    kind = CatalogErrorKind.INVALID_PARAMETER


class ElementNotFoundError(InvalidParameterError):
    """A request referenced a guid the catalog does not know."""

    def __init__(self, element: ElementKind, guid: str) -> None:
        super().__init__(f"Unknown {element} guid: {guid}")
        self.element = element
        self.guid = guid


class NotAuthorizedError(CatalogError):
    """The caller is not allowed to perform the request."""

    kind = CatalogErrorKind.NOT_AUTHORIZED


class CatalogServerError(CatalogError):
    """The catalog or the transport to it failed."""

    kind = CatalogErrorKind.SERVER_FAILURE


class ReconciliationError(RuntimeError):
    """Raised when a lineage event could not be reconciled completely.

    Earlier steps of the event may already be committed in the catalog.
    Replaying the same event is safe and converges.
    """

    def __init__(self, message: str, *, step: str, cause: CatalogError) -> None:
        super().__init__(message)
        self.step = step
        self.cause = cause

    @property
    def kind(self) -> CatalogErrorKind:
        return self.cause.kind
