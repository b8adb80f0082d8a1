"""Translate service errors into HTTP responses."""
from __future__ import annotations

from fastapi import HTTPException, status

from brightlight.core.errors import (
    BrightLightError,
    GenerationError,
    IncompletePlanError,
    NotFoundError,
    PersistenceError,
    StructureValidationError,
    TransportError,
    UpstreamError,
)

_ERROR_KINDS = (
    (StructureValidationError, "structure_validation"),
    (IncompletePlanError, "incomplete_plan"),
    (UpstreamError, "upstream"),
    (TransportError, "transport"),
)


def http_error_from(exc: BrightLightError) -> HTTPException:
    """
    Map a service error onto a status code.

    Generation and upstream failures carry a `generation_failed` body so clients
    can offer a retry instead of waiting on a plan that is not coming.
    """
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, PersistenceError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    if isinstance(exc, (GenerationError, UpstreamError, TransportError)):
        kind = next((name for error_cls, name in _ERROR_KINDS if isinstance(exc, error_cls)), "generation")
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "status": "generation_failed",
                "retryable": True,
                "error": kind,
                "message": str(exc),
            },
        )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def store_unavailable(exc: TransportError) -> HTTPException:
    """The document store could not be read and no fresh local copy exists."""
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={"status": "store_unavailable", "retryable": True, "message": str(exc)},
    )
