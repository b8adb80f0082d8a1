"""Opik spans around route handlers and the generation pipeline."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional

from brightlight.core.errors import BrightLightError
from brightlight.observability.client import get_opik_client

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from opik.api_objects.trace.trace_client import Trace

logger = logging.getLogger(__name__)


def _span_metadata(
    metadata: Optional[Dict[str, Any]],
    user_id: Optional[str],
    request_id: Optional[str],
) -> Dict[str, Any]:
    """Drop None values; identity keys never override caller-supplied ones."""
    merged = {key: value for key, value in (metadata or {}).items() if value is not None}
    if user_id:
        merged.setdefault("user_id", str(user_id))
    if request_id:
        merged.setdefault("request_id", request_id)
    return merged


def _error_info(exc: BaseException) -> Dict[str, Any]:
    info: Dict[str, Any] = {"exception_type": type(exc).__name__, "message": str(exc)}
    if isinstance(exc, BrightLightError):
        info["brightlight_error"] = True
    return info


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional["Trace"]]:
    """
    Open an Opik trace around a block.

    Yields None when Opik is disabled, so callers must guard every update.
    Exceptions raised inside the block are attached to the trace and re-raised;
    the block's wall time lands in the trace metadata as `duration_ms`.
    """
    client = get_opik_client()
    span_metadata = _span_metadata(metadata, user_id, request_id)
    opik_trace: Optional["Trace"] = None
    if client:
        try:
            opik_trace = client.trace(name=name, metadata=span_metadata or None)
        except Exception as exc:  # pragma: no cover - tracing must never break a request
            logger.debug("Opik refused trace %s: %s", name, exc)

    started = perf_counter()
    try:
        yield opik_trace
    except Exception as exc:
        if opik_trace:
            try:
                opik_trace.update(error_info=_error_info(exc))
            except Exception:  # pragma: no cover
                logger.debug("Could not record failure on trace %s", name, exc_info=True)
        raise
    finally:
        if opik_trace:
            try:
                span_metadata["duration_ms"] = round((perf_counter() - started) * 1000, 2)
                opik_trace.update(metadata=span_metadata)
                opik_trace.end()
            except Exception:  # pragma: no cover
                logger.debug("Could not close trace %s", name, exc_info=True)
