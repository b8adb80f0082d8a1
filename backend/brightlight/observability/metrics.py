"""Numeric signals recorded as one-shot Opik traces."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from brightlight.observability.client import get_opik_client

logger = logging.getLogger(__name__)

METRIC_PREFIX = "metric:"


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record `value` under `metric:<name>`; silently skipped while tracing is off."""
    client = get_opik_client()
    if client is None:
        return

    payload: Dict[str, Any] = {key: val for key, val in (metadata or {}).items() if val is not None}
    payload["value"] = value
    try:
        client.trace(name=f"{METRIC_PREFIX}{name}", metadata=payload).end()
    except Exception as exc:  # pragma: no cover - metrics are best-effort
        logger.debug("Metric %s dropped: %s", name, exc)
