"""Process-wide Opik client."""
from __future__ import annotations

import logging
from threading import Lock
from typing import Optional

from opik import Opik

from brightlight.core.config import Settings, settings

logger = logging.getLogger(__name__)

_state_lock = Lock()
_client: Optional[Opik] = None
_resolved = False


def _create_client(config: Settings) -> Optional[Opik]:
    if not config.opik_enabled:
        logger.debug("Opik disabled; traces and metrics are dropped.")
        return None
    if not config.opik_api_key:
        logger.warning("OPIK_ENABLED is set without OPIK_API_KEY; plan generation will not be traced.")
        return None
    try:
        client = Opik(project_name=config.opik_project, api_key=config.opik_api_key)
    except Exception as exc:  # pragma: no cover - SDK raises assorted config errors
        logger.warning("Opik client could not be created, tracing disabled: %s", exc)
        return None
    logger.info("Tracing to Opik project %s.", config.opik_project)
    return client


def init_opik() -> Optional[Opik]:
    """Resolve the client once per process; later calls return the same answer."""
    global _client, _resolved

    with _state_lock:
        if not _resolved:
            _client = _create_client(settings)
            _resolved = True
        return _client


def get_opik_client() -> Optional[Opik]:
    return _client if _resolved else init_opik()
