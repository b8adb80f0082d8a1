"""File-backed local key-value store used as a secondary cache."""
from __future__ import annotations

import json
import logging
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocalCache:
    """
    Typed get/set over a single JSON file.

    Every entry records when it was written so readers can ask `is_stale`
    instead of trusting whatever is on disk. Nothing here is verified against
    the document store; writers overwrite freely.
    """

    def __init__(self, path: str | Path | None = None):
        # path=None keeps entries in memory only.
        self._path = Path(path) if path else None
        self._lock = Lock()
        self._entries: Dict[str, Dict[str, Any]] = self._read_file()

    def _read_file(self) -> Dict[str, Dict[str, Any]]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Discarding unreadable local cache %s: %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _flush(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(self._entries), encoding="utf-8")
        tmp_path.replace(self._path)

    def set_value(self, key: str, value: Any, *, now: Optional[datetime] = None) -> None:
        with self._lock:
            self._entries[key] = {"value": value, "stored_at": (now or _utcnow()).isoformat()}
            self._flush()

    def get_value(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        return default if entry is None else entry.get("value", default)

    def delete(self, key: str) -> None:
        with self._lock:
            if self._entries.pop(key, None) is not None:
                self._flush()

    def set_model(self, key: str, model: BaseModel, *, now: Optional[datetime] = None) -> None:
        self.set_value(key, model.model_dump(mode="json"), now=now)

    def get_model(self, key: str, model_cls: Type[ModelT]) -> Optional[ModelT]:
        raw = self.get_value(key)
        if raw is None:
            return None
        try:
            return model_cls.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring malformed cache entry %s", key)
            return None

    def set_date(self, key: str, value: date) -> None:
        self.set_value(key, value.isoformat())

    def get_date(self, key: str) -> Optional[date]:
        raw = self.get_value(key)
        if not isinstance(raw, str):
            return None
        try:
            return date.fromisoformat(raw)
        except ValueError:
            return None

    def claim_date(self, key: str, value: date, *, now: Optional[datetime] = None) -> bool:
        """Store value under key unless it is already there; the read and the write share one lock."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.get("value") == value.isoformat():
                return False
            self._entries[key] = {"value": value.isoformat(), "stored_at": (now or _utcnow()).isoformat()}
            self._flush()
            return True

    def stored_at(self, key: str) -> Optional[datetime]:
        entry = self._entries.get(key)
        if not entry or "stored_at" not in entry:
            return None
        try:
            return datetime.fromisoformat(entry["stored_at"])
        except (TypeError, ValueError):
            return None

    def is_stale(self, key: str, max_age: timedelta, *, now: Optional[datetime] = None) -> bool:
        """Missing entries count as stale."""
        written = self.stored_at(key)
        if written is None:
            return True
        return (now or _utcnow()) - written > max_age


def claim_daily_marker(cache: LocalCache, key: str, today: date) -> bool:
    """Return True the first time a marker is claimed on a given calendar day."""
    return cache.claim_date(key, today)
