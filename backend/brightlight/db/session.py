"""Engine and session factory for the document store."""
from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from brightlight.core.config import settings


@lru_cache
def get_engine() -> Engine:
    """Create the engine lazily so importing the app never opens a connection."""
    connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
    return create_engine(settings.database_url, connect_args=connect_args, pool_pre_ping=True, future=True)


@lru_cache
def get_session_factory() -> sessionmaker:
    return sessionmaker(bind=get_engine(), autoflush=False, autocommit=False, future=True)


def init_db() -> None:
    """Create any missing tables."""
    from brightlight.db.base import Base
    from brightlight.db import models  # noqa: F401  (registers tables on Base.metadata)

    Base.metadata.create_all(bind=get_engine())
