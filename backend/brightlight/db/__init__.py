"""Document store utilities and models."""

from brightlight.db.base import Base
from brightlight.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
