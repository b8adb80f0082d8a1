"""Error taxonomy shared by services and routes."""
from __future__ import annotations

from typing import Iterable, Optional


class BrightLightError(Exception):
    """Base class for every error raised by BrightLight services."""


class TransportError(BrightLightError):
    """A remote endpoint or store could not be reached."""


class UpstreamError(BrightLightError):
    """A remote API reported an error payload or retries were exhausted."""

    def __init__(self, message: str, *, error_type: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.code = code


class GenerationError(BrightLightError):
    """Plan generation produced unusable output."""


class StructureValidationError(GenerationError):
    def __init__(self, first_day: int, last_day: int):
        super().__init__(f"Failed to generate valid plan structure for days {first_day}-{last_day} after retry")
        self.first_day = first_day
        self.last_day = last_day


class IncompletePlanError(GenerationError):
    def __init__(self, missing_days: Iterable[int]):
        self.missing_days = sorted(missing_days)
        super().__init__(f"Generated plan is missing days: {', '.join(str(day) for day in self.missing_days)}")


class NotFoundError(BrightLightError):
    """No stored record exists. A valid empty state rather than a failure."""


class PersistenceError(BrightLightError):
    """Writing to the document store failed."""
