"""Result type for optional enrichments (notes, contacts).

Optional lookups never raise into the coaching pipeline. They report one of
three outcomes and the caller decides what to log:

    result = await fetch_notes(...)
    notes = result.unwrap_or_log(logger, "primary_notes")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class EnrichmentStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class EnrichmentResult(Generic[T]):
    """Outcome of an optional lookup: ok(items), empty, or error(reason)."""

    status: EnrichmentStatus
    items: list[T] = field(default_factory=list)
    reason: str | None = None

    @classmethod
    def ok(cls, items: list[T]) -> EnrichmentResult[T]:
        # An ok with nothing in it is just empty
        if not items:
            return cls.empty()
        return cls(status=EnrichmentStatus.OK, items=list(items))

    @classmethod
    def empty(cls) -> EnrichmentResult[T]:
        return cls(status=EnrichmentStatus.EMPTY)

    @classmethod
    def error(cls, reason: str) -> EnrichmentResult[T]:
        return cls(status=EnrichmentStatus.ERROR, reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.status == EnrichmentStatus.OK

    @property
    def is_error(self) -> bool:
        return self.status == EnrichmentStatus.ERROR

    def unwrap_or_log(
        self, logger: logging.Logger, label: str, request_id: str | None = None
    ) -> list[T]:
        """Return items, logging errors at WARNING and empties at DEBUG."""
        prefix = f"[{request_id}] " if request_id else ""
        if self.is_error:
            logger.warning(f"{prefix}{label} degraded: {self.reason}")
        elif not self.is_ok:
            logger.debug(f"{prefix}{label} empty")
        return self.items
