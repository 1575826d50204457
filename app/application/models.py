from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence

from app.core.exceptions import BatchValidationError


@dataclass(slots=True)
class BatchRequest:
    """One incoming batch: queries[i] is searched within categories[i]."""

    queries: List[str]
    categories: List[str]

    @classmethod
    def from_payload(
        cls,
        queries: Sequence[str],
        categories: Optional[Sequence[str]] = None,
        default_category: Optional[str] = None,
    ) -> "BatchRequest":
        """Build a request from a decoded body.

        When ``categories`` is omitted and a default category is configured,
        every query is tagged with it.
        """
        if categories is None:
            categories = [default_category] * len(queries) if default_category else []
        return cls(queries=list(queries), categories=list(categories))

    def validate(self) -> None:
        if len(self.queries) != len(self.categories):
            raise BatchValidationError("queries and categories count mismatch")

    def __len__(self) -> int:
        return len(self.queries)


@dataclass(frozen=True, slots=True)
class RouteConfig:
    """Provider search scope resolved for a category."""

    category: str
    scope_id: str
    source: str  # name of the configuration value scope_id was read from


class ItemStatus(str, Enum):
    SUCCEEDED = "succeeded"
    EMPTY = "empty"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True)
class ItemOutcome:
    index: int
    query: str
    category: str
    status: ItemStatus
    reason: Optional[str] = None
    count: int = 0


class ResultMap:
    """Query -> image URLs, safe to write from concurrent workers.

    Only the insert itself is locked; ``snapshot`` returns a read-only copy
    once dispatch has joined.
    """

    def __init__(self) -> None:
        self._data: Dict[str, List[str]] = {}
        self._lock = threading.Lock()

    def record(self, query: str, urls: Sequence[str]) -> None:
        with self._lock:
            self._data[query] = list(urls)

    def snapshot(self) -> Mapping[str, List[str]]:
        with self._lock:
            return MappingProxyType({q: list(u) for q, u in self._data.items()})

    def __contains__(self, query: object) -> bool:
        with self._lock:
            return query in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


@dataclass(slots=True)
class BatchOutcome:
    results: Mapping[str, List[str]]
    items: List[ItemOutcome] = field(default_factory=list)

    def count(self, status: ItemStatus) -> int:
        return sum(1 for item in self.items if item.status == status)
