from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class ProviderResponse:
    """Raw answer from the search provider."""

    status: int
    body: str


class IImageSearchProvider(Protocol):
    """Adapter performing one raw image-search call against the provider.

    Implementations may call Google Custom Search, Bing, etc. They must raise
    ``ProviderTransportError`` when no HTTP answer was obtained (connection
    error, timeout) and otherwise return the status and body untouched; the
    application layer classifies the answer.
    """

    async def fetch(
        self, query: str, *, credential: str, scope_id: str, limit: int
    ) -> ProviderResponse:
        ...
