from __future__ import annotations

import json
import logging
from typing import List, Optional

from app.application.interfaces import (
    ICredentialPool,
    IImageSearchProvider,
    ProviderResponse,
)
from app.application.models import RouteConfig
from app.application.search.credential_pool import mask_credential
from app.core.exceptions import (
    CredentialsExhaustedError,
    MalformedPayloadError,
    ProviderHTTPError,
    QuotaExceededError,
    RetryableSearchError,
    SearchError,
)

logger = logging.getLogger(__name__)

# Markers the provider puts in error bodies when a key is out of quota
QUOTA_MARKERS = ("quota", "ratelimitexceeded", "userratelimitexceeded")


def is_quota_response(response: ProviderResponse) -> bool:
    if response.status == 429:
        return True
    if response.status == 200:
        return False
    body = (response.body or "").lower()
    return any(marker in body for marker in QUOTA_MARKERS)


def extract_links(body: str, limit: int) -> List[str]:
    """Return up to ``limit`` image links from a search payload, in order."""
    try:
        data = json.loads(body) if body else {}
    except json.JSONDecodeError as e:
        raise MalformedPayloadError(f"invalid provider payload: {e}") from e
    if not isinstance(data, dict):
        raise MalformedPayloadError("provider payload is not a JSON object")

    items = data.get("items") or []
    if not isinstance(items, list):
        raise MalformedPayloadError("provider payload 'items' is not a list")

    links: List[str] = []
    for item in items:
        if len(links) >= limit:
            break
        link = item.get("link") if isinstance(item, dict) else None
        if isinstance(link, str) and link:
            links.append(link)
    return links


class SearchClient:
    """One logical image search, rotating credentials on retryable failures.

    Every search makes at most ``pool.size`` attempts. A ``RetryableSearchError``
    raised by the provider (transport failure, quota) and a quota answer move on
    to the next credential; any other non-200 answer aborts immediately.
    """

    def __init__(self, provider: IImageSearchProvider, pool: ICredentialPool) -> None:
        self.provider = provider
        self.pool = pool

    async def search(self, query: str, route: RouteConfig, limit: int) -> List[str]:
        attempts = self.pool.size
        last_error: Optional[SearchError] = None

        for attempt in range(1, attempts + 1):
            credential = self.pool.next()
            try:
                response = await self.provider.fetch(
                    query, credential=credential, scope_id=route.scope_id, limit=limit
                )
            except RetryableSearchError as e:
                logger.warning(
                    "Retryable error for '%s' with key %s (attempt %d/%d): %s",
                    query,
                    mask_credential(credential),
                    attempt,
                    attempts,
                    e.message,
                )
                last_error = e
                continue

            if is_quota_response(response):
                logger.info(
                    "Key %s rate limited (HTTP %d), rotating (attempt %d/%d)",
                    mask_credential(credential),
                    response.status,
                    attempt,
                    attempts,
                )
                last_error = QuotaExceededError(
                    f"quota exceeded for key {mask_credential(credential)}",
                    status_code=response.status,
                )
                continue

            if response.status != 200:
                logger.error(
                    "Provider error for '%s' in %s: HTTP %d",
                    query,
                    route.category,
                    response.status,
                )
                raise ProviderHTTPError(
                    f"provider error: HTTP {response.status}",
                    status_code=response.status,
                    body=response.body,
                )

            links = extract_links(response.body, limit)
            logger.debug("Found %d image(s) for '%s'", len(links), query)
            return links

        raise CredentialsExhaustedError(attempts, last_error)
