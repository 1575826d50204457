from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from app.application.interfaces import IImageSearchProvider, ProviderResponse
from app.core.config import settings
from app.core.exceptions import ProviderTransportError

logger = logging.getLogger(__name__)


class GoogleCustomSearchProvider(IImageSearchProvider):
    """IImageSearchProvider implementation using the Google Custom Search JSON API.

    Returns the raw status/body; quota and error classification is left to
    the SearchClient.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        img_type: Optional[str] = None,
        img_size: Optional[str] = None,
        img_color_type: Optional[str] = None,
    ) -> None:
        self.endpoint = endpoint or settings.search_endpoint
        self.timeout = float(timeout if timeout is not None else settings.search_timeout)
        self.img_type = img_type or settings.search_img_type
        self.img_size = img_size or settings.search_img_size
        self.img_color_type = img_color_type or settings.search_img_color_type

    def build_params(
        self, query: str, *, credential: str, scope_id: str, limit: int
    ) -> dict:
        return {
            "key": credential,
            "cx": scope_id,
            "q": query,
            "searchType": "image",
            "num": str(limit),
            "imgType": self.img_type,
            "imgSize": self.img_size,
            "imgColorType": self.img_color_type,
        }

    async def fetch(
        self, query: str, *, credential: str, scope_id: str, limit: int
    ) -> ProviderResponse:
        params = self.build_params(
            query, credential=credential, scope_id=scope_id, limit=limit
        )
        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.endpoint, params=params) as response:
                    body = await response.text()
                    return ProviderResponse(status=response.status, body=body)
        except asyncio.TimeoutError as e:
            raise ProviderTransportError(
                f"timed out after {self.timeout:.0f}s searching '{query}'"
            ) from e
        except aiohttp.ClientError as e:
            raise ProviderTransportError(f"request failed for '{query}': {e}") from e
