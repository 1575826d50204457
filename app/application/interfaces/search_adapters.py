from __future__ import annotations

from typing import Protocol, runtime_checkable

from .credential_pool import ICredentialPool
from .category_router import ICategoryRouter
from .image_search import IImageSearchProvider
from .throttle import IThrottle


@runtime_checkable
class ISearchAdapters(Protocol):
    credential_pool: ICredentialPool
    category_router: ICategoryRouter
    provider: IImageSearchProvider
    throttle: IThrottle
