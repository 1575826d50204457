from .credential_pool import ICredentialPool
from .category_router import ICategoryRouter
from .image_search import IImageSearchProvider, ProviderResponse
from .throttle import IThrottle
from .search_adapters import ISearchAdapters

__all__ = [
    "ICredentialPool",
    "ICategoryRouter",
    "IImageSearchProvider",
    "ProviderResponse",
    "IThrottle",
    "ISearchAdapters",
]
