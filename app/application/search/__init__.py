from .credential_pool import CredentialPool
from .category_router import CategoryRouter
from .search_client import SearchClient
from .throttle import FixedDelayThrottle, IntervalThrottle, NoThrottle, build_throttle

__all__ = [
    "CredentialPool",
    "CategoryRouter",
    "SearchClient",
    "FixedDelayThrottle",
    "IntervalThrottle",
    "NoThrottle",
    "build_throttle",
]
