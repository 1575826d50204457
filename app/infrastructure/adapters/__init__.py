from .image_search_google import GoogleCustomSearchProvider

__all__ = [
    "GoogleCustomSearchProvider",
]
