from __future__ import annotations

from typing import List, Optional, Protocol

from app.application.models import RouteConfig


class ICategoryRouter(Protocol):
    """Maps a caller-supplied category label to a provider search scope."""

    def resolve(self, category: str) -> Optional[RouteConfig]:
        """Return the route for the category, or None when it cannot be used."""
        ...

    def available_categories(self) -> List[str]:
        """Labels that currently resolve to a usable route."""
        ...
