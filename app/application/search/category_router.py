from __future__ import annotations

import logging
import os
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from app.application.models import RouteConfig

logger = logging.getLogger(__name__)


class CategoryRouter:
    """Resolve category labels to provider search scopes.

    The table is fixed at construction. A label that is unknown, or whose
    configuration value is empty, resolves to None and the caller skips it.
    """

    def __init__(self, routes: Mapping[str, RouteConfig]) -> None:
        self._routes: Mapping[str, RouteConfig] = MappingProxyType(dict(routes))

    @classmethod
    def from_environment(
        cls,
        category_routes: Mapping[str, str],
        environ: Optional[Mapping[str, str]] = None,
    ) -> "CategoryRouter":
        """Build the router from label -> env var name, reading scopes once."""
        env = os.environ if environ is None else environ
        routes: Dict[str, RouteConfig] = {}
        for label, env_name in category_routes.items():
            label = label.strip()
            scope_id = (env.get(env_name) or "").strip()
            if not scope_id:
                logger.warning(
                    "Category '%s' disabled: %s is not set", label, env_name
                )
                continue
            routes[label] = RouteConfig(category=label, scope_id=scope_id, source=env_name)
        logger.info("Category router ready: %d/%d categories usable", len(routes), len(category_routes))
        return cls(routes)

    def resolve(self, category: str) -> Optional[RouteConfig]:
        return self._routes.get((category or "").strip())

    def available_categories(self) -> List[str]:
        return sorted(self._routes)
