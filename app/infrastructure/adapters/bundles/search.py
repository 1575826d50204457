from __future__ import annotations

import os
from types import SimpleNamespace
from typing import Mapping, Optional

from app.application.interfaces.search_adapters import ISearchAdapters
from app.application.search import CategoryRouter, CredentialPool, build_throttle
from app.infrastructure.adapters import GoogleCustomSearchProvider
from app.core.config import Settings, settings as default_settings


def get_search_adapter_bundle(
    *,
    config: Optional[Settings] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ISearchAdapters:
    """Provide the adapters container for batch image search.

    Raises ConfigurationError when no provider credentials are configured.
    Category scopes are read from the environment once, here.
    """
    cfg = config or default_settings
    return SimpleNamespace(
        credential_pool=CredentialPool(cfg.google_keys),
        category_router=CategoryRouter.from_environment(
            cfg.category_routes, os.environ if environ is None else environ
        ),
        provider=GoogleCustomSearchProvider(
            endpoint=cfg.search_endpoint,
            timeout=cfg.search_timeout,
            img_type=cfg.search_img_type,
            img_size=cfg.search_img_size,
            img_color_type=cfg.search_img_color_type,
        ),
        throttle=build_throttle(cfg.throttle_mode, cfg.throttle_interval),
    )
