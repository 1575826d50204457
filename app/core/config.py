"""
Application configuration using Pydantic Settings
"""

import json
from typing import Dict, List, Optional, Union
from pydantic_settings import BaseSettings
from pydantic import field_validator


# Reference deployment categories: label -> name of the env var holding its cx
DEFAULT_CATEGORY_ROUTES: Dict[str, str] = {
    "Недвижимость": "CX_REAL_ESTATE",
    "Транспорт": "CX_TRANSPORT",
    "Спец/сельхоз техника": "CX_SPECIAL_TECH",
    "Оборудование": "CX_EQUIPMENT",
    "Строительство и ремонт": "CX_CONSTRUCTION",
    "Бизнес": "CX_BUSINESS",
    "Одежда и обувь": "CX_FASHION",
    "Товары для дома": "CX_HOME_GOODS",
    "Бытовая и оргтехника": "CX_ELECTRONICS",
    "Иное": "CX_MISC",
}


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # API Settings
    api_title: str = "Image Batch Search API"
    api_description: str = "Concurrent image search for batches of categorized queries"
    api_version: str = "1.0.0"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8888
    debug: bool = False
    static_dir: str = "static"

    # CORS Settings
    cors_allow_origin: str = "*"
    cors_allow_methods: list = ["POST", "GET", "OPTIONS"]
    cors_allow_headers: list = ["Content-Type"]

    # Provider credentials (GOOGLE_KEYS=key1,key2,...)
    google_keys: Union[List[str], str] = []

    # Category routing: label -> env var name holding the search scope (cx)
    category_routes: Union[Dict[str, str], str] = dict(DEFAULT_CATEGORY_ROUTES)
    # Category applied when a request omits "categories" entirely
    default_category: Optional[str] = None

    @field_validator("google_keys")
    @classmethod
    def parse_google_keys(cls, v):
        """Parse provider keys from a comma-separated string to list.

        Example:
            >>> parse_google_keys("k1, k2,,k3")
            ['k1', 'k2', 'k3']
        """
        if isinstance(v, str):
            return [key.strip() for key in v.split(",") if key.strip()]
        return [str(key).strip() for key in v if str(key).strip()]

    @field_validator("category_routes")
    @classmethod
    def parse_category_routes(cls, v):
        """Accept the routing table as a dict or a JSON object string."""
        if isinstance(v, str):
            if not v.strip():
                return dict(DEFAULT_CATEGORY_ROUTES)
            parsed = json.loads(v)
            if not isinstance(parsed, dict):
                raise ValueError("CATEGORY_ROUTES must be a JSON object")
            v = parsed
        return {str(label).strip(): str(env).strip() for label, env in v.items()}

    # Logging Settings
    log_level: str = "INFO"
    log_format: str = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    log_file: str = "data/app.log"  # empty disables file logging

    # Search Provider Settings (Google Custom Search, image mode)
    search_endpoint: str = "https://www.googleapis.com/customsearch/v1"
    search_timeout: float = 20.0  # per attempt
    search_result_limit: int = 5
    search_query_hint: str = "photo"  # appended to every query
    search_img_type: str = "photo"
    search_img_size: str = "large"
    search_img_color_type: str = "color"

    # Batch Dispatch Settings
    batch_max_concurrency: int = 4
    batch_timeout: float | None = None  # None = batches always run to completion

    # Politeness throttle: "delay" (pause after each attempt), "interval"
    # (space attempt starts apart) or "none"
    throttle_mode: str = "delay"
    throttle_interval: float = 1.0

    @field_validator("throttle_mode")
    @classmethod
    def check_throttle_mode(cls, v: str) -> str:
        mode = (v or "").strip().lower()
        if mode not in ("delay", "interval", "none"):
            raise ValueError(f"Unknown throttle mode: {v!r}")
        return mode

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        # Scope ids (CX_*) and other unrelated env vars live alongside ours
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()
