from __future__ import annotations

import logging
import threading
from typing import Iterable, Tuple

from app.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def mask_credential(credential: str) -> str:
    """Keep only the last 4 characters for logs."""
    if len(credential) <= 4:
        return "****"
    return f"****{credential[-4:]}"


class CredentialPool:
    """Round-robin pool of provider credentials.

    Bad credentials are never evicted: rotation always advances, so a key
    that hit its quota is simply tried again on the next full cycle.
    """

    def __init__(self, credentials: Iterable[str]) -> None:
        keys: Tuple[str, ...] = tuple(
            c.strip() for c in credentials if c is not None and c.strip()
        )
        if not keys:
            raise ConfigurationError(
                "No provider credentials configured", config_key="GOOGLE_KEYS"
            )
        self._credentials = keys
        self._cursor = 0
        self._lock = threading.Lock()
        logger.info("Credential pool ready with %d key(s)", len(keys))

    @property
    def size(self) -> int:
        return len(self._credentials)

    def __len__(self) -> int:
        return len(self._credentials)

    def next(self) -> str:
        with self._lock:
            credential = self._credentials[self._cursor]
            self._cursor = (self._cursor + 1) % len(self._credentials)
        return credential
