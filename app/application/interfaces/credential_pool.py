from __future__ import annotations

from typing import Protocol


class ICredentialPool(Protocol):
    """Rotating set of provider credentials."""

    @property
    def size(self) -> int:
        ...

    def next(self) -> str:
        """Return the next credential in round-robin order."""
        ...
