from __future__ import annotations

from typing import Protocol


class IThrottle(Protocol):
    """Politeness policy applied around every provider search attempt."""

    async def before_attempt(self) -> None:
        ...

    async def after_attempt(self) -> None:
        ...
