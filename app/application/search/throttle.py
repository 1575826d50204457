"""Politeness policies applied around provider search attempts.

The dispatcher calls ``before_attempt`` right after taking a concurrency
slot and ``after_attempt`` right before giving it back, whatever the
outcome of the search.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from app.core.exceptions import ConfigurationError


class NoThrottle:
    """Never pauses."""

    async def before_attempt(self) -> None:
        return None

    async def after_attempt(self) -> None:
        return None


@dataclass
class FixedDelayThrottle:
    """Hold the worker's slot for ``delay`` seconds after every attempt."""

    delay: float = 1.0
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    async def before_attempt(self) -> None:
        return None

    async def after_attempt(self) -> None:
        if self.delay > 0:
            await self.sleep(self.delay)


@dataclass
class IntervalThrottle:
    """Space attempt starts at least ``min_interval`` seconds apart.

    Shared by all workers; waiting happens under an asyncio lock so starts
    are serialized through the gate.
    """

    min_interval: float = 1.0
    clock: Callable[[], float] = time.monotonic
    last_wait: float = 0.0
    _last_start: float | None = None
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def before_attempt(self) -> None:
        """Wait for the gate; the time waited is kept in ``last_wait``."""
        if self.min_interval <= 0:
            self.last_wait = 0.0
            return
        async with self._lock:
            now = self.clock()
            wait_time = 0.0
            if self._last_start is not None:
                elapsed = now - self._last_start
                if elapsed < self.min_interval:
                    wait_time = self.min_interval - elapsed
                    await asyncio.sleep(wait_time)
                    now = now + wait_time
            self._last_start = now
            self.last_wait = wait_time

    async def after_attempt(self) -> None:
        return None


def build_throttle(mode: str, interval: float):
    """Create the throttle selected by configuration."""
    mode = (mode or "none").strip().lower()
    if mode == "delay":
        return FixedDelayThrottle(delay=interval)
    if mode == "interval":
        return IntervalThrottle(min_interval=interval)
    if mode == "none":
        return NoThrottle()
    raise ConfigurationError(f"Unknown throttle mode: {mode}", config_key="THROTTLE_MODE")
