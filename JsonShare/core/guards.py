"""
Request guards applied in front of the file routes.

A fixed-window counter keeps each client IP within `RATE_LIMIT` requests per
`RATE_WINDOW_SECONDS`, and a user-agent filter turns away self-declared
crawlers. Both raise `JsonShareError` subclasses so the API renders them like
any other rejection.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple

from .errors import BotDetected, RateLimited

log = logging.getLogger("jsonshare.guards")


@dataclass
class _Window:
    started_at: float
    count: int = 0


class RateLimiter:
    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: Dict[str, _Window] = {}
        self._last_sweep = clock()

    @property
    def enabled(self) -> bool:
        return self.limit > 0 and self.window_seconds > 0

    def hit(self, client_id: str) -> None:
        if not self.enabled:
            return
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._evict_expired(now)
                self._last_sweep = now
            window = self._windows.get(client_id)
            if window is None or now - window.started_at >= self.window_seconds:
                window = self._windows[client_id] = _Window(started_at=now)
            if window.count >= self.limit:
                retry_after = math.ceil(window.started_at + self.window_seconds - now)
                log.warning("Rate limit exceeded for %s", client_id)
                raise RateLimited(retry_after=max(retry_after, 1))
            window.count += 1

    def _evict_expired(self, now: float) -> None:
        expired = [
            client_id
            for client_id, window in self._windows.items()
            if now - window.started_at >= self.window_seconds
        ]
        for client_id in expired:
            del self._windows[client_id]

    @property
    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


class BotFilter:
    def __init__(self, markers: Iterable[str]) -> None:
        self.markers: Tuple[str, ...] = tuple(m.lower() for m in markers if m)

    def is_bot(self, user_agent: Optional[str]) -> bool:
        agent = (user_agent or "").lower()
        return any(marker in agent for marker in self.markers)

    def check(self, user_agent: Optional[str]) -> None:
        if self.is_bot(user_agent):
            log.info("Rejected bot user agent %r", user_agent)
            raise BotDetected()
