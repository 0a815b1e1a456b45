from __future__ import annotations
import logging
import time
from typing import Any, Callable

from langtrend.domain.interfaces import ICacheStore

log = logging.getLogger(__name__)


class InMemoryCache(ICacheStore):
    """
    Concrete implementation of ICacheStore backed by a dict.

    Each entry remembers its own expiry time. An expired entry is dropped
    when it is read, and every write sweeps out whatever else has expired.
    The clock is injected so tests can move time forward without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock   = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            log.debug("Cache entry expired: %s", key)
            del self._entries[key]
            return None
        return value

    def put(self, key: str, value: Any, ttl: float) -> None:
        now = self._clock()
        self._sweep(now)
        self._entries[key] = (now + ttl, value)

    def _sweep(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for k in expired:
            del self._entries[k]
        if expired:
            log.debug("Swept %d expired cache entries", len(expired))

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
