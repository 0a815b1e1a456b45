from __future__ import annotations

import logging

from langtrend.domain.entities import UserAnalysis
from langtrend.domain.interfaces import ICacheStore
from .aggregator import UserAnalysisAggregator

log = logging.getLogger(__name__)

CACHE_PREFIX= "analysis:"
DEFAULT_TTL= 30 * 60


def cache_key(username: str) -> str:
    """GitHub logins are case-insensitive, so the cache key is too."""
    return CACHE_PREFIX + username.lower()


class CachedAnalysisService:
    """
    The top-level use case: analyze a user, reusing a fresh cached report.

    Receives the aggregator and the cache via constructor injection.
    Knows when to consult the cache but not how either one works.
    """

    def __init__(self, aggregator: UserAnalysisAggregator, cache: ICacheStore, ttl: float = DEFAULT_TTL) -> None:
        self._aggregator = aggregator
        self._cache      = cache
        self._ttl        = ttl

    async def analyze_user(self, username: str, refresh: bool = False) -> UserAnalysis:
        """
        Return the report for `username`.

        refresh=True evicts any cached copy first. Failures are never
        cached; the next call goes back to GitHub.
        """
        key = cache_key(username)
        if refresh:
            self._cache.delete(key)
        else:
            cached = self._cache.get(key)
            if cached is not None:
                log.info("Cache hit | %s", key)
                return cached

        log.info("Cache miss | %s", key)
        analysis = await self._aggregator.analyze_user(username)
        self._cache.put(key, analysis, self._ttl)
        return analysis
