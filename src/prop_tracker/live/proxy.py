"""Live scores proxy: cached access to the score feed with stale fallback."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable

import httpx

from prop_tracker.common.types import Clock
from prop_tracker.config import get_settings
from prop_tracker.live.cache import TTLCache
from prop_tracker.live.feed import fetch_live_scores
from prop_tracker.live.models import LiveScoresPayload

logger = logging.getLogger(__name__)

_CACHE_KEY = "live-scores"

Fetcher = Callable[[], Awaitable[LiveScoresPayload]]


@dataclass(frozen=True)
class ProxyResponse:
    payload: LiveScoresPayload
    status_code: int = 200

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class LiveScoresProxy:
    """Serve live scores, hitting the feed at most once per TTL.

    On a failed refresh the last good payload is served whatever its age. With
    nothing cached, an empty payload with status 502 is returned. Errors never
    propagate to the caller.
    """

    def __init__(
        self,
        fetcher: Fetcher = fetch_live_scores,
        cache: TTLCache[LiveScoresPayload] | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self._fetch = fetcher
        if cache is None:
            settings = get_settings()
            cache = TTLCache(
                ttl_seconds=settings.cache_ttl_seconds,
                capacity=settings.cache_capacity,
                clock=clock,
            )
        self._cache = cache

    async def get(self) -> ProxyResponse:
        cached = self._cache.get(_CACHE_KEY)
        if cached is not None:
            return ProxyResponse(cached)

        try:
            payload = await self._fetch()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Live scores fetch failed: %s", exc)
            stale = self._cache.get_stale(_CACHE_KEY)
            if stale is not None:
                logger.info(
                    "Serving stale live scores (%.0fs old)", self._cache.age(_CACHE_KEY) or 0.0,
                )
                return ProxyResponse(stale)
            return ProxyResponse(
                LiveScoresPayload(games=(), timestamp=datetime.now(timezone.utc).isoformat()),
                status_code=502,
            )

        self._cache.set(_CACHE_KEY, payload)
        return ProxyResponse(payload)
