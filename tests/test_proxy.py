"""Tests for the TTL cache and the live scores proxy."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from prop_tracker.live.cache import TTLCache
from prop_tracker.live.models import LiveScoresPayload
from prop_tracker.live.proxy import LiveScoresProxy


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return TTLCache(ttl_seconds=10.0, capacity=2, clock=clock)


def _payload(live_game, stamp="2026-03-15T01:00:00+00:00"):
    return LiveScoresPayload(games=(live_game,), timestamp=stamp)


class TestTTLCache:
    def test_fresh_and_expired(self, cache, clock):
        cache.set("k", 1)
        clock.now += 9.9
        assert cache.get("k") == 1
        clock.now += 0.1
        assert cache.get("k") is None
        assert cache.get_stale("k") == 1
        assert cache.age("k") == pytest.approx(10.0)

    def test_missing(self, cache):
        assert cache.get("nope") is None
        assert cache.get_stale("nope") is None
        assert cache.age("nope") is None

    def test_capacity_evicts_oldest(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        assert len(cache) == 2
        assert cache.get_stale("a") is None
        assert cache.get("c") == 3

    def test_set_refreshes_timestamp(self, cache, clock):
        cache.set("k", 1)
        clock.now += 15
        cache.set("k", 2)
        assert cache.get("k") == 2

    def test_clear(self, cache):
        cache.set("k", 1)
        cache.clear()
        assert len(cache) == 0

    @pytest.mark.parametrize("ttl, capacity", [(0, 1), (-1, 1), (5, 0)])
    def test_invalid_arguments(self, ttl, capacity):
        with pytest.raises(ValueError):
            TTLCache(ttl_seconds=ttl, capacity=capacity)


class TestLiveScoresProxy:
    @pytest.mark.asyncio
    async def test_fetches_once_per_ttl(self, cache, clock, live_game):
        fetcher = AsyncMock(return_value=_payload(live_game))
        proxy = LiveScoresProxy(fetcher=fetcher, cache=cache)

        first = await proxy.get()
        clock.now += 5
        second = await proxy.get()

        assert fetcher.await_count == 1
        assert first.ok and second.ok
        assert second.payload is first.payload

        clock.now += 6
        await proxy.get()
        assert fetcher.await_count == 2

    @pytest.mark.asyncio
    async def test_serves_stale_on_failure(self, cache, clock, live_game):
        good = _payload(live_game)
        fetcher = AsyncMock(side_effect=[good, httpx.ConnectError("down")])
        proxy = LiveScoresProxy(fetcher=fetcher, cache=cache)

        await proxy.get()
        clock.now += 120
        response = await proxy.get()

        assert response.status_code == 200
        assert response.payload is good

    @pytest.mark.asyncio
    async def test_502_with_empty_cache(self, cache):
        fetcher = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
        proxy = LiveScoresProxy(fetcher=fetcher, cache=cache)

        response = await proxy.get()

        assert response.status_code == 502
        assert not response.ok
        assert response.payload.games == ()
        assert response.payload.timestamp

    @pytest.mark.asyncio
    async def test_bad_payload_treated_as_failure(self, cache):
        fetcher = AsyncMock(side_effect=ValueError("invalid JSON"))
        proxy = LiveScoresProxy(fetcher=fetcher, cache=cache)
        response = await proxy.get()
        assert response.status_code == 502

    @pytest.mark.asyncio
    async def test_success_after_failure_refreshes_cache(self, cache, clock, live_game):
        newer = _payload(live_game, stamp="2026-03-15T01:05:00+00:00")
        fetcher = AsyncMock(side_effect=[httpx.ConnectError("down"), newer])
        proxy = LiveScoresProxy(fetcher=fetcher, cache=cache)

        assert (await proxy.get()).status_code == 502
        response = await proxy.get()
        assert response.ok
        assert response.payload is newer
        assert cache.get("live-scores") is newer

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "scoreboard",
        [
            {"scoreboard": "maintenance"},
            {"scoreboard": {"games": ["oops"]}},
            {"scoreboard": {"games": [{"gameId": "0022500901", "gameStatus": 3,
                                        "homeTeam": "GSW", "awayTeam": "LAL"}]}},
        ],
    )
    async def test_malformed_feed_does_not_raise(self, cache, scoreboard):
        instance = AsyncMock()
        instance.get_json = AsyncMock(return_value=scoreboard)
        instance.__aenter__ = AsyncMock(return_value=instance)
        instance.__aexit__ = AsyncMock(return_value=False)

        with patch("prop_tracker.live.feed.HttpClient", return_value=instance):
            response = await LiveScoresProxy(cache=cache).get()

        assert response.ok
        assert all(g.home_team.tricode == "" for g in response.payload.games)
