"""Fixed-interval polling of the live scores proxy."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from prop_tracker.live.models import LiveScoresPayload
from prop_tracker.live.proxy import LiveScoresProxy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollResult:
    payload: LiveScoresPayload
    connected: bool


def should_keep_polling(payload: LiveScoresPayload) -> bool:
    """Polling stops once there are no games or every game is final."""
    return bool(payload.games) and not payload.all_final


async def poll_live_scores(
    proxy: LiveScoresProxy,
    on_update: Callable[[PollResult], None],
    interval_seconds: float,
    max_polls: int | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> int:
    """Poll until the slate is done (or ``max_polls`` is reached).

    ``on_update`` runs once per completed poll. A poll that is cancelled
    mid-fetch never reaches it. A disconnected poll (proxy status >= 400)
    is reported but does not end the loop.

    Returns:
        Number of completed polls.
    """
    polls = 0
    while True:
        response = await proxy.get()
        polls += 1
        result = PollResult(payload=response.payload, connected=response.ok)
        on_update(result)

        if result.connected and not should_keep_polling(result.payload):
            logger.info("All games final or none scheduled; stopping after %d poll(s)", polls)
            break
        if max_polls is not None and polls >= max_polls:
            break
        await sleep(interval_seconds)
    return polls
