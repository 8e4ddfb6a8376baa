"""Detect signal transitions between consecutive reconciliation passes.

Two snapshots are compared: the statuses and live 3PM values seen on the last
completed pass, and those of the current pass. The diff yields discrete
events:

* ``flash``: a signal went from tracking to hit or miss
* ``tick``: a signal's live 3PM strictly increased

Events are short-lived display cues. ``EventBoard`` stores them with a
timestamp and drops expired ones whenever it is read, so no timers are needed.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping

from prop_tracker.common.types import Clock
from prop_tracker.live.models import SignalStatus
from prop_tracker.signals.models import EnrichedSignal

FLASH_DURATION_SECONDS = 1.5
TICK_DURATION_SECONDS = 0.4


class TransitionKind(Enum):
    FLASH = "flash"
    TICK = "tick"


@dataclass(frozen=True)
class TransitionEvent:
    signal_id: str
    kind: TransitionKind
    status: SignalStatus | None = None  # HIT or MISS for flashes


@dataclass(frozen=True)
class SignalSnapshot:
    statuses: Mapping[str, SignalStatus] = field(default_factory=dict)
    stats: Mapping[str, int] = field(default_factory=dict)

    @classmethod
    def from_signals(
        cls, signals: Iterable[EnrichedSignal], previous: SignalSnapshot | None = None,
    ) -> SignalSnapshot:
        """Build the next snapshot.

        Signals missing from this pass keep their last known values, and a
        signal without a live stat keeps its previous stat.
        """
        statuses = dict(previous.statuses) if previous else {}
        stats = dict(previous.stats) if previous else {}
        for s in signals:
            statuses[s.signal_id] = s.signal_status
            if s.live_three_pointers_made is not None:
                stats[s.signal_id] = s.live_three_pointers_made
        return cls(statuses=statuses, stats=stats)


def diff_snapshots(previous: SignalSnapshot, current: SignalSnapshot) -> list[TransitionEvent]:
    """Events implied by moving from ``previous`` to ``current``."""
    events: list[TransitionEvent] = []
    for signal_id, status in current.statuses.items():
        old_status = previous.statuses.get(signal_id)
        if old_status is SignalStatus.TRACKING and status in (SignalStatus.HIT, SignalStatus.MISS):
            events.append(TransitionEvent(signal_id, TransitionKind.FLASH, status))

    for signal_id, value in current.stats.items():
        old_value = previous.stats.get(signal_id)
        if old_value is not None and value > old_value:
            events.append(TransitionEvent(signal_id, TransitionKind.TICK))
    return events


class TransitionDetector:
    """Remembers the last completed pass and reports edges against it.

    Only call ``observe`` with the output of a finished reconciliation. A failed
    or abandoned fetch must not reach the detector.
    """

    def __init__(self) -> None:
        self._snapshot = SignalSnapshot()

    @property
    def snapshot(self) -> SignalSnapshot:
        return self._snapshot

    def observe(self, signals: Iterable[EnrichedSignal]) -> list[TransitionEvent]:
        current = SignalSnapshot.from_signals(signals, self._snapshot)
        events = diff_snapshots(self._snapshot, current)
        self._snapshot = current
        return events

    def reset(self) -> None:
        self._snapshot = SignalSnapshot()


@dataclass(frozen=True)
class _TimedEvent:
    event: TransitionEvent
    expires_at: float


class EventBoard:
    """Holds active transition events until their display duration runs out."""

    def __init__(
        self,
        clock: Clock = time.monotonic,
        flash_seconds: float = FLASH_DURATION_SECONDS,
        tick_seconds: float = TICK_DURATION_SECONDS,
    ) -> None:
        self._clock = clock
        self._durations = {
            TransitionKind.FLASH: flash_seconds,
            TransitionKind.TICK: tick_seconds,
        }
        self._events: list[_TimedEvent] = []

    def post(self, events: Iterable[TransitionEvent]) -> None:
        now = self._clock()
        for event in events:
            self._events.append(_TimedEvent(event, now + self._durations[event.kind]))

    def _prune(self) -> None:
        now = self._clock()
        self._events = [e for e in self._events if e.expires_at > now]

    def active(self) -> list[TransitionEvent]:
        self._prune()
        return [e.event for e in self._events]

    def flashes(self) -> dict[str, SignalStatus]:
        """signal_id -> HIT/MISS for signals currently flashing."""
        return {
            e.signal_id: e.status
            for e in self.active()
            if e.kind is TransitionKind.FLASH and e.status is not None
        }

    def ticks(self) -> set[str]:
        return {e.signal_id for e in self.active() if e.kind is TransitionKind.TICK}
