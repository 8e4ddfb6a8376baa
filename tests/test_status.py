"""Tests for live status derivation."""

from __future__ import annotations

import pytest

from prop_tracker.live.models import GameStatus, SignalStatus
from prop_tracker.live.status import derive_signal_status
from prop_tracker.signals.models import Side


class TestDeriveSignalStatus:
    def test_final_over_hit(self):
        assert derive_signal_status(GameStatus.FINAL, Side.OVER, 2.5, 3) is SignalStatus.HIT

    def test_final_under_miss(self):
        assert derive_signal_status(GameStatus.FINAL, Side.UNDER, 2.5, 3) is SignalStatus.MISS

    def test_final_over_push(self):
        assert derive_signal_status(GameStatus.FINAL, Side.OVER, 3, 3) is SignalStatus.PUSH

    def test_final_under_push(self):
        assert derive_signal_status(GameStatus.FINAL, Side.UNDER, 3, 3) is SignalStatus.PUSH

    def test_final_over_miss(self):
        assert derive_signal_status(GameStatus.FINAL, Side.OVER, 2.5, 1) is SignalStatus.MISS

    def test_final_under_hit(self):
        assert derive_signal_status(GameStatus.FINAL, Side.UNDER, 2.5, 1) is SignalStatus.HIT

    @pytest.mark.parametrize("side", [Side.OVER, Side.UNDER])
    @pytest.mark.parametrize("value", [0, 3, 10])
    def test_scheduled(self, side, value):
        assert derive_signal_status(GameStatus.SCHEDULED, side, 2.5, value) is SignalStatus.SCHEDULED

    @pytest.mark.parametrize("side", [Side.OVER, Side.UNDER])
    @pytest.mark.parametrize("value", [0, 3, 10])
    def test_live(self, side, value):
        assert derive_signal_status(GameStatus.LIVE, side, 2.5, value) is SignalStatus.TRACKING
