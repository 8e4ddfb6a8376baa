"""Tests for player name normalization."""

from __future__ import annotations

from prop_tracker.live.names import normalize_player_name


class TestNormalizePlayerName:
    def test_diacritics(self):
        assert normalize_player_name("Dāvis Bertāns") == normalize_player_name("Davis Bertans")

    def test_punctuation_and_suffix_spacing(self):
        assert normalize_player_name("De'Aaron Fox") == "deaaronfox"
        assert normalize_player_name("Kelly Oubre Jr.") == "kellyoubrejr"

    def test_case(self):
        assert normalize_player_name("LUKA DONČIĆ") == "lukadoncic"

    def test_empty(self):
        assert normalize_player_name("") == ""

    def test_brackets_and_digits_dropped(self):
        assert normalize_player_name("Ty [/x] Jr 2") == "tyxjr"
