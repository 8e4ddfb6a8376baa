"""Player name normalization for joining signals to the live feed."""

from __future__ import annotations

import re
import unicodedata

_NON_ALPHA_RE = re.compile(r"[^a-z]")


def normalize_player_name(name: str) -> str:
    """Collapse a player name to a join key.

    "Dāvis Bertāns", "Davis Bertans" and "davis-bertans" all map to
    "davisbertans". Two different players with the same key will collide.
    """
    decomposed = unicodedata.normalize("NFKD", name or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALPHA_RE.sub("", stripped.lower())
