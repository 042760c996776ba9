from __future__ import annotations

from typing import List, Optional, Tuple

DEFAULT_SYMBOL = "\U0001F319"  # crescent moon

# Order matters: first match wins.
PHASE_SYMBOLS: List[Tuple[Tuple[str, ...], str]] = [
    (("new",), "\U0001F311"),
    (("waxing crescent",), "\U0001F312"),
    (("first quarter",), "\U0001F313"),
    (("waxing gibbous",), "\U0001F314"),
    (("full",), "\U0001F315"),
    (("waning gibbous",), "\U0001F316"),
    (("last quarter", "third quarter"), "\U0001F317"),
    (("waning crescent",), "\U0001F318"),
]


def map_phase_to_symbol(phase_name: Optional[str]) -> str:
    """Return the display symbol for ``phase_name``.

    Matching is a case-insensitive substring test. Empty, missing or
    unrecognised names fall back to :data:`DEFAULT_SYMBOL`.
    """
    if not phase_name:
        return DEFAULT_SYMBOL
    phase = phase_name.lower()
    for keywords, symbol in PHASE_SYMBOLS:
        if any(keyword in phase for keyword in keywords):
            return symbol
    return DEFAULT_SYMBOL
