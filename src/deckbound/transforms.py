"""
Value transforms between raw 7-bit MIDI values and engine values.

Pure functions only; handlers in deckbound.binding decide where the results go.
"""

import math

# Jog wheels report relative motion around this center value
JOG_CENTER = 64

# 14-bit midpoint: tempo slider centre maps to rate 0
HIGH_RES_CENTER = 0x2000
HIGH_RES_MAX = 0x3FFF

BUTTON_PRESSED = 0x7F


def pad_number(address: int) -> int:
    """
    Pad number (1-based) from a pad address.

    Pad addresses carry the pad in the low nibble: 0x05 → 6, 0x30 → 1.
    """
    return (address & 0x0F) + 1


def button_value(value: int) -> float:
    """Press (any non-zero velocity) → 1.0, release → 0.0."""
    return 1.0 if value > 0 else 0.0


def combine_high_res(msb: int, lsb: int) -> int:
    """
    Combine two 7-bit fragments into a 14-bit value in [0, 0x3FFF].

    Args:
        msb: Most significant 7 bits
        lsb: Least significant 7 bits
    """
    return ((msb & 0x7F) << 7) + (lsb & 0x7F)


def tempo_rate(value: int) -> float:
    """
    Map a 14-bit tempo slider position to an engine rate adjustment.

    The result is inverted so that pushing the slider up on the hardware moves
    the on-screen slider up as well, whatever the host's rate direction
    preference is.
    """
    return 1 - (value / HIGH_RES_CENTER)


def jog_delta(value: int) -> int:
    """Signed jog motion: below 64 is reverse, above is forward."""
    return value - JOG_CENTER


def next_tempo_range(current: float, ranges: list[float]) -> float:
    """
    Next rate range after `current`, wrapping around.

    Values not in `ranges` restart the cycle at the first entry.

    >>> next_tempo_range(0.25, [0.06, 0.10, 0.16, 0.25])
    0.06
    """
    for i, candidate in enumerate(ranges):
        if math.isclose(current, candidate, rel_tol=1e-9, abs_tol=1e-9):
            return ranges[(i + 1) % len(ranges)]
    return ranges[0]
