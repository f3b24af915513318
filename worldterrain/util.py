"""Small helpers: a process-wide integer random source, clocks and number text."""

from __future__ import annotations

import random
import time

# The generator behaves like a C library rand() with a 15-bit range.
_RAND_MAX = 0x7FFF

_rng = random.Random(1)


def seed_random(seed: int) -> None:
    """Reseed the shared random source used by :func:`random_int`."""
    _rng.seed(seed)


def random_int(low: int, high: int) -> int:
    """Return ``rand() % (high - low + 1) + low`` from the shared random source.

    Raises ValueError when the span ``high - low + 1`` is zero.
    """
    span = high - low + 1
    if span == 0:
        raise ValueError(f"empty range: low={low}, high={high}")
    return _rng.randint(0, _RAND_MAX) % abs(span) + low


def current_time_millis() -> int:
    """Milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def trim_string(text: str) -> str:
    """Drop trailing zeros after a decimal point, keeping one digit after it."""
    if "." not in text:
        return text
    while len(text) > 1 and text[-2] != "." and text[-1] == "0":
        text = text[:-1]
    return text