"""
Runtime context: the random source and clock everything else reads.

The reducer never calls time.time() or random.random() directly; it goes
through a Runtime so tests can pin both.

Usage:
    runtime = Runtime(seed=7)                      # reproducible dice
    runtime = Runtime(random=lambda: 0.1, clock=lambda: 1000)
"""

import random as _random
import time
from typing import Callable

RandomSource = Callable[[], float]
Clock = Callable[[], int]

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def system_clock() -> int:
    """Wall clock in integer milliseconds."""
    return int(time.time() * 1000)


class Runtime:
    """Swappable random source (floats in [0, 1)) and millisecond clock."""

    def __init__(
        self,
        random: RandomSource | None = None,
        clock: Clock | None = None,
        seed: int | None = None,
    ):
        if random is None:
            random = _random.Random(seed).random
        self._random = random
        self._clock = clock or system_clock

    def random(self) -> float:
        return self._random()

    def now(self) -> int:
        return int(self._clock())

    def choice(self, options):
        """Uniform pick from a non-empty sequence."""
        index = int(self.random() * len(options))
        return options[min(index, len(options) - 1)]


def to_base36(value: int) -> str:
    """Encode a non-negative integer in lowercase base 36."""
    if value <= 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def fraction_to_base36(value: float, digits: int = 6) -> str:
    """First `digits` base-36 digits after the point of a float in [0, 1)."""
    out = []
    fraction = value
    for _ in range(digits):
        if fraction <= 0:
            break
        fraction *= 36
        digit = int(fraction)
        out.append(_BASE36[digit])
        fraction -= digit
    return "".join(out)
