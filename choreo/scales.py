"""Logarithmic scale used to discretize the movement score."""

from __future__ import annotations
from dataclasses import dataclass
import logging
import math
from typing import Tuple

logger = logging.getLogger(__name__)


def round_half_up(x: float) -> int:
    """Round like a score sheet does: 2.5 -> 3 (not banker's rounding)."""
    return int(math.floor(x + 0.5))


@dataclass(frozen=True)
class LogScale:
    """Maps [lo, hi] onto [r0, r1] through log(x).

    The domain floor is forced to 1 so zero minima stay defined. A degenerate
    domain (hi <= lo) maps everything to r0.
    """
    domain: Tuple[float, float]
    range: Tuple[float, float] = (1.0, 5.0)

    @classmethod
    def fit(cls, maximum: float, out: Tuple[float, float] = (1.0, 5.0)) -> "LogScale":
        return cls(domain=(1.0, max(1.0, float(maximum))), range=out)

    @property
    def degenerate(self) -> bool:
        lo, hi = self.domain
        return hi <= lo

    def __call__(self, x: float) -> float:
        r0, r1 = self.range
        if self.degenerate:
            return r0
        lo, hi = self.domain
        x = min(max(float(x), lo), hi)
        t = (math.log(x) - math.log(lo)) / (math.log(hi) - math.log(lo))
        return r0 + t * (r1 - r0)

    def discrete(self, x: float) -> int:
        """Scaled value rounded half up and clamped into the integer range."""
        r0, r1 = self.range
        return min(max(round_half_up(self(x)), int(r0)), int(r1))
