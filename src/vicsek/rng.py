from __future__ import annotations

import random
import time
from typing import Optional


class DeterministicRng:
    """Seeded random stream owned by one world.

    ``seed=None`` draws the seed from the clock; the chosen value is kept on
    ``seed`` so a run can be replayed.
    """

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = time.time_ns() & 0xFFFFFFFFFFFFFFFF
        self._seed = int(seed)
        self._random = random.Random(self._seed)

    @property
    def seed(self) -> int:
        return self._seed

    def next_float(self) -> float:
        return self._random.random()

    def next_gauss(self, sigma: float) -> float:
        if sigma <= 0.0:
            return 0.0
        return self._random.gauss(0.0, sigma)
