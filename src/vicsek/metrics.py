from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

from .agent import Agent


@dataclass(slots=True)
class StepMetrics:
    step: int
    particle_count: int
    average_normalized_velocity: float
    neighbor_checks: int
    mean_neighbors: float
    index_knots: int
    tick_duration_ms: float = 0.0


def average_normalized_velocity(agents: Sequence[Agent]) -> float:
    """Order parameter: length of the mean unit heading vector.

    1.0 when every agent points the same way, close to 0 for random headings
    and exactly 0.0 for an empty population.
    """
    count = len(agents)
    if count == 0:
        return 0.0
    sum_x = 0.0
    sum_y = 0.0
    for agent in agents:
        sum_x += math.cos(agent.heading)
        sum_y += math.sin(agent.heading)
    return min(1.0, math.hypot(sum_x, sum_y) / count)


def create_metrics(
    step: int,
    agents: Sequence[Agent],
    neighbor_checks: int,
    index_knots: int,
    duration_ms: float,
) -> StepMetrics:
    count = len(agents)
    return StepMetrics(
        step=step,
        particle_count=count,
        average_normalized_velocity=average_normalized_velocity(agents),
        neighbor_checks=neighbor_checks,
        mean_neighbors=neighbor_checks / count if count else 0.0,
        index_knots=index_knots,
        tick_duration_ms=duration_ms,
    )


class OrderParameterSeries:
    """Order-parameter samples of one run, used to spot the steady state."""

    def __init__(self) -> None:
        self._values: List[float] = []

    def __len__(self) -> int:
        return len(self._values)

    @property
    def values(self) -> List[float]:
        return list(self._values)

    def append(self, value: float) -> None:
        self._values.append(value)

    def clear(self) -> None:
        self._values.clear()

    def average_last(self, count: int) -> float:
        if count <= 0 or not self._values:
            return 0.0
        tail = self._values[-count:]
        return sum(tail) / len(tail)

    def is_stable(self, window: int, tolerance: float) -> bool:
        """True once the last two ``window``-sized blocks agree within ``tolerance``."""
        if window <= 0 or len(self._values) < 2 * window:
            return False
        recent = self._values[-window:]
        previous = self._values[-2 * window : -window]
        return abs(sum(recent) / window - sum(previous) / window) <= tolerance
