from __future__ import annotations

import math

TWO_PI = 2.0 * math.pi


def _unit_xy(angle: float) -> tuple[float, float]:
    return math.cos(angle), math.sin(angle)


def _circular_mean(sum_x: float, sum_y: float, fallback: float) -> float:
    # Opposite headings cancel and leave no direction to follow.
    if sum_x * sum_x + sum_y * sum_y < 1e-12:
        return fallback
    return math.atan2(sum_y, sum_x)


def _wrap_periodic(value: float, span: float) -> float:
    if span <= 0.0:
        return 0.0
    if 0.0 <= value < span:
        return value
    value %= span
    # -1e-17 % span rounds up to span itself.
    if value >= span:
        return 0.0
    return value
