"""Shared numeric helpers used across the difficulty and performance calculations.

Mirrors ``DifficultyCalculationUtils`` and ``Interpolation`` from osu!lazer:
https://github.com/ppy/osu/blob/master/osu.Game/Rulesets/Difficulty/Utils/DifficultyCalculationUtils.cs
"""

from __future__ import annotations

import math
from typing import TypeVar

FLOAT_EPSILON = 1e-7

T = TypeVar("T", bound=int | float)


def clamp(n: T, min_value: T, max_value: T) -> T:
    if n < min_value:
        return min_value
    elif n > max_value:
        return max_value
    else:
        return n


def almost_equals(value1: float, value2: float, acceptable_difference: float = FLOAT_EPSILON) -> bool:
    return abs(value1 - value2) <= acceptable_difference


def lerp(start: float, end: float, amount: float) -> float:
    return start + (end - start) * amount


def reverse_lerp(x: float, start: float, end: float) -> float:
    """Where ``x`` sits between ``start`` and ``end``, clamped to [0, 1].

    ``end`` may be smaller than ``start``, in which case the ramp is descending.
    """
    return clamp((x - start) / (end - start), 0.0, 1.0)


def smoothstep(x: float, start: float, end: float) -> float:
    x = reverse_lerp(x, start, end)
    return x * x * (3.0 - 2.0 * x)


def smootherstep(x: float, start: float, end: float) -> float:
    x = reverse_lerp(x, start, end)
    return x * x * x * (x * (6.0 * x - 15.0) + 10.0)


def milliseconds_to_bpm(ms: float, delimiter: int = 4) -> float:
    return 60000.0 / (ms * delimiter)


def bpm_to_milliseconds(bpm: float, delimiter: int = 4) -> float:
    return 60000.0 / (bpm * delimiter)


def difficulty_range(difficulty: float, min_value: float, mid_value: float, max_value: float) -> float:
    """Map a 0-10 difficulty setting onto a value range with 5 as the midpoint."""
    if difficulty > 5:
        return mid_value + (max_value - mid_value) * (difficulty - 5) / 5
    if difficulty < 5:
        return mid_value + (mid_value - min_value) * (difficulty - 5) / 5
    return mid_value


def power_mean(values: list[float], power: float) -> float:
    return math.pow(sum(math.pow(v, power) for v in values), 1.0 / power)
