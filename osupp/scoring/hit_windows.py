"""Timing windows and approach timings for osu!standard.

Both the lazer windows (difficulty-range based) and the osu!stable windows used
under the Classic mod are provided, because the relax rhythm tolerance depends
on which one the player was judged by.
"""

from __future__ import annotations

import math

from osupp.difficulty.utils import clamp, difficulty_range

PREEMPT_MIN = 450.0
PREEMPT_MID = 1200.0
PREEMPT_MAX = 1800.0
# fade in time of an object is capped to this at high approach rates
FADE_IN_DURATION = 400.0
HIDDEN_FADE_OUT_DURATION_MULTIPLIER = 0.3


class HitWindows:
    """Half-widths (in ms) of each judgement window for a given overall difficulty."""

    def __init__(self, overall_difficulty: float = 5.0) -> None:
        self.great = 0.0
        self.ok = 0.0
        self.meh = 0.0
        self.set_difficulty(overall_difficulty)

    def set_difficulty(self, difficulty: float) -> None:
        self.great = difficulty_range(difficulty, 80, 50, 20)
        self.ok = difficulty_range(difficulty, 140, 100, 60)
        self.meh = difficulty_range(difficulty, 200, 150, 100)


class LegacyHitWindows(HitWindows):
    """osu!stable windows, using OD directly instead of the difficulty range.

    - 300: 80 - 6 * OD
    - 100: 140 - 8 * OD
    - 50: 200 - 10 * OD
    """

    def set_difficulty(self, difficulty: float) -> None:
        od = clamp(difficulty, 0.0, 10.0)
        self.great = math.floor(80 - od * 6) - 0.5
        self.ok = math.floor(140 - od * 8) - 0.5
        self.meh = math.floor(200 - od * 10) - 0.5


def create_hit_windows(overall_difficulty: float, legacy: bool = False) -> HitWindows:
    if legacy:
        return LegacyHitWindows(overall_difficulty)
    return HitWindows(overall_difficulty)


def preempt_time(approach_rate: float) -> float:
    return difficulty_range(approach_rate, PREEMPT_MAX, PREEMPT_MID, PREEMPT_MIN)


def fade_in_time(preempt: float) -> float:
    return FADE_IN_DURATION * min(1.0, preempt / PREEMPT_MIN)


def preempt_to_approach_rate(preempt: float) -> float:
    if preempt > PREEMPT_MID:
        return (PREEMPT_MAX - preempt) / 120.0
    return (PREEMPT_MID - preempt) / 150.0 + 5.0


def great_window_to_overall_difficulty(great_window: float) -> float:
    return (80.0 - great_window) / 6.0


def rate_adjusted_approach_rate(approach_rate: float, clock_rate: float) -> float:
    return preempt_to_approach_rate(preempt_time(approach_rate) / clock_rate)


def rate_adjusted_overall_difficulty(overall_difficulty: float, clock_rate: float) -> float:
    great = HitWindows(overall_difficulty).great / clock_rate
    return great_window_to_overall_difficulty(great)
