"""Tapping speed difficulty of a single object.

https://github.com/ppy/osu/blob/master/osu.Game.Rulesets.Osu/Difficulty/Evaluators/SpeedEvaluator.cs
"""

from __future__ import annotations

import math

from osupp.difficulty.preprocessing import NORMALISED_DIAMETER, OsuDifficultyHitObject
from osupp.difficulty.utils import bpm_to_milliseconds, clamp, milliseconds_to_bpm

SINGLE_SPACING_THRESHOLD = NORMALISED_DIAMETER * 1.25  # 1.25 circles distance between centers
MIN_SPEED_BONUS = 200  # 200 BPM 1/4th
SPEED_BALANCING_FACTOR = 40
DISTANCE_MULTIPLIER = 0.9


def evaluate_difficulty_of(current: OsuDifficultyHitObject, autopilot: bool = False) -> float:
    """Reward short strain times and some spacing between objects.

    Autopilot players never aim, so the distance bonus is dropped for them.
    """
    if current.base_object.is_spinner:
        return 0.0

    previous = current.previous(0)

    strain_time = current.strain_time
    doubletapness = 1.0 - current.get_doubletapness(current.next(0))

    # cap the strain time to the great window
    strain_time /= clamp((strain_time / current.hit_window_great) / 0.93, 0.92, 1.0)

    speed_bonus = 0.0
    if milliseconds_to_bpm(strain_time) > MIN_SPEED_BONUS:
        speed_bonus = 0.75 * math.pow((bpm_to_milliseconds(MIN_SPEED_BONUS) - strain_time) / SPEED_BALANCING_FACTOR, 2)

    travel_distance = previous.travel_distance if previous is not None else 0.0
    distance = min(travel_distance + current.minimum_jump_distance, SINGLE_SPACING_THRESHOLD)

    distance_bonus = 0.0
    if not autopilot:
        distance_bonus = math.pow(distance / SINGLE_SPACING_THRESHOLD, 3.95) * DISTANCE_MULTIPLIER

    difficulty = (1 + speed_bonus + distance_bonus) * 1000 / strain_time

    return difficulty * doubletapness
