"""Aim difficulty of a single object.

https://github.com/ppy/osu/blob/master/osu.Game.Rulesets.Osu/Difficulty/Evaluators/AimEvaluator.cs
"""

from __future__ import annotations

import math

from osupp.difficulty.preprocessing import NORMALISED_DIAMETER, NORMALISED_RADIUS, OsuDifficultyHitObject
from osupp.difficulty.utils import almost_equals, milliseconds_to_bpm, reverse_lerp, smootherstep, smoothstep

WIDE_ANGLE_MULTIPLIER = 1.5
ACUTE_ANGLE_MULTIPLIER = 2.6
SLIDER_MULTIPLIER = 1.35
VELOCITY_CHANGE_MULTIPLIER = 0.75
WIGGLE_MULTIPLIER = 1.02

_ANGLE_40 = math.radians(40)
_ANGLE_60 = math.radians(60)
_ANGLE_110 = math.radians(110)
_ANGLE_140 = math.radians(140)


def calc_wide_angle_bonus(angle: float) -> float:
    return smoothstep(angle, _ANGLE_40, _ANGLE_140)


def calc_acute_angle_bonus(angle: float) -> float:
    return smoothstep(angle, _ANGLE_140, _ANGLE_40)


def jump_velocity(
    current: OsuDifficultyHitObject,
    last: OsuDifficultyHitObject | None,
    with_slider_travel_distance: bool,
) -> float:
    """Velocity into ``current``, extended through the previous slider's travel when it had one."""
    velocity = current.lazy_jump_distance / current.strain_time

    if last is not None and last.base_object.is_slider and with_slider_travel_distance:
        # slider head to slider end
        travel_velocity = last.travel_distance / last.travel_time
        # slider end to the current object
        movement_velocity = current.minimum_jump_distance / current.minimum_jump_time
        velocity = max(velocity, movement_velocity + travel_velocity)

    return velocity


def wiggle_bonus(
    current: OsuDifficultyHitObject,
    last: OsuDifficultyHitObject,
    angle_bonus: float,
) -> float:
    """Bonus for jumps in [radius, 3 * diameter] with angles below 110 degrees on both transitions."""
    assert current.angle is not None and last.angle is not None
    return (
        angle_bonus
        * smootherstep(current.lazy_jump_distance, NORMALISED_RADIUS, NORMALISED_DIAMETER)
        * math.pow(reverse_lerp(current.lazy_jump_distance, NORMALISED_DIAMETER * 3, NORMALISED_DIAMETER), 1.8)
        * smootherstep(current.angle, _ANGLE_110, _ANGLE_60)
        * smootherstep(last.lazy_jump_distance, NORMALISED_RADIUS, NORMALISED_DIAMETER)
        * math.pow(reverse_lerp(last.lazy_jump_distance, NORMALISED_DIAMETER * 3, NORMALISED_DIAMETER), 1.8)
        * smootherstep(last.angle, _ANGLE_110, _ANGLE_60)
    )


def velocity_change_bonus(
    current: OsuDifficultyHitObject,
    last: OsuDifficultyHitObject,
    last_last: OsuDifficultyHitObject | None,
) -> float:
    # average velocity over the whole object, not the separate jump and slider path velocities
    prev_velocity = (last.lazy_jump_distance + (last_last.travel_distance if last_last else 0.0)) / last.strain_time
    curr_velocity = (current.lazy_jump_distance + last.travel_distance) / current.strain_time

    max_velocity = max(prev_velocity, curr_velocity)
    if max_velocity == 0:
        return 0.0

    # scale with the ratio of the difference compared to 0.5 * max distance
    dist_ratio = math.pow(math.sin(math.pi / 2 * abs(prev_velocity - curr_velocity) / max_velocity), 2)

    # reward up to 125 / strain time for overlaps where the velocity still changes
    min_strain_time = min(current.strain_time, last.strain_time)
    overlap_velocity_buff = min(NORMALISED_DIAMETER * 1.25 / min_strain_time, abs(prev_velocity - curr_velocity))

    bonus = overlap_velocity_buff * dist_ratio

    # penalize rhythm changes
    bonus *= math.pow(min_strain_time / max(current.strain_time, last.strain_time), 2)
    return bonus


def evaluate_difficulty_of(current: OsuDifficultyHitObject, with_slider_travel_distance: bool) -> float:
    if current.base_object.is_spinner or current.index <= 1:
        return 0.0

    last = current.previous(0)
    last_last = current.previous(1)
    assert last is not None
    if last.base_object.is_spinner:
        return 0.0

    curr_velocity = jump_velocity(current, last, with_slider_travel_distance)
    prev_velocity = jump_velocity(last, last_last, with_slider_travel_distance)

    wide_angle_bonus = 0.0
    acute_angle_bonus = 0.0
    slider_bonus = 0.0
    velocity_change = 0.0
    wiggle = 0.0

    aim_strain = curr_velocity

    # only reward angles when the rhythm stays the same
    if max(current.strain_time, last.strain_time) < 1.25 * min(current.strain_time, last.strain_time):
        if current.angle is not None and last.angle is not None:
            # take the smaller velocity as the base
            angle_bonus = min(curr_velocity, prev_velocity)

            wide_angle_bonus = calc_wide_angle_bonus(current.angle)
            acute_angle_bonus = calc_acute_angle_bonus(current.angle)

            # penalize angle repetition
            wide_angle_bonus *= 1 - min(wide_angle_bonus, math.pow(calc_wide_angle_bonus(last.angle), 3))
            acute_angle_bonus *= 0.08 + 0.92 * (
                1 - min(acute_angle_bonus, math.pow(calc_acute_angle_bonus(last.angle), 3))
            )

            # full wide angle bonus past one diameter
            wide_angle_bonus *= angle_bonus * smootherstep(current.lazy_jump_distance, 0, NORMALISED_DIAMETER)

            # acute angle bonus above 300 bpm 1/2 and past one diameter
            acute_angle_bonus *= (
                angle_bonus
                * smootherstep(milliseconds_to_bpm(current.strain_time, 2), 300, 400)
                * smootherstep(current.lazy_jump_distance, NORMALISED_DIAMETER, NORMALISED_DIAMETER * 2)
            )

            wiggle = wiggle_bonus(current, last, angle_bonus)

    if not almost_equals(max(prev_velocity, curr_velocity), 0.0):
        velocity_change = velocity_change_bonus(current, last, last_last)

    if last.base_object.is_slider:
        # reward sliders based on velocity
        slider_bonus = last.travel_distance / last.travel_time

    aim_strain += wiggle * WIGGLE_MULTIPLIER

    # acute angle bonus, or wide angle bonus plus velocity change bonus, whichever is larger
    aim_strain += max(
        acute_angle_bonus * ACUTE_ANGLE_MULTIPLIER,
        wide_angle_bonus * WIDE_ANGLE_MULTIPLIER + velocity_change * VELOCITY_CHANGE_MULTIPLIER,
    )

    if with_slider_travel_distance:
        aim_strain += slider_bonus * SLIDER_MULTIPLIER

    return aim_strain
