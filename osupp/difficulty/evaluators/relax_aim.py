"""Aim difficulty for plays with the Relax mod.

Relax players never tap, so all of the difficulty is in the cursor movement. Compared
to the regular aim evaluator, streams are nerfed harder, angle bonuses look at the
effective BPM of the pattern and short jumps inherit the rhythm complexity.
"""

from __future__ import annotations

import math

from osupp.difficulty.preprocessing import NORMALISED_DIAMETER, OsuDifficultyHitObject
from osupp.difficulty.utils import almost_equals, clamp, smootherstep

from . import rhythm
from .aim import (
    calc_acute_angle_bonus,
    calc_wide_angle_bonus,
    jump_velocity,
    velocity_change_bonus,
    wiggle_bonus,
)

WIDE_ANGLE_MULTIPLIER = 1.5
ACUTE_ANGLE_MULTIPLIER = 2.6
SLIDER_MULTIPLIER = 1.5
VELOCITY_CHANGE_MULTIPLIER = 1.2
WIGGLE_MULTIPLIER = 1.02

# jumps shorter than this inherit the rhythm complexity of the object
RHYTHM_DISTANCE_THRESHOLD = 350.0

ACUTE_NERF_BASE = 1.07


def stream_nerf(distance: float) -> float:
    # fitted on [(100, 0.92), (300, 0.98)]
    return clamp(0.0006 * distance + 0.86, 0.92, 0.98)


def wide_stream_nerf(distance: float) -> float:
    # fitted on [(200, 0), (250, 0.5), (300, 1), (350, 1)]
    return clamp(distance * 0.007 - 1.3, 0.0, 1.0)


def evaluate_difficulty_of(
    current: OsuDifficultyHitObject,
    hit_window: float,
    with_slider_travel_distance: bool,
) -> float:
    if current.base_object.is_spinner or current.last_object.is_spinner or current.index <= 1:
        return 0.0

    last = current.previous(0)
    last_last = current.previous(1)
    if last is None:
        return 0.0

    distance = current.lazy_jump_distance

    curr_velocity = jump_velocity(current, last, with_slider_travel_distance)
    prev_velocity = jump_velocity(last, last_last, with_slider_travel_distance)

    wide_angle_bonus = 0.0
    acute_angle_bonus = 0.0
    slider_bonus = 0.0
    velocity_change = 0.0
    wiggle = 0.0

    aim_strain = curr_velocity * stream_nerf(distance)

    if max(current.strain_time, last.strain_time) < 1.25 * min(current.strain_time, last.strain_time):
        if current.angle is not None and last.angle is not None:
            angle_bonus = min(curr_velocity, prev_velocity)

            wide_angle_bonus = calc_wide_angle_bonus(current.angle)
            acute_angle_bonus = calc_acute_angle_bonus(current.angle)

            wide_angle_bonus *= 1.0 - min(wide_angle_bonus, math.pow(calc_wide_angle_bonus(last.angle), 3))
            acute_angle_bonus *= 0.08 + 0.92 * (
                1.0 - min(acute_angle_bonus, math.pow(calc_acute_angle_bonus(last.angle), 3))
            )

            # stretch the strain time smoothly above 300 bpm 1/2
            bpm = 60000 / (current.strain_time / 2)
            nerf_strain_time = current.strain_time * math.pow(ACUTE_NERF_BASE, smootherstep(bpm, 300, 400))
            nerf_bpm = 60000 / (nerf_strain_time / 2)

            wide_angle_bonus *= angle_bonus * smootherstep(distance, 0, NORMALISED_DIAMETER)
            acute_angle_bonus *= (
                angle_bonus
                * smootherstep(nerf_bpm, 300, 400)
                * smootherstep(distance, NORMALISED_DIAMETER, NORMALISED_DIAMETER * 2)
            )

            # wide angles over short distances are really wide angle streams
            wide_angle_bonus *= wide_stream_nerf(distance)

            wiggle = wiggle_bonus(current, last, angle_bonus)

    if not almost_equals(max(prev_velocity, curr_velocity), 0.0):
        velocity_change = velocity_change_bonus(current, last, last_last)
        # doubletapped pairs don't need the cursor to change speed
        velocity_change *= 1.0 - current.get_doubletapness(current.next(0))

    if last.base_object.is_slider:
        slider_bonus = last.travel_distance / last.travel_time

    aim_strain += wiggle * WIGGLE_MULTIPLIER
    aim_strain += max(
        acute_angle_bonus * ACUTE_ANGLE_MULTIPLIER,
        wide_angle_bonus * WIDE_ANGLE_MULTIPLIER + velocity_change * VELOCITY_CHANGE_MULTIPLIER,
    )

    if with_slider_travel_distance:
        aim_strain += slider_bonus * SLIDER_MULTIPLIER

    if distance < RHYTHM_DISTANCE_THRESHOLD:
        aim_strain *= rhythm.evaluate_difficulty_of(current, hit_window)

    return aim_strain
