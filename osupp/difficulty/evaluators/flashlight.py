"""Memory difficulty of a single object when playing with Flashlight.

https://github.com/ppy/osu/blob/master/osu.Game.Rulesets.Osu/Difficulty/Evaluators/FlashlightEvaluator.cs
"""

from __future__ import annotations

import math

from osupp.difficulty.preprocessing import OsuDifficultyHitObject

MAX_OPACITY_BONUS = 0.4
HIDDEN_BONUS = 0.2

MIN_VELOCITY = 0.5
SLIDER_MULTIPLIER = 1.3

MIN_ANGLE_MULTIPLIER = 0.2

HISTORY_OBJECTS_MAX = 10


def evaluate_difficulty_of(current: OsuDifficultyHitObject, hidden: bool) -> float:
    if current.base_object.is_spinner:
        return 0.0

    hit_object = current.base_object
    position = hit_object.position

    scaling_factor = 52.0 / current.radius
    small_dist_nerf = 1.0
    cumulative_strain_time = 0.0

    result = 0.0

    last_obj = current

    angle_repeat_count = 0.0

    # the previous objects the player has to keep in memory
    for i in range(min(current.index, HISTORY_OBJECTS_MAX)):
        current_obj = current.previous(i)
        assert current_obj is not None
        current_hit_object = current_obj.base_object

        cumulative_strain_time += last_obj.strain_time

        if not current_hit_object.is_spinner:
            end = current_hit_object.stacked_end_position
            jump_distance = math.hypot(position.x - end.x, position.y - end.y)

            # objects that can be seen within the flashlight radius are easier
            if i == 0:
                small_dist_nerf = min(1.0, jump_distance / 75.0)

            # only the first object of a stack counts
            stack_nerf = min(1.0, (current_obj.lazy_jump_distance / scaling_factor) / 25.0)

            # bonus based on how visible the object is
            opacity_bonus = 1.0 + MAX_OPACITY_BONUS * (1.0 - current.opacity_at(current_hit_object.start_time, hidden))

            result += stack_nerf * opacity_bonus * scaling_factor * jump_distance / cumulative_strain_time

            if current_obj.angle is not None and current.angle is not None:
                # objects further back count less for the nerf
                if abs(current_obj.angle - current.angle) < 0.02:
                    angle_repeat_count += max(1.0 - 0.1 * i, 0.0)

        last_obj = current_obj

    result = math.pow(small_dist_nerf * result, 2.0)

    if hidden:
        result *= 1.0 + HIDDEN_BONUS

    # nerf patterns with repeated angles
    result *= MIN_ANGLE_MULTIPLIER + (1.0 - MIN_ANGLE_MULTIPLIER) / (angle_repeat_count + 1.0)

    slider_bonus = 0.0
    if hit_object.is_slider:
        # true travel distance, independent of circle size
        pixel_travel_distance = current.travel_distance / scaling_factor

        slider_bonus = math.pow(max(0.0, pixel_travel_distance / current.travel_time - MIN_VELOCITY), 0.5)

        # longer sliders require more memorisation
        slider_bonus *= pixel_travel_distance

        # repeats need less memorisation
        if hit_object.repeat_count > 0:
            slider_bonus /= hit_object.repeat_count + 1

    result += slider_bonus * SLIDER_MULTIPLIER

    return result
