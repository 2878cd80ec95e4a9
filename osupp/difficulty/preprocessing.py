"""Difficulty objects: per-transition geometry and timing derived from raw hit objects.

https://github.com/ppy/osu/blob/master/osu.Game.Rulesets.Osu/Difficulty/Preprocessing/OsuDifficultyHitObject.cs
"""

from __future__ import annotations

from collections.abc import Sequence
import math
from typing import TypeAlias

from osupp.models.beatmap import HitObject
from osupp.scoring.hit_windows import HIDDEN_FADE_OUT_DURATION_MULTIPLIER

from .utils import clamp

NORMALISED_RADIUS = 50
NORMALISED_DIAMETER = NORMALISED_RADIUS * 2

# Minimum strain time, prevents objects that are almost simultaneous from breaking the calculation.
MIN_DELTA_TIME = 25

# The first difficulty objects get their strain time stretched, fading out linearly,
# so a map cannot open with an artificial strain spike.
EARLY_OBJECT_COUNT = 3
EARLY_STRAIN_TIME_RAMP = 0.25

MAXIMUM_SLIDER_RADIUS = NORMALISED_RADIUS * 2.4
ASSUMED_SLIDER_RADIUS = NORMALISED_RADIUS * 1.8

# osu!stable judges the slider end this much before the actual end.
LEGACY_LAST_TICK_OFFSET = 36

Vector: TypeAlias = tuple[float, float]


def _sub(a: Vector, b: Vector) -> Vector:
    return a[0] - b[0], a[1] - b[1]


def _length(v: Vector) -> float:
    return math.hypot(v[0], v[1])


def _position(obj: HitObject) -> Vector:
    return obj.position.x, obj.position.y


def _tail_position(obj: HitObject) -> Vector:
    end = obj.stacked_end_position
    return end.x, end.y


class SliderCursor:
    """Approximation of where a lazy cursor travels while following a slider.

    The player only has to keep the cursor within the follow circle, so every span
    is shortened by the follow leniency, and the cursor ends up slightly short of
    the tail.
    """

    __slots__ = ("lazy_end_position", "lazy_travel_distance", "lazy_travel_time")

    def __init__(self, slider: HitObject, scaling_factor: float) -> None:
        duration = slider.path_duration
        self.lazy_travel_time = max(duration - LEGACY_LAST_TICK_OFFSET, duration / 2)

        span_length = slider.path_length * scaling_factor
        first_span = max(0.0, span_length - NORMALISED_RADIUS)
        other_spans = max(0.0, span_length - NORMALISED_RADIUS * 2) * slider.repeat_count
        self.lazy_travel_distance = first_span + other_spans

        head = _position(slider)
        tail = _tail_position(slider)
        if span_length <= NORMALISED_RADIUS:
            # the cursor never has to leave the head
            self.lazy_end_position = head
            return

        # the final span starts at the head on even span counts, at the path end otherwise
        span_start = head if slider.span_count % 2 == 1 else _position_end(slider)
        direction = _sub(tail, span_start)
        chord = _length(direction)
        if chord == 0:
            self.lazy_end_position = tail
            return
        pull_back = min(NORMALISED_RADIUS / scaling_factor, chord)
        self.lazy_end_position = (
            tail[0] - direction[0] / chord * pull_back,
            tail[1] - direction[1] / chord * pull_back,
        )


def _position_end(obj: HitObject) -> Vector:
    end = obj.end_position or obj.position
    return end.x, end.y


class OsuDifficultyHitObject:
    """One transition between two consecutive hit objects.

    Instances are created once per calculation, in order, and only read afterwards.
    ``previous`` and ``next`` index into the shared list the object was built into.
    """

    def __init__(
        self,
        hit_object: HitObject,
        last_object: HitObject,
        last_last_object: HitObject | None,
        clock_rate: float,
        objects: list[OsuDifficultyHitObject],
        index: int,
        *,
        radius: float,
        great_window: float,
        preempt: float,
        fade_in: float,
    ) -> None:
        self.base_object = hit_object
        self.last_object = last_object
        self.last_last_object = last_last_object
        self._objects = objects
        self.index = index

        self.start_time = hit_object.start_time / clock_rate
        self.end_time = (hit_object.start_time + hit_object.duration) / clock_rate
        self.delta_time = (hit_object.start_time - last_object.start_time) / clock_rate

        strain_time = max(self.delta_time, MIN_DELTA_TIME)
        if index < EARLY_OBJECT_COUNT:
            strain_time *= 1 + EARLY_STRAIN_TIME_RAMP * (EARLY_OBJECT_COUNT - index) / EARLY_OBJECT_COUNT
        self.strain_time = strain_time

        # full width of the great window, in rate-adjusted time
        self.hit_window_great = 2 * great_window / clock_rate
        self.time_preempt = preempt
        self.time_fade_in = fade_in

        self.lazy_jump_distance = 0.0
        self.minimum_jump_distance = 0.0
        self.minimum_jump_time = 0.0
        self.travel_distance = 0.0
        self.travel_time = 0.0
        self.angle: float | None = None

        self.radius = radius
        self.scaling_factor = NORMALISED_RADIUS / radius
        if radius < 30:
            small_circle_bonus = min(30 - radius, 5) / 50
            self.scaling_factor *= 1 + small_circle_bonus

        self.cursor: SliderCursor | None = None
        if hit_object.is_slider:
            self.cursor = SliderCursor(hit_object, self.scaling_factor)

        self._set_distances(clock_rate)

    def _end_cursor_position(self, obj: HitObject) -> Vector:
        if obj.is_slider:
            return SliderCursor(obj, self.scaling_factor).lazy_end_position
        return _position(obj)

    def _set_distances(self, clock_rate: float) -> None:
        if self.cursor is not None:
            # bonus for repeat sliders until a better per nested object strain system can be achieved
            self.travel_distance = self.cursor.lazy_travel_distance * math.pow(
                1 + self.base_object.repeat_count / 2.5, 1.0 / 2.5
            )
            self.travel_time = max(self.cursor.lazy_travel_time / clock_rate, MIN_DELTA_TIME)

        # we don't need to calculate either angle or distance when one of the last->curr objects is a spinner
        if self.base_object.is_spinner or self.last_object.is_spinner:
            return

        position = _position(self.base_object)
        last_cursor_position = self._end_cursor_position(self.last_object)

        self.lazy_jump_distance = _length(_sub(position, last_cursor_position)) * self.scaling_factor
        self.minimum_jump_time = self.strain_time
        self.minimum_jump_distance = self.lazy_jump_distance

        if self.last_object.is_slider:
            last_cursor = SliderCursor(self.last_object, self.scaling_factor)
            last_travel_time = max(last_cursor.lazy_travel_time / clock_rate, MIN_DELTA_TIME)
            self.minimum_jump_time = max(self.strain_time - last_travel_time, MIN_DELTA_TIME)

            # the cursor only has to reach the follow circle of the tail, not its centre
            tail_jump_distance = _length(_sub(_tail_position(self.last_object), position)) * self.scaling_factor
            self.minimum_jump_distance = max(
                0.0,
                min(
                    self.lazy_jump_distance - (MAXIMUM_SLIDER_RADIUS - ASSUMED_SLIDER_RADIUS),
                    tail_jump_distance - MAXIMUM_SLIDER_RADIUS,
                ),
            )

        if self.last_last_object is not None and not self.last_last_object.is_spinner:
            last_last_cursor_position = self._end_cursor_position(self.last_last_object)

            v1 = _sub(last_last_cursor_position, _position(self.last_object))
            v2 = _sub(position, last_cursor_position)

            dot = v1[0] * v2[0] + v1[1] * v2[1]
            det = v1[0] * v2[1] - v1[1] * v2[0]

            self.angle = abs(math.atan2(det, dot))

    def previous(self, backwards_index: int) -> OsuDifficultyHitObject | None:
        index = self.index - (backwards_index + 1)
        if 0 <= index < len(self._objects):
            return self._objects[index]
        return None

    def next(self, forwards_index: int) -> OsuDifficultyHitObject | None:
        index = self.index + (forwards_index + 1)
        if 0 <= index < len(self._objects):
            return self._objects[index]
        return None

    def opacity_at(self, time: float, hidden: bool) -> float:
        """How visible this object is at ``time`` (unscaled map time), from 0 to 1."""
        if time > self.base_object.start_time:
            return 0.0

        fade_in_start_time = self.base_object.start_time - self.time_preempt
        fade_in_duration = self.time_fade_in

        if hidden:
            fade_out_start_time = fade_in_start_time + fade_in_duration
            fade_out_duration = self.time_preempt * HIDDEN_FADE_OUT_DURATION_MULTIPLIER

            return min(
                clamp((time - fade_in_start_time) / fade_in_duration, 0.0, 1.0),
                1.0 - clamp((time - fade_out_start_time) / fade_out_duration, 0.0, 1.0),
            )

        return clamp((time - fade_in_start_time) / fade_in_duration, 0.0, 1.0)

    def get_doubletapness(self, next_object: OsuDifficultyHitObject | None) -> float:
        """Probability-like value that this object and ``next_object`` are meant to be double tapped."""
        if next_object is None:
            return 0.0

        curr_delta_time = max(1.0, self.delta_time)
        next_delta_time = max(1.0, next_object.delta_time)
        delta_difference = abs(next_delta_time - curr_delta_time)
        speed_ratio = curr_delta_time / max(curr_delta_time, delta_difference)
        window_ratio = math.pow(min(1.0, curr_delta_time / self.hit_window_great), 2)
        return 1.0 - math.pow(speed_ratio, 1 - window_ratio)

    def __repr__(self) -> str:
        return (
            f"<OsuDifficultyHitObject index={self.index} start_time={self.start_time:.2f} "
            f"strain_time={self.strain_time:.2f} distance={self.lazy_jump_distance:.2f}>"
        )


def create_difficulty_hit_objects(
    hit_objects: Sequence[HitObject],
    clock_rate: float,
    *,
    radius: float,
    great_window: float,
    preempt: float,
    fade_in: float,
) -> list[OsuDifficultyHitObject]:
    """Build the difficulty objects for a map, one per hit object after the first."""
    objects: list[OsuDifficultyHitObject] = []

    # The first jump is formed by the first two hit objects of the map.
    for i in range(1, len(hit_objects)):
        last_last = hit_objects[i - 2] if i > 1 else None
        objects.append(
            OsuDifficultyHitObject(
                hit_objects[i],
                hit_objects[i - 1],
                last_last,
                clock_rate,
                objects,
                len(objects),
                radius=radius,
                great_window=great_window,
                preempt=preempt,
                fade_in=fade_in,
            )
        )

    return objects
