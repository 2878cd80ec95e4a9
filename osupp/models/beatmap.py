from __future__ import annotations

from enum import Enum
from typing import Self

from osupp.difficulty.utils import clamp

from .mods import APIMod, get_mod_setting, has_mod

from pydantic import BaseModel, ConfigDict, Field, model_validator

# https://github.com/ppy/osu/blob/master/osu.Game.Rulesets.Osu/Objects/OsuHitObject.cs
OBJECT_RADIUS = 64
# osu!stable adds a small fudge factor to circle size, lazer keeps it for compatibility.
BROKEN_GAMEFIELD_ROUNDING_ALLOWANCE = 1.00041

# Difficulty Adjust slider bounds: (min, max, min with extended limits, max with extended limits)
# https://github.com/ppy/osu/blob/master/osu.Game.Rulesets.Osu/Mods/OsuModDifficultyAdjust.cs
DIFFICULTY_ADJUST_LIMITS: dict[str, tuple[float, float, float, float]] = {
    "circle_size": (0.0, 10.0, 0.0, 11.0),
    "approach_rate": (0.0, 10.0, -10.0, 11.0),
    "overall_difficulty": (0.0, 10.0, 0.0, 11.0),
    "drain_rate": (0.0, 10.0, 0.0, 11.0),
}


def _difficulty_adjust(mods: list[APIMod], key: str, current: float) -> float:
    value = float(get_mod_setting(mods, "DA", key, current))
    min_value, max_value, extended_min, extended_max = DIFFICULTY_ADJUST_LIMITS[key]
    if get_mod_setting(mods, "DA", "extended_limits", False):
        return clamp(value, extended_min, extended_max)
    return clamp(value, min_value, max_value)


class HitObjectType(str, Enum):
    CIRCLE = "circle"
    SLIDER = "slider"
    SPINNER = "spinner"


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)


class HitObject(BaseModel):
    """A single, already decoded and stacked osu!standard hit object.

    Sliders describe their path by the length of one span (``path_length``), the
    position where the first span ends (``end_position``) and the total duration of
    all spans (``path_duration``).
    """

    model_config = ConfigDict(frozen=True)

    start_time: float = Field(allow_inf_nan=False)
    position: Position
    type: HitObjectType = HitObjectType.CIRCLE
    path_length: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    path_duration: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    end_position: Position | None = None
    repeat_count: int = Field(default=0, ge=0)
    tick_count: int = Field(default=0, ge=0)
    end_time: float | None = Field(default=None, allow_inf_nan=False)

    @model_validator(mode="after")
    def validate_end_time(self) -> Self:
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self

    @property
    def is_slider(self) -> bool:
        return self.type == HitObjectType.SLIDER

    @property
    def is_spinner(self) -> bool:
        return self.type == HitObjectType.SPINNER

    @property
    def span_count(self) -> int:
        return self.repeat_count + 1

    @property
    def duration(self) -> float:
        if self.is_slider:
            return self.path_duration
        if self.end_time is not None:
            return self.end_time - self.start_time
        return 0.0

    @property
    def stacked_end_position(self) -> Position:
        """Where the object finishes: the slider tail, or the object itself."""
        if not self.is_slider:
            return self.position
        path_end = self.end_position or self.position
        # an even number of spans brings the ball back to the head
        return path_end if self.span_count % 2 == 1 else self.position

    @property
    def max_combo(self) -> int:
        if self.is_slider:
            # head, repeats, ticks and tail
            return 2 + self.repeat_count + self.tick_count
        return 1


class BeatmapDifficulty(BaseModel):
    model_config = ConfigDict(frozen=True)

    circle_size: float = Field(default=5, ge=0, le=11)
    approach_rate: float = Field(default=5, ge=-10, le=11)
    overall_difficulty: float = Field(default=5, ge=0, le=11)
    drain_rate: float = Field(default=5, ge=0, le=11)
    slider_multiplier: float = Field(default=1.4, gt=0)
    slider_tick_rate: float = Field(default=1, gt=0)

    @property
    def circle_radius(self) -> float:
        return OBJECT_RADIUS * (1.0 - 0.7 * (self.circle_size - 5) / 5) / 2 * BROKEN_GAMEFIELD_ROUNDING_ALLOWANCE

    def apply_mods(self, mods: list[APIMod]) -> BeatmapDifficulty:
        """Return the settings after difficulty-adjusting mods (EZ, HR, DA) are applied.

        Rate changes are not applied here, they are handled through the clock rate.
        """
        cs = self.circle_size
        ar = self.approach_rate
        od = self.overall_difficulty
        hp = self.drain_rate

        if has_mod(mods, "DA"):
            # unset settings keep the map's value, set ones are held to the mod's bounds
            cs = _difficulty_adjust(mods, "circle_size", cs)
            ar = _difficulty_adjust(mods, "approach_rate", ar)
            od = _difficulty_adjust(mods, "overall_difficulty", od)
            hp = _difficulty_adjust(mods, "drain_rate", hp)

        if has_mod(mods, "EZ"):
            cs *= 0.5
            ar *= 0.5
            od *= 0.5
            hp *= 0.5
        elif has_mod(mods, "HR"):
            cs = min(cs * 1.3, 10.0)
            ar = min(ar * 1.4, 10.0)
            od = min(od * 1.4, 10.0)
            hp = min(hp * 1.4, 10.0)

        # re-validate so the field bounds still hold after adjustment
        return BeatmapDifficulty.model_validate(
            {
                **self.model_dump(),
                "circle_size": cs,
                "approach_rate": ar,
                "overall_difficulty": od,
                "drain_rate": hp,
            }
        )


class Beatmap(BaseModel):
    """The validated input of a difficulty calculation.

    Hit objects must already be sorted by start time. The loader is responsible
    for decoding, stacking and rejecting malformed maps.
    """

    model_config = ConfigDict(frozen=True)

    hit_objects: list[HitObject] = Field(default_factory=list)
    difficulty: BeatmapDifficulty = Field(default_factory=BeatmapDifficulty)
    checksum: str | None = None

    @model_validator(mode="after")
    def validate_ordering(self) -> Self:
        for previous, current in zip(self.hit_objects, self.hit_objects[1:]):
            if current.start_time < previous.start_time:
                raise ValueError("hit objects must be ordered by start time")
        return self

    @property
    def max_combo(self) -> int:
        return sum(obj.max_combo for obj in self.hit_objects)

    def count(self, type_: HitObjectType) -> int:
        return sum(1 for obj in self.hit_objects if obj.type == type_)
