from typing import ClassVar, Self

from .mods import APIMod

from pydantic import BaseModel, ConfigDict, Field


class PerformanceAttributes(BaseModel):
    model_config = ConfigDict(frozen=True)

    pp: float


# https://github.com/ppy/osu/blob/master/osu.Game.Rulesets.Osu/Difficulty/OsuPerformanceAttributes.cs
class OsuPerformanceAttributes(PerformanceAttributes):
    aim: float
    speed: float
    flashlight: float
    effective_miss_count: float


class DifficultyAttributes(BaseModel):
    model_config = ConfigDict(frozen=True)

    star_rating: float = 0.0
    max_combo: int = 0
    mods: list[APIMod] = Field(default_factory=list)
    version: int = 0

    # attribute ids shared with osu-web's beatmap_difficulty_attribs table
    ATTRIB_ID_MAX_COMBO: ClassVar[int] = 9
    ATTRIB_ID_DIFFICULTY: ClassVar[int] = 11

    def to_database_attributes(self) -> dict[int, float]:
        return {
            self.ATTRIB_ID_MAX_COMBO: self.max_combo,
            self.ATTRIB_ID_DIFFICULTY: self.star_rating,
        }


# https://github.com/ppy/osu/blob/master/osu.Game.Rulesets.Osu/Difficulty/OsuDifficultyAttributes.cs
class OsuDifficultyAttributes(DifficultyAttributes):
    aim_difficulty: float = 0.0
    aim_difficult_slider_count: float = 0.0
    speed_difficulty: float = 0.0
    speed_note_count: float = 0.0
    flashlight_difficulty: float = 0.0
    slider_factor: float = 1.0
    aim_difficult_strain_count: float = 0.0
    speed_difficult_strain_count: float = 0.0

    approach_rate: float = 0.0
    overall_difficulty: float = 0.0
    circle_size: float = 0.0
    drain_rate: float = 0.0

    hit_circle_count: int = 0
    slider_count: int = 0
    spinner_count: int = 0

    ATTRIB_ID_AIM: ClassVar[int] = 1
    ATTRIB_ID_SPEED: ClassVar[int] = 3
    ATTRIB_ID_OVERALL_DIFFICULTY: ClassVar[int] = 5
    ATTRIB_ID_APPROACH_RATE: ClassVar[int] = 7
    ATTRIB_ID_FLASHLIGHT: ClassVar[int] = 17
    ATTRIB_ID_SLIDER_FACTOR: ClassVar[int] = 19
    ATTRIB_ID_SPEED_NOTE_COUNT: ClassVar[int] = 21
    ATTRIB_ID_SPEED_DIFFICULT_STRAIN_COUNT: ClassVar[int] = 23
    ATTRIB_ID_AIM_DIFFICULT_STRAIN_COUNT: ClassVar[int] = 25
    ATTRIB_ID_AIM_DIFFICULT_SLIDER_COUNT: ClassVar[int] = 27

    @property
    def object_count(self) -> int:
        return self.hit_circle_count + self.slider_count + self.spinner_count

    def to_database_attributes(self) -> dict[int, float]:
        attributes = super().to_database_attributes()
        attributes.update(
            {
                self.ATTRIB_ID_AIM: self.aim_difficulty,
                self.ATTRIB_ID_SPEED: self.speed_difficulty,
                self.ATTRIB_ID_OVERALL_DIFFICULTY: self.overall_difficulty,
                self.ATTRIB_ID_APPROACH_RATE: self.approach_rate,
                self.ATTRIB_ID_SLIDER_FACTOR: self.slider_factor,
                self.ATTRIB_ID_SPEED_NOTE_COUNT: self.speed_note_count,
                self.ATTRIB_ID_SPEED_DIFFICULT_STRAIN_COUNT: self.speed_difficult_strain_count,
                self.ATTRIB_ID_AIM_DIFFICULT_STRAIN_COUNT: self.aim_difficult_strain_count,
                self.ATTRIB_ID_AIM_DIFFICULT_SLIDER_COUNT: self.aim_difficult_slider_count,
            }
        )
        # osu-web only stores flashlight when it was calculated
        if any(mod["acronym"] == "FL" for mod in self.mods):
            attributes[self.ATTRIB_ID_FLASHLIGHT] = self.flashlight_difficulty
        return attributes

    @classmethod
    def from_database_attributes(
        cls,
        values: dict[int, float],
        *,
        hit_circle_count: int = 0,
        slider_count: int = 0,
        spinner_count: int = 0,
        drain_rate: float = 0.0,
        circle_size: float = 0.0,
        mods: list[APIMod] | None = None,
        version: int = 0,
    ) -> Self:
        """Rebuild attributes from the numbered map; counts come from the beatmap's online info."""
        return cls(
            star_rating=values.get(cls.ATTRIB_ID_DIFFICULTY, 0.0),
            max_combo=int(values.get(cls.ATTRIB_ID_MAX_COMBO, 0)),
            aim_difficulty=values.get(cls.ATTRIB_ID_AIM, 0.0),
            speed_difficulty=values.get(cls.ATTRIB_ID_SPEED, 0.0),
            overall_difficulty=values.get(cls.ATTRIB_ID_OVERALL_DIFFICULTY, 0.0),
            approach_rate=values.get(cls.ATTRIB_ID_APPROACH_RATE, 0.0),
            flashlight_difficulty=values.get(cls.ATTRIB_ID_FLASHLIGHT, 0.0),
            slider_factor=values.get(cls.ATTRIB_ID_SLIDER_FACTOR, 1.0),
            speed_note_count=values.get(cls.ATTRIB_ID_SPEED_NOTE_COUNT, 0.0),
            speed_difficult_strain_count=values.get(cls.ATTRIB_ID_SPEED_DIFFICULT_STRAIN_COUNT, 0.0),
            aim_difficult_strain_count=values.get(cls.ATTRIB_ID_AIM_DIFFICULT_STRAIN_COUNT, 0.0),
            aim_difficult_slider_count=values.get(cls.ATTRIB_ID_AIM_DIFFICULT_SLIDER_COUNT, 0.0),
            hit_circle_count=hit_circle_count,
            slider_count=slider_count,
            spinner_count=spinner_count,
            drain_rate=drain_rate,
            circle_size=circle_size,
            mods=mods or [],
            version=version,
        )
