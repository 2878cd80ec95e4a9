from enum import Enum

from .mods import APIMod, parse_mods

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class GameMode(str, Enum):
    OSU = "osu"
    TAIKO = "taiko"
    FRUITS = "fruits"
    MANIA = "mania"

    OSURX = "osurx"
    OSUAP = "osuap"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_int(cls, v: int) -> "GameMode":
        return {
            0: GameMode.OSU,
            1: GameMode.TAIKO,
            2: GameMode.FRUITS,
            3: GameMode.MANIA,
            4: GameMode.OSURX,
            5: GameMode.OSUAP,
        }[v]

    def to_base_ruleset(self) -> "GameMode":
        gamemode = {
            GameMode.OSURX: GameMode.OSU,
            GameMode.OSUAP: GameMode.OSU,
        }.get(self)
        return gamemode or self

    def to_special_mode(self, mods: list[APIMod]) -> "GameMode":
        if self != GameMode.OSU:
            return self
        acronyms = {mod["acronym"] for mod in mods}
        if "AP" in acronyms:
            return GameMode.OSUAP
        if "RX" in acronyms:
            return GameMode.OSURX
        return self

    @classmethod
    def parse(cls, v: str | int) -> "GameMode | None":
        if isinstance(v, int) or v.isdigit():
            try:
                return cls.from_int(int(v))
            except KeyError:
                return None
        try:
            return cls(v.lower())
        except ValueError:
            return None


# https://github.com/ppy/osu/blob/master/osu.Game/Rulesets/Scoring/HitResult.cs
class HitResult(str, Enum):
    NONE = "none"

    MISS = "miss"
    MEH = "meh"
    OK = "ok"
    GOOD = "good"
    GREAT = "great"
    PERFECT = "perfect"

    SMALL_TICK_MISS = "small_tick_miss"
    SMALL_TICK_HIT = "small_tick_hit"
    LARGE_TICK_MISS = "large_tick_miss"
    LARGE_TICK_HIT = "large_tick_hit"

    SMALL_BONUS = "small_bonus"
    LARGE_BONUS = "large_bonus"

    IGNORE_MISS = "ignore_miss"
    IGNORE_HIT = "ignore_hit"

    SLIDER_TAIL_HIT = "slider_tail_hit"

    def is_scorable(self) -> bool:
        return self not in (
            HitResult.NONE,
            HitResult.IGNORE_HIT,
            HitResult.IGNORE_MISS,
        )

    def is_basic(self) -> bool:
        """
        Check if a HitResult is a basic (non-tick, non-bonus) result.

        Based on: https://github.com/ppy/osu/blob/master/osu.Game/Rulesets/Scoring/HitResult.cs
        """
        is_tick = self in {
            HitResult.LARGE_TICK_HIT,
            HitResult.LARGE_TICK_MISS,
            HitResult.SMALL_TICK_HIT,
            HitResult.SMALL_TICK_MISS,
            HitResult.SLIDER_TAIL_HIT,
        }

        is_bonus = self in {HitResult.SMALL_BONUS, HitResult.LARGE_BONUS}

        return self.is_scorable() and not is_tick and not is_bonus


ScoreStatistics = dict[HitResult, int]


class ScoreInfo(BaseModel):
    """A realized play, as needed by the performance calculation."""

    model_config = ConfigDict(frozen=True)

    accuracy: float = Field(ge=0, le=1)
    max_combo: int = Field(default=0, ge=0)
    mods: list[APIMod] = Field(default_factory=list)
    statistics: ScoreStatistics = Field(default_factory=dict)

    @field_validator("mods", mode="before")
    @classmethod
    def validate_mods(cls, v):
        return parse_mods(v)

    @field_validator("statistics", mode="after")
    @classmethod
    def validate_statistics(cls, v: ScoreStatistics) -> ScoreStatistics:
        for result, count in v.items():
            if count < 0:
                raise ValueError(f"Negative count for {result.value}")
        return v

    @field_serializer("statistics", when_used="json")
    def serialize_statistics(self, v: ScoreStatistics):
        return {key.value: value for key, value in v.items()}

    def count(self, result: HitResult) -> int:
        return self.statistics.get(result, 0)

    @property
    def total_hits(self) -> int:
        """Number of judged objects (basic results only)."""
        return sum(count for result, count in self.statistics.items() if result.is_basic())

    @property
    def miss_count(self) -> int:
        return self.count(HitResult.MISS)
