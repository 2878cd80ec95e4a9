import math

from osupp.difficulty.evaluators import flashlight
from osupp.difficulty.preprocessing import OsuDifficultyHitObject
from osupp.models.mods import APIMod

from ._base import OsuStrainSkill


class Flashlight(OsuStrainSkill):
    """The skill required to memorise and hit every object in a map with the Flashlight mod enabled."""

    SKILL_MULTIPLIER = 0.05512
    STRAIN_DECAY_BASE = 0.15

    def __init__(self, mods: list[APIMod]) -> None:
        super().__init__(mods)
        self._hidden = self.has_mod("HD")

    def evaluate(self, current: OsuDifficultyHitObject) -> float:
        return flashlight.evaluate_difficulty_of(current, self._hidden)

    def difficulty_value(self) -> float:
        # no top section reduction and no weighting, every section counts fully
        return sum(self.get_current_strain_peaks())

    @staticmethod
    def difficulty_to_performance(difficulty: float) -> float:
        return 25 * math.pow(difficulty, 2)
