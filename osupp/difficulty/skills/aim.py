from osupp.difficulty.evaluators import aim
from osupp.difficulty.preprocessing import OsuDifficultyHitObject
from osupp.models.mods import APIMod

from ._base import OsuStrainSkill, sigmoid_count


class Aim(OsuStrainSkill):
    """The skill required to correctly aim at every object in the map with a uniform CircleSize and normalized distances."""

    SKILL_MULTIPLIER = 25.6
    STRAIN_DECAY_BASE = 0.15

    def __init__(self, mods: list[APIMod], include_sliders: bool) -> None:
        super().__init__(mods)
        self.include_sliders = include_sliders
        self.slider_strains: list[float] = []

    def evaluate(self, current: OsuDifficultyHitObject) -> float:
        return aim.evaluate_difficulty_of(current, self.include_sliders)

    def strain_value_at(self, current: OsuDifficultyHitObject) -> float:
        strain = super().strain_value_at(current)
        if current.base_object.is_slider:
            self.slider_strains.append(strain)
        return strain

    def get_difficult_sliders(self) -> float:
        return sigmoid_count(self.slider_strains)
