from osupp.difficulty.evaluators import relax_aim
from osupp.difficulty.preprocessing import OsuDifficultyHitObject
from osupp.models.mods import APIMod

from ._base import OsuStrainSkill, sigmoid_count


class Relax(OsuStrainSkill):
    """The skill required to aim patterns when the Relax mod is enabled.

    ``hit_window`` is the half width of the great window divided by the clock rate,
    used by the rhythm complexity of short jumps.
    """

    SKILL_MULTIPLIER = 24.16
    STRAIN_DECAY_BASE = 0.15

    def __init__(self, mods: list[APIMod], include_sliders: bool, hit_window: float) -> None:
        super().__init__(mods)
        self.include_sliders = include_sliders
        self.hit_window = hit_window
        self.slider_strains: list[float] = []

    def evaluate(self, current: OsuDifficultyHitObject) -> float:
        return relax_aim.evaluate_difficulty_of(current, self.hit_window, self.include_sliders)

    def strain_value_at(self, current: OsuDifficultyHitObject) -> float:
        strain = super().strain_value_at(current)
        if current.base_object.is_slider:
            self.slider_strains.append(strain)
        return strain

    def get_difficult_sliders(self) -> float:
        return sigmoid_count(self.slider_strains)
