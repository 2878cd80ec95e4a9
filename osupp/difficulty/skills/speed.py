from osupp.difficulty.evaluators import rhythm, speed
from osupp.difficulty.preprocessing import OsuDifficultyHitObject
from osupp.models.mods import APIMod

from ._base import OsuStrainSkill, sigmoid_count


class Speed(OsuStrainSkill):
    """The skill required to press keys with regards to keeping up with the speed at which objects need to be hit."""

    SKILL_MULTIPLIER = 1.46
    STRAIN_DECAY_BASE = 0.3
    REDUCED_SECTION_COUNT = 5

    def __init__(self, mods: list[APIMod]) -> None:
        super().__init__(mods)
        self.current_rhythm = 0.0
        self._autopilot = self.has_mod("AP")

    def evaluate(self, current: OsuDifficultyHitObject) -> float:
        return speed.evaluate_difficulty_of(current, self._autopilot)

    def calculate_initial_strain(self, time: float, current: OsuDifficultyHitObject) -> float:
        previous = current.previous(0)
        assert previous is not None
        return (self.current_strain * self.current_rhythm) * self.strain_decay(time - previous.start_time)

    def strain_value_at(self, current: OsuDifficultyHitObject) -> float:
        self.current_strain *= self.strain_decay(current.strain_time)
        self.current_strain += self.evaluate(current) * self.SKILL_MULTIPLIER

        self.current_rhythm = rhythm.evaluate_difficulty_of(current, current.hit_window_great / 2)

        return self.current_strain * self.current_rhythm

    def relevant_note_count(self) -> float:
        return sigmoid_count(self.object_strains)
