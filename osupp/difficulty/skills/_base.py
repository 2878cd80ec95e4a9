import abc
from collections.abc import Iterable
import math
from typing import ClassVar

from osupp.difficulty.preprocessing import OsuDifficultyHitObject
from osupp.difficulty.utils import lerp
from osupp.models.mods import APIMod, has_mod

DIFFICULTY_MULTIPLIER = 0.0675


class StrainSkill(abc.ABC):
    """Accumulates a decaying strain over the difficulty objects of one map.

    The strain is sampled per fixed-length section; every section keeps only its
    highest strain. An instance belongs to a single calculation and must see the
    objects in order.
    """

    SECTION_LENGTH: ClassVar[int] = 400
    DECAY_WEIGHT: ClassVar[float] = 0.9

    def __init__(self, mods: list[APIMod]) -> None:
        self.mods = mods
        self.object_strains: list[float] = []
        self._strain_peaks: list[float] = []
        self._current_section_peak = 0.0
        self._current_section_end = 0.0

    def has_mod(self, acronym: str) -> bool:
        return has_mod(self.mods, acronym)

    @abc.abstractmethod
    def strain_value_at(self, current: OsuDifficultyHitObject) -> float:
        raise NotImplementedError

    @abc.abstractmethod
    def calculate_initial_strain(self, time: float, current: OsuDifficultyHitObject) -> float:
        """The strain a new section starts with at ``time``, before ``current`` is processed."""
        raise NotImplementedError

    def process(self, current: OsuDifficultyHitObject) -> None:
        # the first object doesn't generate a strain, so begin with an incremented section end
        if current.index == 0:
            self._current_section_end = math.ceil(current.start_time / self.SECTION_LENGTH) * self.SECTION_LENGTH

        while current.start_time > self._current_section_end:
            self._save_current_peak()
            self._start_new_section_from(self._current_section_end, current)
            self._current_section_end += self.SECTION_LENGTH

        strain = self.strain_value_at(current)
        self._current_section_peak = max(strain, self._current_section_peak)
        self.object_strains.append(strain)

    def process_all(self, objects: Iterable[OsuDifficultyHitObject]) -> None:
        for obj in objects:
            self.process(obj)

    def _save_current_peak(self) -> None:
        self._strain_peaks.append(self._current_section_peak)

    def _start_new_section_from(self, time: float, current: OsuDifficultyHitObject) -> None:
        # the maximum strain of the new section is not zero by default,
        # it starts from the decayed strain at the section boundary
        self._current_section_peak = self.calculate_initial_strain(time, current)

    def get_current_strain_peaks(self) -> list[float]:
        """All section peaks, including the section still in progress."""
        return [*self._strain_peaks, self._current_section_peak]

    def difficulty_value(self) -> float:
        difficulty = 0.0
        weight = 1.0

        # sections with 0 strain are excluded to avoid worst-case time complexity
        # and to keep the weighting consistent for maps with breaks
        for strain in sorted((p for p in self.get_current_strain_peaks() if p > 0), reverse=True):
            difficulty += strain * weight
            weight *= self.DECAY_WEIGHT

        return difficulty

    def count_top_weighted_strains(self) -> float:
        """Continuous count of the sections that are as hard as the top of the map.

        Finds the strain ``L`` for which ``N`` identical peaks would give the same
        difficulty value, then counts every peak relative to it.
        """
        peaks = [p for p in self.get_current_strain_peaks() if p > 0]
        if not peaks:
            return 0.0

        difficulty = self.difficulty_value()
        # sum of L * w^i for i < N, solved for L
        level = difficulty * (1 - self.DECAY_WEIGHT) / (1 - math.pow(self.DECAY_WEIGHT, len(peaks)))
        if level == 0:
            return float(len(peaks))

        return sum(min(1.0, peak / level) for peak in peaks)


class OsuStrainSkill(StrainSkill):
    """A strain skill driven by one evaluator, with the top sections damped.

    Subclasses provide ``SKILL_MULTIPLIER``, ``STRAIN_DECAY_BASE`` and ``evaluate``.
    """

    SKILL_MULTIPLIER: ClassVar[float]
    STRAIN_DECAY_BASE: ClassVar[float]

    # the number of sections with the highest strains, which are reduced
    REDUCED_SECTION_COUNT: ClassVar[int] = 10
    # the baseline multiplier applied to the section with the biggest strain
    REDUCED_STRAIN_BASELINE: ClassVar[float] = 0.75

    def __init__(self, mods: list[APIMod]) -> None:
        super().__init__(mods)
        self.current_strain = 0.0

    @abc.abstractmethod
    def evaluate(self, current: OsuDifficultyHitObject) -> float:
        raise NotImplementedError

    def strain_decay(self, ms: float) -> float:
        return math.pow(self.STRAIN_DECAY_BASE, ms / 1000)

    def calculate_initial_strain(self, time: float, current: OsuDifficultyHitObject) -> float:
        previous = current.previous(0)
        assert previous is not None
        return self.current_strain * self.strain_decay(time - previous.start_time)

    def strain_value_at(self, current: OsuDifficultyHitObject) -> float:
        self.current_strain *= self.strain_decay(current.delta_time)
        self.current_strain += self.evaluate(current) * self.SKILL_MULTIPLIER
        return self.current_strain

    def difficulty_value(self) -> float:
        strains = sorted((p for p in self.get_current_strain_peaks() if p > 0), reverse=True)

        # higher sections are reduced so a few hard sections can't carry the whole map
        for i in range(min(len(strains), self.REDUCED_SECTION_COUNT)):
            scale = math.log10(lerp(1, 10, min(max(i / self.REDUCED_SECTION_COUNT, 0.0), 1.0)))
            strains[i] *= lerp(self.REDUCED_STRAIN_BASELINE, 1.0, scale)

        difficulty = 0.0
        weight = 1.0
        for strain in sorted(strains, reverse=True):
            difficulty += strain * weight
            weight *= self.DECAY_WEIGHT

        return difficulty

    @staticmethod
    def difficulty_to_performance(difficulty: float) -> float:
        return math.pow(5.0 * max(1.0, difficulty / DIFFICULTY_MULTIPLIER) - 4.0, 3.0) / 100000.0


def sigmoid_count(strains: list[float]) -> float:
    """Sigmoid weighted count of the strains, relative to the highest one."""
    if not strains:
        return 0.0

    max_strain = max(strains)
    if max_strain == 0:
        return 0.0

    return sum(1.0 / (1.0 + math.exp(-(strain / max_strain * 12.0 - 6.0))) for strain in strains)
