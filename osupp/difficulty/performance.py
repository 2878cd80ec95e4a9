"""Performance points for a play, from difficulty attributes and the score statistics."""

from collections.abc import Callable
import math

from osupp.log import calculator_logger
from osupp.models.mods import has_mod
from osupp.models.performance import OsuDifficultyAttributes, OsuPerformanceAttributes
from osupp.models.score import ScoreInfo

from .calculator import PERFORMANCE_BASE_MULTIPLIER
from .skills import Flashlight, OsuStrainSkill
from .utils import clamp, power_mean

LENGTH_BONUS_THRESHOLD = 1800.0
MISS_PENALTY_BASE = 0.96
ACCURACY_EXPONENT = 4
COMBINE_POWER = 1.1

logger = calculator_logger("OsuPerformanceCalculator")


class OsuPerformanceCalculator:
    def __init__(self, attributes: OsuDifficultyAttributes) -> None:
        self.attributes = attributes

    def calculate(self, score: ScoreInfo) -> OsuPerformanceAttributes:
        total_hits = score.total_hits or self.attributes.object_count
        miss_count = score.miss_count

        multiplier = PERFORMANCE_BASE_MULTIPLIER

        if has_mod(score.mods, "NF"):
            multiplier *= 0.9

        if has_mod(score.mods, "SO") and total_hits > 0:
            multiplier *= 1.0 - math.pow(min(1.0, self.attributes.spinner_count / total_hits), 0.85)

        aim_value = 0.0
        speed_value = 0.0
        if not has_mod(score.mods, "AP"):
            aim_value = self._compute_component_value(
                OsuStrainSkill.difficulty_to_performance, self.attributes.aim_difficulty, score, total_hits
            )
        if not has_mod(score.mods, "RX"):
            speed_value = self._compute_component_value(
                OsuStrainSkill.difficulty_to_performance, self.attributes.speed_difficulty, score, total_hits
            )
        flashlight_value = 0.0
        if has_mod(score.mods, "FL"):
            flashlight_value = self._compute_component_value(
                Flashlight.difficulty_to_performance, self.attributes.flashlight_difficulty, score, total_hits
            )

        total_value = power_mean([aim_value, speed_value, flashlight_value], COMBINE_POWER) * multiplier

        logger.debug(
            f"aim={aim_value:.2f} speed={speed_value:.2f} flashlight={flashlight_value:.2f} "
            f"total={total_value:.2f} misses={miss_count}"
        )
        return OsuPerformanceAttributes(
            pp=total_value,
            aim=aim_value,
            speed=speed_value,
            flashlight=flashlight_value,
            effective_miss_count=float(miss_count),
        )

    def _compute_component_value(
        self,
        to_performance: Callable[[float], float],
        difficulty: float,
        score: ScoreInfo,
        total_hits: int,
    ) -> float:
        if difficulty <= 0:
            return 0.0

        attributes = self.attributes
        value = to_performance(difficulty)

        length_bonus = 0.7 + 0.6 * min(1.0, total_hits / LENGTH_BONUS_THRESHOLD)
        if total_hits > LENGTH_BONUS_THRESHOLD:
            length_bonus += 0.2 * math.log10(total_hits / LENGTH_BONUS_THRESHOLD + 1.0)
        value *= length_bonus

        if score.miss_count > 0:
            value *= math.pow(MISS_PENALTY_BASE, score.miss_count)

        # precision bonus for small circles
        if attributes.circle_size > 5.58:
            value *= math.pow(math.pow(attributes.circle_size - 5.46, 1.8) + 1.0, 0.03)

        # reaction bonus for very high approach rates
        if attributes.approach_rate > 10.8:
            value *= 1.0 + (attributes.approach_rate - 10.8)
            value *= 1.0 + clamp(attributes.circle_size - 6.0, 0.0, 0.2)

        value *= math.pow(score.accuracy, ACCURACY_EXPONENT)

        value *= 0.98 + math.pow(max(0.0, attributes.overall_difficulty), 2) / 2500.0

        return value
