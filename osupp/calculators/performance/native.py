"""In-process calculator backed by ``osupp.difficulty``."""

from asyncio import get_event_loop
from typing import ClassVar

from osupp.difficulty.calculator import OsuDifficultyCalculator
from osupp.difficulty.performance import OsuPerformanceCalculator
from osupp.log import calculator_logger
from osupp.models.beatmap import Beatmap
from osupp.models.mods import APIMod, has_mod
from osupp.models.performance import DifficultyAttributes, OsuDifficultyAttributes, PerformanceAttributes
from osupp.models.score import GameMode, ScoreInfo

from ._base import (
    AvailableModes,
    CalculateError,
    ConvertError,
    DifficultyError,
    PerformanceCalculator as BasePerformanceCalculator,
    PerformanceError,
)

logger = calculator_logger("NativePerformanceCalculator")


class NativePerformanceCalculator(BasePerformanceCalculator):
    SUPPORT_MODES: ClassVar[set[GameMode]] = {
        GameMode.OSU,
        GameMode.OSURX,
        GameMode.OSUAP,
    }

    def __init__(self, parallel_skills: bool | None = None, skill_workers: int | None = None) -> None:
        self.parallel_skills = parallel_skills
        self.skill_workers = skill_workers

    async def init(self) -> None:
        logger.info(f"Native calculator ready, difficulty version {OsuDifficultyCalculator.VERSION}")

    async def get_available_modes(self) -> AvailableModes:
        return AvailableModes(
            has_performance_calculator=self.SUPPORT_MODES,
            has_difficulty_calculator=self.SUPPORT_MODES,
        )

    def _check_mode(self, gamemode: GameMode | None, mods: list[APIMod]) -> None:
        if gamemode is None:
            return
        if gamemode not in self.SUPPORT_MODES:
            raise ConvertError(f"Cannot convert beatmap to {gamemode}")
        # the special modes only make sense with their mod
        if gamemode == GameMode.OSURX and not has_mod(mods, "RX"):
            raise ConvertError("osurx requires the RX mod")
        if gamemode == GameMode.OSUAP and not has_mod(mods, "AP"):
            raise ConvertError("osuap requires the AP mod")

    def _calculate_difficulty(self, beatmap: Beatmap, mods: list[APIMod]) -> OsuDifficultyAttributes:
        calculator = OsuDifficultyCalculator(
            beatmap,
            parallel_skills=self.parallel_skills,
            skill_workers=self.skill_workers,
        )
        return calculator.calculate(mods)

    async def calculate_difficulty(
        self, beatmap: Beatmap, mods: list[APIMod] | None = None, gamemode: GameMode | None = None
    ) -> DifficultyAttributes:
        mods = mods or []
        self._check_mode(gamemode, mods)
        try:
            return await get_event_loop().run_in_executor(None, self._calculate_difficulty, beatmap, mods)
        except (ArithmeticError, ValueError) as e:
            raise DifficultyError(f"Difficulty calculation failed: {e}") from e
        except Exception as e:
            raise CalculateError(f"Unknown error: {e}") from e

    def _calculate_performance(
        self, beatmap: Beatmap | None, score: ScoreInfo, attributes: OsuDifficultyAttributes | None
    ) -> PerformanceAttributes:
        if attributes is None:
            assert beatmap is not None
            attributes = self._calculate_difficulty(beatmap, score.mods)
        return OsuPerformanceCalculator(attributes).calculate(score)

    async def calculate_performance(
        self,
        beatmap: Beatmap | None,
        score: ScoreInfo,
        attributes: DifficultyAttributes | None = None,
    ) -> PerformanceAttributes:
        if attributes is not None and not isinstance(attributes, OsuDifficultyAttributes):
            raise PerformanceError("Only osu!standard difficulty attributes are supported")
        if attributes is None and beatmap is None:
            raise PerformanceError("Either a beatmap or difficulty attributes are required")
        try:
            return await get_event_loop().run_in_executor(
                None, self._calculate_performance, beatmap, score, attributes
            )
        except (ArithmeticError, ValueError) as e:
            raise PerformanceError(f"Performance calculation failed: {e}") from e
        except Exception as e:
            raise CalculateError(f"Unknown error: {e}") from e


PerformanceCalculator = NativePerformanceCalculator
