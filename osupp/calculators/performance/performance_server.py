"""Calculator that forwards requests to a remote osupp performance server."""

import asyncio
import datetime
from typing import cast

from typing_extensions import TypedDict

from osupp.models.beatmap import Beatmap
from osupp.models.mods import APIMod
from osupp.models.performance import (
    DifficultyAttributes,
    OsuDifficultyAttributes,
    OsuPerformanceAttributes,
    PerformanceAttributes,
)
from osupp.models.score import GameMode, ScoreInfo

from ._base import (
    AvailableModes,
    CalculateError,
    DifficultyError,
    PerformanceCalculator as BasePerformanceCalculator,
    PerformanceError,
)

from httpx import AsyncClient, HTTPError


class AvailableRulesetResp(TypedDict):
    has_performance_calculator: list[str]
    has_difficulty_calculator: list[str]
    loaded_rulesets: list[str]


class PerformanceServerPerformanceCalculator(BasePerformanceCalculator):
    def __init__(self, server_url: str = "http://localhost:5225", timeout: float = 15) -> None:
        self.server_url = server_url.removesuffix("/")
        self.timeout = timeout

        self._available_modes: AvailableModes | None = None
        self._modes_lock = asyncio.Lock()
        self._today = datetime.date.today()

    async def init(self):
        await self.get_available_modes()

    def _process_modes(self, modes: AvailableRulesetResp) -> AvailableModes:
        performance_modes = {
            m for mode in modes["has_performance_calculator"] if (m := GameMode.parse(mode)) is not None
        }
        difficulty_modes = {m for mode in modes["has_difficulty_calculator"] if (m := GameMode.parse(mode)) is not None}
        return AvailableModes(
            has_performance_calculator=performance_modes,
            has_difficulty_calculator=difficulty_modes,
        )

    async def get_available_modes(self) -> AvailableModes:
        # cached for the day, the remote server does not change its rulesets at runtime
        if self._available_modes is not None and self._today == datetime.date.today():
            return self._available_modes
        async with self._modes_lock, AsyncClient(timeout=self.timeout) as client:
            try:
                resp = await client.get(f"{self.server_url}/available_rulesets")
                if resp.status_code != 200:
                    raise CalculateError(f"Failed to get available modes: {resp.text}")
                modes = cast(AvailableRulesetResp, resp.json())
                result = self._process_modes(modes)

                self._available_modes = result
                self._today = datetime.date.today()
                return result
            except HTTPError as e:
                raise CalculateError(f"Failed to get available modes: {e}") from e

    async def calculate_performance(
        self,
        beatmap: Beatmap | None,
        score: ScoreInfo,
        attributes: DifficultyAttributes | None = None,
    ) -> PerformanceAttributes:
        payload: dict = {"score": score.model_dump(mode="json")}
        if attributes is not None:
            payload["attributes"] = attributes.model_dump(mode="json")
        elif beatmap is not None:
            payload["beatmap"] = beatmap.model_dump(mode="json")
        else:
            raise PerformanceError("Either a beatmap or difficulty attributes are required")

        async with AsyncClient(timeout=self.timeout) as client:
            try:
                resp = await client.post(f"{self.server_url}/performance", json=payload)
                if resp.status_code != 200:
                    raise PerformanceError(f"Failed to calculate performance: {resp.text}")
                return OsuPerformanceAttributes.model_validate_json(resp.text)
            except HTTPError as e:
                raise PerformanceError(f"Failed to calculate performance: {e}") from e

    async def calculate_difficulty(
        self, beatmap: Beatmap, mods: list[APIMod] | None = None, gamemode: GameMode | None = None
    ) -> DifficultyAttributes:
        async with AsyncClient(timeout=self.timeout) as client:
            try:
                resp = await client.post(
                    f"{self.server_url}/difficulty",
                    json={
                        "beatmap": beatmap.model_dump(mode="json"),
                        "mods": mods or [],
                        "ruleset": (gamemode or GameMode.OSU).value,
                    },
                )
                if resp.status_code != 200:
                    raise DifficultyError(f"Failed to calculate difficulty: {resp.text}")
                return OsuDifficultyAttributes.model_validate_json(resp.text)
            except HTTPError as e:
                raise DifficultyError(f"Failed to calculate difficulty: {e}") from e


PerformanceCalculator = PerformanceServerPerformanceCalculator
