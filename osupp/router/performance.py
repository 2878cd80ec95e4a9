from __future__ import annotations

from typing import Annotated

from osupp.calculator import calculate_beatmap_attributes, get_calculator
from osupp.calculators.performance import CalculateError, ConvertError
from osupp.dependencies.cache import AttributesCacheService
from osupp.log import log
from osupp.models.beatmap import Beatmap
from osupp.models.mods import APIMod, parse_mods
from osupp.models.performance import OsuDifficultyAttributes, OsuPerformanceAttributes
from osupp.models.score import GameMode, ScoreInfo

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, BeforeValidator, Field, model_validator

router = APIRouter(tags=["performance"])
logger = log("PerformanceRouter")


def _parse_ruleset(v):
    if isinstance(v, GameMode):
        return v
    mode = GameMode.parse(v)
    if mode is None:
        raise ValueError(f"Unknown ruleset: {v}")
    return mode


Ruleset = Annotated[GameMode, BeforeValidator(_parse_ruleset)]
Mods = Annotated[list[APIMod], BeforeValidator(parse_mods)]


class AvailableRulesetsResp(BaseModel):
    has_performance_calculator: list[str]
    has_difficulty_calculator: list[str]
    loaded_rulesets: list[str]


class DifficultyReq(BaseModel):
    beatmap: Beatmap
    mods: Mods = Field(default_factory=list)
    ruleset: Ruleset = GameMode.OSU


class PerformanceReq(BaseModel):
    beatmap: Beatmap | None = None
    attributes: OsuDifficultyAttributes | None = None
    score: ScoreInfo
    ruleset: Ruleset = GameMode.OSU

    @model_validator(mode="after")
    def check_source(self) -> PerformanceReq:
        if self.beatmap is None and self.attributes is None:
            raise ValueError("Either beatmap or attributes must be provided")
        return self


@router.get("/available_rulesets", response_model=AvailableRulesetsResp)
async def available_rulesets():
    modes = await get_calculator().get_available_modes()
    loaded = modes.has_performance_calculator | modes.has_difficulty_calculator
    return AvailableRulesetsResp(
        has_performance_calculator=sorted(mode.value for mode in modes.has_performance_calculator),
        has_difficulty_calculator=sorted(mode.value for mode in modes.has_difficulty_calculator),
        loaded_rulesets=sorted({mode.to_base_ruleset().value for mode in loaded}),
    )


@router.post("/difficulty", response_model=OsuDifficultyAttributes)
async def calculate_difficulty(req: DifficultyReq, cache: AttributesCacheService):
    ruleset = req.ruleset.to_special_mode(req.mods)
    try:
        return await calculate_beatmap_attributes(req.beatmap, ruleset, req.mods, cache)
    except CalculateError as e:
        logger.warning(f"Difficulty calculation failed: {e}")
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/performance", response_model=OsuPerformanceAttributes)
async def calculate_performance(req: PerformanceReq, cache: AttributesCacheService):
    ruleset = req.ruleset.to_special_mode(req.score.mods)
    calculator = get_calculator()
    try:
        if not await calculator.can_calculate_performance(ruleset):
            raise ConvertError(f"Cannot calculate performance for {ruleset}")
        attributes = req.attributes
        if attributes is None and req.beatmap is not None:
            attributes = await calculate_beatmap_attributes(req.beatmap, ruleset, req.score.mods, cache)
        return await calculator.calculate_performance(req.beatmap, req.score, attributes)
    except CalculateError as e:
        logger.warning(f"Performance calculation failed: {e}")
        raise HTTPException(status_code=422, detail=str(e))
