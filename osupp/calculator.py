import importlib

from osupp.calculators.performance import PerformanceCalculator
from osupp.config import settings
from osupp.log import log
from osupp.models.beatmap import Beatmap
from osupp.models.mods import APIMod, difficulty_mods
from osupp.models.performance import DifficultyAttributes, OsuDifficultyAttributes
from osupp.models.score import GameMode
from osupp.service.attributes_cache import AttributesCacheService

logger = log("Calculator")

CALCULATOR: PerformanceCalculator | None = None


async def init_calculator():
    global CALCULATOR
    try:
        module = importlib.import_module(f"osupp.calculators.performance.{settings.calculator}")
        CALCULATOR = module.PerformanceCalculator(**settings.calculator_config)
        if CALCULATOR is not None:
            await CALCULATOR.init()
    except (ImportError, AttributeError) as e:
        raise ImportError(f"Failed to import performance calculator for {settings.calculator}") from e
    logger.info(f"Using performance calculator: {settings.calculator}")
    return CALCULATOR


def get_calculator() -> PerformanceCalculator:
    if CALCULATOR is None:
        raise RuntimeError("Performance calculator is not initialized")
    return CALCULATOR


async def calculate_beatmap_attributes(
    beatmap: Beatmap,
    ruleset: GameMode,
    mods: list[APIMod],
    cache: AttributesCacheService | None = None,
) -> DifficultyAttributes:
    """Difficulty attributes for ``beatmap``, served from the cache when one is given."""
    mods = difficulty_mods(mods)
    if cache is not None:
        cached = await cache.get(beatmap, ruleset, mods)
        if cached is not None:
            return cached

    attributes = await get_calculator().calculate_difficulty(beatmap, mods, ruleset)
    if cache is not None and isinstance(attributes, OsuDifficultyAttributes):
        await cache.set(beatmap, ruleset, mods, attributes)
    return attributes
