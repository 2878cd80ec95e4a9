"""
难度属性缓存测试
使用内存中的 Redis 替身
"""

import asyncio
import fnmatch

from osupp.calculator import calculate_beatmap_attributes, init_calculator
from osupp.difficulty.calculator import OsuDifficultyCalculator
from osupp.models.mods import parse_mods
from osupp.models.score import GameMode
from osupp.service.attributes_cache import AttributesCacheService, beatmap_identity


class FakeRedis:
    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.expire: dict[str, int] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def setex(self, key: str, seconds: int, value: str) -> None:
        self.data[key] = value
        self.expire[key] = seconds

    async def keys(self, pattern: str) -> list[str]:
        return [key for key in self.data if fnmatch.fnmatchcase(key, pattern)]

    async def delete(self, *keys: str) -> int:
        for key in keys:
            self.data.pop(key, None)
        return len(keys)


class BrokenRedis:
    async def get(self, key: str):
        raise ConnectionError("redis is down")

    async def setex(self, key: str, seconds: int, value: str):
        raise ConnectionError("redis is down")


def test_beatmap_identity(beatmap):
    """有 checksum 时使用 checksum，否则使用内容哈希"""
    assert beatmap_identity(beatmap.model_copy(update={"checksum": "abc"})) == "abc"
    assert beatmap_identity(beatmap) == beatmap_identity(beatmap.model_copy())
    assert len(beatmap_identity(beatmap)) == 32


def test_cache_round_trip(beatmap):
    """缓存写入后能够读出，键中包含版本号"""

    async def run():
        redis = FakeRedis()
        cache = AttributesCacheService(redis)  # pyright: ignore[reportArgumentType]
        mods = parse_mods(["HD", "HR"])
        attributes = OsuDifficultyCalculator(beatmap).calculate(mods)

        assert await cache.get(beatmap, GameMode.OSU, mods) is None
        await cache.set(beatmap, GameMode.OSU, mods, attributes, expire_seconds=60)

        (key,) = redis.data
        assert key.endswith(f":v{OsuDifficultyCalculator.VERSION}:attributes")
        assert redis.expire[key] == 60
        assert await cache.get(beatmap, GameMode.OSU, parse_mods(["HR", "HD"])) == attributes
        assert await cache.get(beatmap, GameMode.OSU, []) is None

        # a new algorithm version never reads old entries
        version = OsuDifficultyCalculator.VERSION + 1
        newer = AttributesCacheService(redis, version=version)  # pyright: ignore[reportArgumentType]
        assert await newer.get(beatmap, GameMode.OSU, mods) is None

        assert await cache.invalidate(beatmap) == 1
        assert redis.data == {}

    asyncio.run(run())


def test_cache_errors_are_logged(beatmap):
    """Redis 出错时不影响计算"""

    async def run():
        cache = AttributesCacheService(BrokenRedis())  # pyright: ignore[reportArgumentType]
        attributes = OsuDifficultyCalculator(beatmap).calculate([])
        assert await cache.get(beatmap, GameMode.OSU, []) is None
        await cache.set(beatmap, GameMode.OSU, [], attributes)
        assert await cache.invalidate(beatmap) == 0

    asyncio.run(run())


def test_calculate_with_cache(beatmap):
    """第二次计算命中缓存"""

    async def run():
        await init_calculator()
        redis = FakeRedis()
        cache = AttributesCacheService(redis)  # pyright: ignore[reportArgumentType]
        mods = parse_mods(["DT", "NF"])

        first = await calculate_beatmap_attributes(beatmap, GameMode.OSU, mods, cache)
        assert len(redis.data) == 1

        # a changed entry proves the second call is served from the cache
        (key,) = redis.data
        redis.data[key] = first.model_copy(update={"star_rating": 42.0}).model_dump_json()
        second = await calculate_beatmap_attributes(beatmap, GameMode.OSU, mods, cache)
        assert second.star_rating == 42.0

        uncached = await calculate_beatmap_attributes(beatmap, GameMode.OSU, mods)
        assert uncached == first

    asyncio.run(run())
