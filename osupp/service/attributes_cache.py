"""
难度属性缓存服务
以谱面、模式、Mods 与算法版本为键缓存难度属性，算法版本变化后旧缓存自然失效
"""

from __future__ import annotations

import hashlib

from osupp.config import settings
from osupp.difficulty.calculator import OsuDifficultyCalculator
from osupp.log import service_logger
from osupp.models.beatmap import Beatmap
from osupp.models.mods import APIMod, mods_hash
from osupp.models.performance import OsuDifficultyAttributes
from osupp.models.score import GameMode

from redis.asyncio import Redis

logger = service_logger("AttributesCacheService")


def beatmap_identity(beatmap: Beatmap) -> str:
    """谱面标识：优先使用 checksum，否则使用内容哈希"""
    if beatmap.checksum:
        return beatmap.checksum
    return hashlib.md5(beatmap.model_dump_json().encode()).hexdigest()


class AttributesCacheService:
    """难度属性缓存服务"""

    def __init__(self, redis: Redis, version: int = OsuDifficultyCalculator.VERSION):
        self.redis = redis
        self.version = version

    def _get_cache_key(self, beatmap: Beatmap, ruleset: GameMode, mods: list[APIMod]) -> str:
        return f"beatmap:{beatmap_identity(beatmap)}:{ruleset}:{mods_hash(mods)}:v{self.version}:attributes"

    async def get(self, beatmap: Beatmap, ruleset: GameMode, mods: list[APIMod]) -> OsuDifficultyAttributes | None:
        """从缓存获取难度属性"""
        try:
            cached_data = await self.redis.get(self._get_cache_key(beatmap, ruleset, mods))
            if cached_data:
                logger.debug(f"Attributes cache hit for {beatmap_identity(beatmap)}")
                return OsuDifficultyAttributes.model_validate_json(cached_data)
            return None
        except Exception as e:
            logger.error(f"Error getting attributes from cache: {e}")
            return None

    async def set(
        self,
        beatmap: Beatmap,
        ruleset: GameMode,
        mods: list[APIMod],
        attributes: OsuDifficultyAttributes,
        expire_seconds: int | None = None,
    ) -> None:
        """缓存难度属性"""
        try:
            if expire_seconds is None:
                expire_seconds = settings.attributes_cache_expire
            await self.redis.setex(
                self._get_cache_key(beatmap, ruleset, mods), expire_seconds, attributes.model_dump_json()
            )
            logger.debug(f"Cached attributes for {beatmap_identity(beatmap)} for {expire_seconds}s")
        except Exception as e:
            logger.error(f"Error caching attributes: {e}")

    async def invalidate(self, beatmap: Beatmap) -> int:
        """使某个谱面的全部缓存失效"""
        try:
            keys = await self.redis.keys(f"beatmap:{beatmap_identity(beatmap)}:*")
            if keys:
                await self.redis.delete(*keys)
                logger.info(f"Invalidated {len(keys)} attributes cache entries")
            return len(keys)
        except Exception as e:
            logger.error(f"Error invalidating attributes cache: {e}")
            return 0


# 全局缓存服务实例
_attributes_cache_service: AttributesCacheService | None = None


def get_attributes_cache_service(redis: Redis) -> AttributesCacheService:
    """获取难度属性缓存服务实例"""
    global _attributes_cache_service
    if _attributes_cache_service is None:
        _attributes_cache_service = AttributesCacheService(redis)
    return _attributes_cache_service
