from typing import Annotated

from osupp.config import settings
from osupp.service.attributes_cache import (
    AttributesCacheService as OriginAttributesCacheService,
    get_attributes_cache_service,
)

from fastapi import Depends
import redis.asyncio as redis

# Redis 连接
redis_client = redis.from_url(settings.redis_url, decode_responses=True)


# Redis 依赖
def get_redis():
    return redis_client


Redis = Annotated[redis.Redis, Depends(get_redis)]


def get_attributes_cache_dependency(redis: Redis) -> OriginAttributesCacheService | None:
    """获取难度属性缓存服务依赖，未启用缓存时为 None"""
    if not settings.enable_attributes_cache:
        return None
    return get_attributes_cache_service(redis)


AttributesCacheService = Annotated[OriginAttributesCacheService | None, Depends(get_attributes_cache_dependency)]
