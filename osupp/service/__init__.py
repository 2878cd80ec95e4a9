from .attributes_cache import AttributesCacheService, get_attributes_cache_service

__all__ = ["AttributesCacheService", "get_attributes_cache_service"]
