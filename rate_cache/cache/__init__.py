"""
환율 캐시 저장소와 신선도 판단
"""

from rate_cache.cache.freshness import FreshnessPolicy, cache_key, last_update_key
from rate_cache.cache.store import KeyedStore

__all__ = ["FreshnessPolicy", "KeyedStore", "cache_key", "last_update_key"]
