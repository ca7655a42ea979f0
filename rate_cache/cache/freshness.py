"""
캐시 키 규칙과 만료 판단
"""

from __future__ import annotations

from datetime import timedelta
from typing import Callable
import time

from rate_cache.cache.store import KeyedStore

CACHE_KEY_PREFIX = "quote:"
LAST_UPDATE_SUFFIX = "_last_update"


def cache_key(symbol_or_address: str) -> str:
    return f"{CACHE_KEY_PREFIX}{symbol_or_address}"


def last_update_key(symbol_or_address: str) -> str:
    return f"{cache_key(symbol_or_address)}{LAST_UPDATE_SUFFIX}"


class FreshnessPolicy:
    """
    저장소를 읽기만 하는 판단기.

    - is_expired: 마지막 갱신 시각이 없거나 period보다 오래됐으면 True
    - is_empty: 값이 없거나 0이면 True (0은 '한 번도 성공하지 못함'과 같게 취급)

    clock은 초 단위 float를 돌려주는 함수이며, RefreshWorker와 같은 것을 써야 합니다.
    """

    def __init__(
        self,
        store: KeyedStore,
        period: timedelta,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self.period = period
        self.clock = clock

    def is_expired(self, symbol_or_address: str) -> bool:
        updated_at = self._store.get(last_update_key(symbol_or_address))
        if updated_at is None:
            return True
        return self.clock() - updated_at > self.period.total_seconds()

    def is_empty(self, symbol_or_address: str) -> bool:
        value = self._store.get(cache_key(symbol_or_address))
        return value is None or value == 0
