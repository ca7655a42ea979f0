"""
==============================================================================
토큰 환율 캐시 서비스 (exchange_rate_service.py)
==============================================================================

stale-while-revalidate 방식으로 토큰의 USD 환율을 제공합니다.

읽기 흐름 (fetch):
    1. 캐시가 만료됐거나 비어 있으면 백그라운드 갱신 작업을 시작 (기다리지 않음)
    2. 캐시 값을 읽음
    3. 캐시 값이 없거나 0이면 DB의 exchange_rate를 반환

갱신 흐름 (RefreshWorker.refresh):
    1. 마지막 갱신 시각을 먼저 기록 (이후 period 동안 같은 키는 만료로 보지 않음)
    2. 시세 제공자 호출 (실패하면 None)
    3. 토큰이 있고 값이 있으면 DB 갱신
    4. 값이 있으면 캐시 갱신

주소 기반 조회(fetch)를 권장합니다.
심볼 기반 조회(fetch_by_symbol)는 서로 다른 토큰의 심볼이 겹칠 수 있습니다.

==============================================================================
"""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from datetime import timedelta
from decimal import Decimal
from typing import Any, Callable, Literal, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from rate_cache.cache.freshness import FreshnessPolicy, cache_key, last_update_key
from rate_cache.cache.store import KeyedStore
from rate_cache.config import Settings
from rate_cache.quotes.errors import QuoteError
from rate_cache.quotes.transformers import Quote
from rate_cache.services.token_store import TokenStore

logger = logging.getLogger(__name__)

LookupType = Literal["address", "symbol"]


class QuoteProvider(Protocol):
    async def quote_by_symbol(self, symbol: str) -> list[Quote]: ...

    async def quote_by_address(self, address: str) -> list[Quote]: ...


def _single_usd_value(quotes: list[Quote]) -> Optional[Decimal]:
    # 정확히 한 건일 때만 사용. 여러 건이면 심볼 충돌로 보고 값 없음 처리
    if len(quotes) != 1:
        return None
    return quotes[0].usd_value


class RefreshWorker:
    def __init__(
        self,
        store: KeyedStore,
        provider: QuoteProvider,
        tokens: TokenStore,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._provider = provider
        self._tokens = tokens
        self._clock = clock

    async def refresh(self, token_hash: Optional[str], lookup: str, by: LookupType = "address") -> Optional[Decimal]:
        self.put_into_cache(last_update_key(lookup), self._clock())

        if by == "symbol":
            exchange_rate = await self.fetch_exchange_rate(lookup)
        else:
            exchange_rate = await self.fetch_exchange_rate_by_address(lookup)

        await self.put_into_db(token_hash, exchange_rate)
        if exchange_rate is not None:
            self.put_into_cache(cache_key(lookup), exchange_rate)
        return exchange_rate

    async def fetch_exchange_rate(self, symbol: str) -> Optional[Decimal]:
        try:
            quotes = await self._provider.quote_by_symbol(symbol)
        except QuoteError as exc:
            logger.warning("exchange rate fetch failed for symbol %s: %s", symbol, exc.message)
            return None
        return _single_usd_value(quotes)

    async def fetch_exchange_rate_by_address(self, address: str) -> Optional[Decimal]:
        try:
            quotes = await self._provider.quote_by_address(address)
        except QuoteError as exc:
            logger.warning("exchange rate fetch failed for address %s: %s", address, exc.message)
            return None
        return _single_usd_value(quotes)

    async def put_into_db(self, token_hash: Optional[str], exchange_rate: Optional[Decimal]) -> bool:
        if token_hash is None or exchange_rate is None:
            return False
        try:
            token = await self._tokens.find_by_hash(token_hash)
            if token is None:
                return False
            return await self._tokens.update_exchange_rate(token, exchange_rate)
        except SQLAlchemyError as exc:
            logger.warning("exchange rate write failed for token %s: %s", token_hash, exc)
            return False

    def put_into_cache(self, key: str, value: Any) -> None:
        self._store.put(key, value)


class ExchangeRateService:
    def __init__(
        self,
        store: KeyedStore,
        provider: QuoteProvider,
        tokens: TokenStore,
        period: timedelta,
        *,
        clock: Callable[[], float] = time.monotonic,
        enable_consolidation: bool = False,
    ) -> None:
        self.store = store
        self.tokens = tokens
        self.policy = FreshnessPolicy(store, period, clock)
        self.worker = RefreshWorker(store, provider, tokens, clock)
        # 호환성 유지용 플래그. 현재 어떤 동작도 바꾸지 않습니다.
        self.enable_consolidation = enable_consolidation
        self._tasks: set[asyncio.Task] = set()
        # 갱신이 진행 중인 캐시 키. 같은 키에 대해 작업을 하나만 띄움
        self._inflight: set[str] = set()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: KeyedStore,
        provider: QuoteProvider,
        tokens: TokenStore,
    ) -> "ExchangeRateService":
        return cls(
            store,
            provider,
            tokens,
            settings.token_exchange_rate_cache_period,
            enable_consolidation=settings.token_exchange_rate_enable_consolidation,
        )

    @property
    def pending_refreshes(self) -> int:
        return len(self._tasks)

    async def fetch(self, token_hash: Optional[str], address_hash: str) -> Optional[Decimal]:
        return await self._fetch(token_hash, address_hash, "address")

    async def fetch_by_symbol(self, token_hash: Optional[str], symbol: str) -> Optional[Decimal]:
        # 심볼 충돌 가능성이 있으므로 가능하면 fetch()를 사용
        return await self._fetch(token_hash, symbol, "symbol")

    async def fetch_from_db(self, token_hash: Optional[str]) -> Optional[Decimal]:
        if token_hash is None:
            return None
        try:
            token = await self.tokens.find_by_hash(token_hash)
        except SQLAlchemyError as exc:
            logger.warning("exchange rate read failed for token %s: %s", token_hash, exc)
            return None
        return token.exchange_rate if token else None

    async def drain(self) -> None:
        """진행 중인 백그라운드 갱신이 모두 끝날 때까지 기다립니다."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _fetch(self, token_hash: Optional[str], lookup: str, by: LookupType) -> Optional[Decimal]:
        if self.policy.is_expired(lookup) or self.policy.is_empty(lookup):
            self._spawn_refresh(token_hash, lookup, by)

        cached_value = self.store.get(cache_key(lookup))
        if cached_value is None or cached_value == 0:
            return await self.fetch_from_db(token_hash)
        return cached_value

    def _spawn_refresh(self, token_hash: Optional[str], lookup: str, by: LookupType) -> bool:
        key = cache_key(lookup)
        # token_hash와 무관하게 키 단위로 하나만 실행. 다른 토큰의 동시 요청은 다음 주기에 반영됨
        if key in self._inflight:
            return False

        self._inflight.add(key)
        task = asyncio.create_task(self.worker.refresh(token_hash, lookup, by), name=f"refresh {key}")
        self._tasks.add(task)
        task.add_done_callback(functools.partial(self._on_refresh_done, key))
        return True

    def _on_refresh_done(self, key: str, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        self._inflight.discard(key)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("exchange rate refresh crashed for %s", key, exc_info=exc)
