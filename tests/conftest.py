import asyncio
import os
from datetime import timedelta
from decimal import Decimal

# 모듈 import 전에 테스트용 설정을 고정
TEST_ENV = {
    "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
    "QUOTE_API_KEY": "",
    "LOG_LEVEL": "DEBUG",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from rate_cache.cache.store import KeyedStore
from rate_cache.config import get_settings
from rate_cache.database import Base, build_session_factory
from rate_cache.models import BridgedToken
from rate_cache.services.exchange_rate_service import ExchangeRateService
from rate_cache.services.token_store import TokenStore

PERIOD = timedelta(seconds=60)


class ManualClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeQuoteProvider:
    """
    lookup -> Quote 리스트를 돌려주는 가짜 시세 제공자.

    gate를 닫아두면 응답을 release() 전까지 붙잡아 둡니다.
    """

    def __init__(self) -> None:
        self.responses: dict[str, list] = {}
        self.error: Exception | None = None
        self.calls: list[tuple[str, str]] = []
        self._gate = asyncio.Event()
        self._gate.set()

    def hold(self) -> None:
        self._gate.clear()

    def release(self) -> None:
        self._gate.set()

    async def quote_by_symbol(self, symbol: str):
        self.calls.append(("symbol", symbol))
        return await self._resolve(symbol)

    async def quote_by_address(self, address: str):
        self.calls.append(("address", address))
        return await self._resolve(address)

    async def _resolve(self, lookup: str):
        await self._gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.responses.get(lookup, []))


@pytest.fixture(scope="session", autouse=True)
def _reset_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    # 파일 DB: 읽기 세션과 백그라운드 쓰기 세션이 각자 커넥션을 쓰도록
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest.fixture
def tokens(session_factory):
    return TokenStore(session_factory)


@pytest.fixture
def seed_token(session_factory):
    async def _seed(token_hash: str, exchange_rate: Decimal | None = None, symbol: str | None = None) -> None:
        async with session_factory() as session:
            session.add(
                BridgedToken(
                    home_token_contract_address_hash=token_hash,
                    symbol=symbol,
                    exchange_rate=exchange_rate,
                )
            )
            await session.commit()

    return _seed


@pytest.fixture
def store():
    store = KeyedStore()
    store.create()
    return store


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def provider():
    return FakeQuoteProvider()


@pytest.fixture
def service(store, provider, tokens, clock):
    return ExchangeRateService(store, provider, tokens, PERIOD, clock=clock)
