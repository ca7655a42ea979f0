"""
==============================================================================
FastAPI 애플리케이션 진입점 (main.py)
==============================================================================

실행 방법:
    uvicorn rate_cache.main:app --reload

시작 순서 (lifespan):
    1. 로깅 설정
    2. DB 테이블 생성 (없으면)
    3. 캐시 저장소 생성
    4. 시세 클라이언트와 환율 서비스 준비

종료 시에는 진행 중인 갱신 작업을 기다린 뒤 HTTP 클라이언트와 DB 엔진을 닫습니다.

==============================================================================
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rate_cache.cache.store import KeyedStore
from rate_cache.config import get_settings
from rate_cache.database import AsyncSessionLocal, engine, init_models
from rate_cache.quotes.client import QuoteClient
from rate_cache.routers import tokens
from rate_cache.services.exchange_rate_service import ExchangeRateService
from rate_cache.services.token_store import TokenStore

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    await init_models()

    store = KeyedStore()
    if not store.exists():
        store.create()

    quote_client = QuoteClient(settings)
    app.state.exchange_rate_service = ExchangeRateService.from_settings(
        settings,
        store,
        quote_client,
        TokenStore(AsyncSessionLocal),
    )
    logger.info(
        "exchange rate cache ready: store=%s period=%s consolidation=%s",
        store.name,
        settings.token_exchange_rate_cache_period,
        settings.token_exchange_rate_enable_consolidation,
    )
    try:
        yield
    finally:
        await app.state.exchange_rate_service.drain()
        await quote_client.aclose()
        await engine.dispose()


app = FastAPI(title="Token Exchange Rate Cache", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tokens.router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
