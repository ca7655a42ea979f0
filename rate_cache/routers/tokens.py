"""
토큰 환율 라우터
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request

from rate_cache.cache.freshness import cache_key
from rate_cache.schemas import CacheStatusResponse, ExchangeRateResponse
from rate_cache.services.exchange_rate_service import ExchangeRateService


router = APIRouter(
    prefix="/api/tokens",
    tags=["tokens"],
)

logger = logging.getLogger(__name__)


def get_exchange_rate_service(request: Request) -> ExchangeRateService:
    service = getattr(request.app.state, "exchange_rate_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="exchange rate cache is not ready")
    return service


@router.get("/cache/status", response_model=CacheStatusResponse)
async def get_cache_status(
    service: ExchangeRateService = Depends(get_exchange_rate_service),
) -> CacheStatusResponse:
    return CacheStatusResponse(
        name=service.store.name,
        exists=service.store.exists(),
        entries=len(service.store),
        period_seconds=service.policy.period.total_seconds(),
        enable_consolidation=service.enable_consolidation,
        pending_refreshes=service.pending_refreshes,
    )


@router.get("/{token_hash}/exchange-rate", response_model=ExchangeRateResponse)
async def get_token_exchange_rate(
    token_hash: str = Path(..., min_length=1, max_length=66),
    address: Optional[str] = Query(None, min_length=1, description="토큰 컨트랙트 주소 (권장)"),
    symbol: Optional[str] = Query(None, min_length=1, description="토큰 심볼 (충돌 가능)"),
    service: ExchangeRateService = Depends(get_exchange_rate_service),
) -> ExchangeRateResponse:
    """
    토큰의 USD 환율을 반환합니다.

    address와 symbol이 모두 오면 address를 사용합니다.
    캐시가 오래됐으면 백그라운드에서 갱신하고, 응답은 기다리지 않습니다.
    """
    if address:
        exchange_rate = await service.fetch(token_hash, address)
        lookup, lookup_type = address, "address"
    elif symbol:
        exchange_rate = await service.fetch_by_symbol(token_hash, symbol)
        lookup, lookup_type = symbol, "symbol"
    else:
        raise HTTPException(status_code=422, detail="address or symbol query parameter is required")

    if exchange_rate is None:
        logger.info("no exchange rate yet for %s (%s=%s)", token_hash, lookup_type, lookup)

    return ExchangeRateResponse(
        token_hash=token_hash,
        lookup=lookup,
        lookup_type=lookup_type,
        exchange_rate=exchange_rate,
        cache_key=cache_key(lookup),
    )
