"""
==============================================================================
API 스키마 정의 (schemas.py)
==============================================================================

현재 구현:
    - ExchangeRateResponse: 토큰 환율 조회 응답
    - CacheStatusResponse: 캐시 저장소 상태

==============================================================================
"""

from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel


class ExchangeRateResponse(BaseModel):
    """
    토큰 환율 응답 스키마

    API 응답 예시:
    {
        "token_hash": "0x6b17...",
        "lookup": "0xdac1...",
        "lookup_type": "address",
        "exchange_rate": "1.23",
        "cache_key": "quote:0xdac1..."
    }

    exchange_rate가 null이면 캐시와 DB 모두 값이 없는 상태입니다.
    """
    token_hash: str
    lookup: str
    lookup_type: Literal["address", "symbol"]
    exchange_rate: Optional[Decimal] = None
    cache_key: str


class CacheStatusResponse(BaseModel):
    name: str
    exists: bool
    entries: int
    period_seconds: float
    enable_consolidation: bool
    pending_refreshes: int
