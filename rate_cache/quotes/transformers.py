"""
시세 제공자 응답을 Quote 리스트로 변환
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

# 매핑 테이블로 필드 변경을 한 곳에서 관리
MARKET_FIELD_MAP = {
    "coin_id": "id",
    "symbol": "symbol",
    "name": "name",
    "usd_value": "current_price",
}

TOKEN_PRICE_CURRENCY = "usd"


@dataclass(frozen=True)
class Quote:
    usd_value: Decimal
    symbol: Optional[str] = None
    address: Optional[str] = None
    coin_id: Optional[str] = None
    name: Optional[str] = None


def _parse_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        num = value
    else:
        text = str(value).replace(",", "").strip()
        if text == "":
            return None
        try:
            num = Decimal(text)
        except InvalidOperation:
            return None
    if not num.is_finite():
        return None
    return num


def transform_markets(payload: Any) -> list[Quote]:
    """
    /coins/markets 응답(리스트)을 변환합니다.

    가격이 없거나 숫자가 아닌 항목은 건너뜁니다.
    """
    if not isinstance(payload, list):
        return []

    quotes: list[Quote] = []
    for row in payload:
        if not isinstance(row, dict):
            continue
        usd_value = _parse_decimal(row.get(MARKET_FIELD_MAP["usd_value"]))
        if usd_value is None:
            continue
        quotes.append(
            Quote(
                usd_value=usd_value,
                symbol=row.get(MARKET_FIELD_MAP["symbol"]),
                coin_id=row.get(MARKET_FIELD_MAP["coin_id"]),
                name=row.get(MARKET_FIELD_MAP["name"]),
            )
        )
    return quotes


def transform_token_price(payload: Any, address: Optional[str] = None) -> list[Quote]:
    """
    /simple/token_price/{platform} 응답을 변환합니다.

    응답 예시:
    {
        "0xdac17f958d2ee523a2206206994597c13d831ec7": {"usd": 1.0}
    }

    address가 주어지면 해당 주소(대소문자 무시)의 항목만 사용합니다.
    """
    if not isinstance(payload, dict):
        return []

    wanted = address.lower() if address else None
    quotes: list[Quote] = []
    for contract, prices in payload.items():
        if wanted is not None and str(contract).lower() != wanted:
            continue
        if not isinstance(prices, dict):
            continue
        usd_value = _parse_decimal(prices.get(TOKEN_PRICE_CURRENCY))
        if usd_value is None:
            continue
        quotes.append(Quote(usd_value=usd_value, address=str(contract)))
    return quotes
