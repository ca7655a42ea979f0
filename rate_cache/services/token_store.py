"""
bridged_tokens 테이블 접근
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rate_cache.models import BridgedToken


class TokenStore:
    """
    토큰 조회와 exchange_rate 갱신만 담당합니다.

    호출마다 세션을 새로 열기 때문에 백그라운드 작업에서도 안전하게 쓸 수 있습니다.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_hash(self, token_hash: str) -> Optional[BridgedToken]:
        query = select(BridgedToken).where(BridgedToken.home_token_contract_address_hash == token_hash)
        async with self._session_factory() as session:
            result = await session.execute(query)
            return result.scalar_one_or_none()

    async def update_exchange_rate(self, token: BridgedToken, exchange_rate: Decimal) -> bool:
        # UPDATE 한 번으로 끝나는 단일 컬럼 쓰기
        query = (
            update(BridgedToken)
            .where(BridgedToken.home_token_contract_address_hash == token.home_token_contract_address_hash)
            .values(exchange_rate=exchange_rate)
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            await session.commit()
        return bool(result.rowcount)
