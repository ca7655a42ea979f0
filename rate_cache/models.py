"""
==============================================================================
데이터베이스 모델 정의 (models.py)
==============================================================================

현재 사용하는 테이블:
    1. bridged_tokens - 브리지된 토큰과 마지막으로 알려진 USD 환율

exchange_rate 컬럼은 캐시가 비어 있을 때 응답에 사용되는 원본 값입니다.
이 서비스는 행을 만들거나 지우지 않고 exchange_rate만 갱신합니다.

==============================================================================
"""

from sqlalchemy import Column, DateTime, Numeric, String
from sqlalchemy.sql import func

from rate_cache.database import Base


class BridgedToken(Base):
    """
    브리지 토큰 테이블

    home_token_contract_address_hash로 식별합니다.
    """

    __tablename__ = "bridged_tokens"

    # PK - 홈 체인의 토큰 컨트랙트 주소
    home_token_contract_address_hash = Column(String(66), primary_key=True, index=True)

    # 토큰 정보
    symbol = Column(String(64), nullable=True)
    foreign_token_contract_address_hash = Column(String(66), nullable=True)
    foreign_chain_id = Column(Numeric, nullable=True)

    # 마지막으로 알려진 USD 환율
    exchange_rate = Column(Numeric, nullable=True)

    # 타임스탬프
    inserted_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return (
            f"<BridgedToken(hash={self.home_token_contract_address_hash}, "
            f"symbol={self.symbol}, exchange_rate={self.exchange_rate})>"
        )
