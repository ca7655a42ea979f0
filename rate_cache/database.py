"""
==============================================================================
데이터베이스 연결 모듈 (database.py)
==============================================================================

비동기 SQLAlchemy 엔진과 세션 팩토리를 만듭니다.

구성 요소:
    - engine: DB 연결 풀
    - AsyncSessionLocal: 요청/작업마다 세션을 만들어주는 팩토리
    - Base: 모든 모델의 부모 클래스
    - get_db: FastAPI 의존성 (요청 하나에 세션 하나)

==============================================================================
"""

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from rate_cache.config import get_settings


class Base(DeclarativeBase):
    pass


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    return create_async_engine(database_url, echo=echo, pool_pre_ping=True)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: 커밋 후에도 속성 접근 시 추가 쿼리가 나가지 않도록
    return async_sessionmaker(bind, expire_on_commit=False)


settings = get_settings()
engine = build_engine(settings.database_url, echo=settings.debug)
AsyncSessionLocal = build_session_factory(engine)


async def init_models(bind: AsyncEngine | None = None) -> None:
    """
    models.py에 정의된 모든 테이블을 생성합니다. (이미 있으면 건너뜀)
    """
    # 모델을 Base.metadata에 등록
    from rate_cache import models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session
