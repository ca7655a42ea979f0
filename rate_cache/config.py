"""
==============================================================================
설정 관리 모듈 (config.py)
==============================================================================

환율 캐시 서버의 모든 설정을 관리합니다.
설정값들은 환경변수(.env 파일)에서 가져오거나, 기본값을 사용합니다.

설정 우선순위:
    1. 환경변수 (예: export TOKEN_EXCHANGE_RATE_CACHE_PERIOD=3600)  <- 가장 높음
    2. .env 파일에 적힌 값
    3. 코드에 적힌 기본값                                           <- 가장 낮음

==============================================================================
"""

from datetime import timedelta
from functools import lru_cache  # 설정을 한 번만 읽어옴

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    애플리케이션 설정 클래스

    환경변수 이름은 대소문자를 구분하지 않습니다.
    예: token_exchange_rate_cache_period -> TOKEN_EXCHANGE_RATE_CACHE_PERIOD
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # =========================================================================
    # 데이터베이스 설정
    # =========================================================================
    #
    # DATABASE_URL 형식:
    #   - SQLite:     sqlite+aiosqlite:///./파일명.db
    #   - PostgreSQL: postgresql+asyncpg://사용자:비밀번호@호스트:포트/DB이름
    #
    database_url: str = "sqlite+aiosqlite:///./exchange_rates.db"
    debug: bool = False
    log_level: str = "INFO"

    # 쉼표로 구분하여 여러 주소를 허용
    cors_origins: str = "http://localhost:3000"

    # =========================================================================
    # 시세 제공자(CoinGecko 호환) 설정
    # =========================================================================
    #
    # quote_platform: 주소 기반 조회 시 사용하는 체인 식별자
    #   - 예: ethereum, xdai, polygon-pos
    #
    quote_base_url: str = "https://api.coingecko.com/api/v3"
    quote_api_key: str = ""
    quote_platform: str = "ethereum"
    quote_timeout: float = 10.0

    # =========================================================================
    # 토큰 환율 캐시 설정
    # =========================================================================
    #
    # cache_period: 캐시 값을 다시 가져오기까지의 기간
    #   - 환경변수에는 초 단위 정수 또는 ISO 8601 기간(P1D 등)을 넣을 수 있음
    #
    # enable_consolidation: 호환성을 위해 남겨둔 플래그 (현재 아무 동작도 하지 않음)
    #
    token_exchange_rate_cache_period: timedelta = timedelta(days=1)
    token_exchange_rate_enable_consolidation: bool = False

    @field_validator("token_exchange_rate_cache_period", mode="before")
    @classmethod
    def _seconds_string_to_number(cls, value):
        # "3600" 같은 숫자 문자열은 초 단위로 해석
        if isinstance(value, str):
            text = value.strip()
            try:
                return float(text)
            except ValueError:
                return text
        return value


@lru_cache()
def get_settings() -> Settings:
    """
    설정 객체를 가져오는 함수

    처음 호출될 때만 Settings()를 생성하고, 이후에는 캐시된 값을 반환합니다.
    테스트에서 환경변수를 바꾼 뒤에는 get_settings.cache_clear()를 호출하세요.
    """
    return Settings()
