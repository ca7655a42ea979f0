"""
==============================================================================
라우터 패키지 (routers/)
==============================================================================

현재 구현된 라우터:
    - tokens.py: 토큰 환율 API
        - GET /api/tokens/{token_hash}/exchange-rate?address=...  -> 주소 기반 조회 (권장)
        - GET /api/tokens/{token_hash}/exchange-rate?symbol=...   -> 심볼 기반 조회
        - GET /api/tokens/cache/status                            -> 캐시 상태

==============================================================================
"""
