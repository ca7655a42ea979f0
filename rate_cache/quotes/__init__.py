"""
시세 제공자(CoinGecko 호환 API) 연동
"""
