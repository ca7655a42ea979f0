"""
토큰 USD 환율 캐시 (stale-while-revalidate)
"""
