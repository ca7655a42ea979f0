"""
환율 캐시 서비스 계층
"""
