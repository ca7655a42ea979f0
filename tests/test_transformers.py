"""시세 응답 변환 테스트."""

from decimal import Decimal

from rate_cache.quotes.transformers import transform_markets, transform_token_price


def test_transform_markets_skips_rows_without_price():
    payload = [
        {"id": "weth", "symbol": "weth", "name": "WETH", "current_price": 3120.5},
        {"id": "ghost", "symbol": "weth", "name": "Ghost", "current_price": None},
        {"id": "broken", "symbol": "weth", "current_price": "n/a"},
        "not-a-row",
    ]

    quotes = transform_markets(payload)

    assert len(quotes) == 1
    assert quotes[0].usd_value == Decimal("3120.5")
    assert quotes[0].symbol == "weth"
    assert quotes[0].name == "WETH"


def test_transform_markets_rejects_non_list():
    assert transform_markets({"error": "rate limited"}) == []
    assert transform_markets(None) == []


def test_transform_token_price_matches_address_case_insensitively():
    payload = {
        "0xdac17f958d2ee523a2206206994597c13d831ec7": {"usd": 1.0},
        "0xother": {"usd": 5},
    }

    quotes = transform_token_price(payload, "0xdAC17F958D2ee523a2206206994597C13D831ec7")

    assert len(quotes) == 1
    assert quotes[0].usd_value == Decimal("1.0")
    assert quotes[0].address == "0xdac17f958d2ee523a2206206994597c13d831ec7"


def test_transform_token_price_handles_missing_usd_and_bad_shapes():
    assert transform_token_price({"0xabc": {}}, "0xabc") == []
    assert transform_token_price({"0xabc": "1.0"}, "0xabc") == []
    assert transform_token_price([], "0xabc") == []
    assert transform_token_price({"0xabc": {"usd": "NaN"}}, "0xabc") == []


def test_transform_token_price_keeps_zero():
    # 0을 '값 없음'으로 볼지는 캐시 쪽에서 결정
    quotes = transform_token_price({"0xabc": {"usd": 0}})
    assert quotes[0].usd_value == Decimal("0")
