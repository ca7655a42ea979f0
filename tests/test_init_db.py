from decimal import Decimal

import pytest

from scripts.init_db import load_csv_to_db, read_tokens_csv

CSV_TEXT = """home_token_contract_address_hash,symbol,foreign_token_contract_address_hash,foreign_chain_id,exchange_rate
0x0001,USDT,0xdac17f958d2ee523a2206206994597c13d831ec7,1,1.0
0x0002,WETH,,1,
"""


@pytest.mark.asyncio
async def test_load_csv_upserts_tokens(tmp_path, session_factory, tokens):
    csv_path = tmp_path / "tokens.csv"
    csv_path.write_text(CSV_TEXT)

    assert await load_csv_to_db(str(csv_path), session_factory) == 2
    assert await load_csv_to_db(str(csv_path), session_factory) == 2

    usdt = await tokens.find_by_hash("0x0001")
    weth = await tokens.find_by_hash("0x0002")
    assert usdt.symbol == "USDT"
    assert usdt.exchange_rate == Decimal("1.0")
    assert weth.exchange_rate is None
    assert weth.foreign_token_contract_address_hash is None


def test_read_tokens_csv_requires_hash_column(tmp_path):
    csv_path = tmp_path / "bad.csv"
    csv_path.write_text("symbol\nUSDT\n")
    with pytest.raises(ValueError):
        read_tokens_csv(str(csv_path))
