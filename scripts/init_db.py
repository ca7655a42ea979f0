#!/usr/bin/env python3
"""
==============================================================================
데이터베이스 초기화 스크립트 (init_db.py)
==============================================================================

bridged_tokens 테이블을 만들고, CSV 파일이 주어지면 토큰 데이터를 넣어줍니다.

실행 방법:
    # 테이블만 생성
    python scripts/init_db.py

    # CSV 파일의 토큰까지 적재
    python scripts/init_db.py --csv-path /path/to/tokens.csv

CSV 파일 형식 (컬럼명):
    - home_token_contract_address_hash: 토큰 해시 (필수)
    - symbol: 심볼
    - foreign_token_contract_address_hash: 외부 체인 토큰 주소
    - foreign_chain_id: 외부 체인 ID
    - exchange_rate: 초기 USD 환율

이미 있는 토큰은 CSV 값으로 덮어씁니다. (삭제는 하지 않음)

==============================================================================
"""

import asyncio
import sys
import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

# scripts/ 폴더에서 실행해도 rate_cache 패키지를 import할 수 있도록
sys.path.insert(0, str(Path(__file__).parent.parent))

import pandas as pd
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rate_cache.database import AsyncSessionLocal, init_models
from rate_cache.models import BridgedToken

REQUIRED_COLUMNS = ("home_token_contract_address_hash",)


def _to_decimal(value: str) -> Optional[Decimal]:
    text = value.replace(",", "").strip()
    if text == "":
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def read_tokens_csv(csv_path: str) -> pd.DataFrame:
    """
    CSV를 문자열 그대로 읽습니다. (주소 해시가 숫자로 바뀌지 않도록 dtype=str)
    """
    df = pd.read_csv(csv_path, dtype=str).fillna("")
    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise ValueError(f"CSV is missing columns: {', '.join(missing)}")
    return df


async def load_csv_to_db(
    csv_path: str,
    session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal,
) -> int:
    print(f"[INFO] Reading CSV file: {csv_path}")
    df = read_tokens_csv(csv_path)
    print(f"[INFO] Found {len(df)} tokens")

    async with session_factory() as session:
        inserted_count = 0

        for _, row in df.iterrows():
            token_hash = row["home_token_contract_address_hash"].strip()
            if not token_hash:
                continue

            token = BridgedToken(
                home_token_contract_address_hash=token_hash,
                symbol=row.get("symbol", "").strip() or None,
                foreign_token_contract_address_hash=row.get("foreign_token_contract_address_hash", "").strip() or None,
                foreign_chain_id=_to_decimal(row.get("foreign_chain_id", "")),
                exchange_rate=_to_decimal(row.get("exchange_rate", "")),
            )
            # 같은 해시가 있으면 갱신, 없으면 추가
            await session.merge(token)
            inserted_count += 1

            # 100개마다 한 번씩 커밋
            if inserted_count % 100 == 0:
                await session.commit()
                print(f"  [PROGRESS] Upserted {inserted_count} tokens...")

        await session.commit()
    print(f"[OK] Successfully upserted {inserted_count} tokens")
    return inserted_count


async def verify_data(session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal) -> None:
    async with session_factory() as session:
        total = await session.scalar(select(func.count()).select_from(BridgedToken))
        result = await session.execute(select(BridgedToken).limit(3))
        tokens = result.scalars().all()

    print(f"\n[INFO] {total} tokens in bridged_tokens. Sample:")
    for token in tokens:
        print(f"  - {token.symbol or '?'} {token.home_token_contract_address_hash} rate={token.exchange_rate}")


async def main(csv_path: Optional[str] = None):
    print("[START] Starting database initialization...\n")

    await init_models()
    print("[OK] Database tables created")

    if csv_path is not None:
        if not os.path.exists(csv_path):
            print(f"[ERROR] CSV file not found: {csv_path}")
            sys.exit(1)
        await load_csv_to_db(csv_path)
        await verify_data()

    print("\n[DONE] Database initialization complete!")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description="Create tables and optionally load bridged tokens from CSV"
    )
    parser.add_argument(
        "--csv-path",
        type=str,
        help="Path to tokens CSV file",
    )
    args = parser.parse_args()

    asyncio.run(main(args.csv_path))
