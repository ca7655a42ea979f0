"""
프로세스 메모리에 두는 단순 키-값 저장소

만료/삭제 정책은 없습니다. 신선도 판단은 FreshnessPolicy에서 읽을 때 합니다.
"""

from __future__ import annotations

from typing import Any, Optional


DEFAULT_STORE_NAME = "token_exchange_rate"


class KeyedStore:
    def __init__(self, name: str = DEFAULT_STORE_NAME) -> None:
        self.name = name
        # create() 전에는 None: 쓰기는 무시되고 읽기는 None
        self._table: Optional[dict[str, Any]] = None

    def exists(self) -> bool:
        return self._table is not None

    def create(self) -> None:
        # 여러 곳에서 호출해도 기존 값은 유지
        if self._table is None:
            self._table = {}

    def get(self, key: str) -> Optional[Any]:
        table = self._table
        if table is None:
            return None
        return table.get(key)

    def put(self, key: str, value: Any) -> None:
        table = self._table
        if table is None:
            return
        table[key] = value

    def __len__(self) -> int:
        return len(self._table) if self._table is not None else 0
