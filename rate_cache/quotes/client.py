"""
시세 제공자(CoinGecko 호환) HTTP 클라이언트 래퍼
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import httpx

from rate_cache.config import Settings
from rate_cache.quotes.errors import QuoteError
from rate_cache.quotes.transformers import Quote, transform_markets, transform_token_price


class QuoteClient:
    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client

        async with self._client_lock:
            if self._http_client is None:
                self._http_client = httpx.AsyncClient(
                    timeout=self._settings.quote_timeout,
                    transport=self._transport,
                )
            return self._http_client

    async def aclose(self) -> None:
        async with self._client_lock:
            if self._http_client is not None:
                await self._http_client.aclose()
                self._http_client = None

    async def quote_by_symbol(self, symbol: str) -> list[Quote]:
        data = await self.request(
            "GET",
            "/coins/markets",
            params={"vs_currency": "usd", "symbols": symbol.lower()},
        )
        return transform_markets(data)

    async def quote_by_address(self, address: str) -> list[Quote]:
        platform = self._settings.quote_platform
        data = await self.request(
            "GET",
            f"/simple/token_price/{platform}",
            params={"contract_addresses": address, "vs_currencies": "usd"},
        )
        return transform_token_price(data, address)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        retries: int = 1,
    ) -> Any:
        """
        공통 헤더와 간단한 재시도를 포함해 시세 API를 호출합니다.

        헤더:
        - accept: application/json
        - x-cg-demo-api-key: 설정된 경우에만 추가
        """
        if not self._settings.quote_base_url:
            raise QuoteError("quote base URL not configured", status_code=500)

        base_url = self._settings.quote_base_url.rstrip("/")
        url = f"{base_url}{path}"
        headers = {"accept": "application/json"}
        if self._settings.quote_api_key:
            headers["x-cg-demo-api-key"] = self._settings.quote_api_key

        for attempt in range(retries + 1):
            try:
                client = await self._get_http_client()
                resp = await client.request(method, url, headers=headers, params=params)
                if resp.status_code >= 400:
                    message = f"quote request HTTP {resp.status_code}"
                    error_code: str | None = None
                    try:
                        payload = resp.json()
                    except ValueError:
                        payload = None
                    if isinstance(payload, dict):
                        status = payload.get("status")
                        if isinstance(status, dict):
                            msg = status.get("error_message")
                            if msg:
                                message = f"{message}: {msg}"
                            raw_code = status.get("error_code")
                            error_code = str(raw_code) if raw_code else None
                    raise QuoteError(message, status_code=resp.status_code, code=error_code)
                try:
                    return resp.json()
                except ValueError as exc:
                    raise QuoteError("quote response is not JSON", status_code=502) from exc
            except (httpx.TimeoutException, httpx.RequestError, QuoteError) as exc:
                if attempt < retries and self._is_retriable_error(exc):
                    await asyncio.sleep(0.2 * (attempt + 1))
                    continue
                if isinstance(exc, QuoteError):
                    raise exc
                raise QuoteError(f"quote request failed: {exc}", status_code=502) from exc

    @staticmethod
    def _is_retriable_error(exc: Exception) -> bool:
        if isinstance(exc, (httpx.TimeoutException, httpx.RequestError)):
            return True
        if isinstance(exc, QuoteError):
            status_code = int(exc.status_code or 0)
            return status_code in (408, 429) or status_code >= 500
        return False
