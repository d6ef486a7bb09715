"""Binance spot REST API client for price, klines and order book."""

import asyncio
from decimal import Decimal
from typing import Any

import httpx

from core.models import Candle, OrderBook
from core.models.converters import candle_from_row, order_book_from_depth


class RateLimiter:
    """Simple rate limiter for API calls."""

    def __init__(self, calls_per_minute: int = 1200):
        self.calls_per_minute = calls_per_minute
        self.interval = 60.0 / calls_per_minute
        self.last_call = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait if necessary to respect rate limit."""
        async with self._lock:
            loop = asyncio.get_running_loop()
            wait_time = self.last_call + self.interval - loop.time()
            if wait_time > 0:
                await asyncio.sleep(wait_time)
            self.last_call = loop.time()


class BinanceRestClient:
    """Binance spot REST API client (public market data endpoints)."""

    BASE_URL = "https://api.binance.com"

    def __init__(
        self,
        base_url: str = BASE_URL,
        api_key: str = "",
        timeout: float = 10.0,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.rate_limiter = RateLimiter()
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {}
            if self.api_key:
                headers["X-MBX-APIKEY"] = self.api_key
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self, method: str, endpoint: str, params: dict[str, Any] | None = None
    ) -> Any:
        """Make an API request with rate limiting."""
        await self.rate_limiter.acquire()
        client = await self._get_client()
        response = await client.request(method, endpoint, params=params)
        response.raise_for_status()
        return response.json()

    async def get_price(self, symbol: str) -> Decimal:
        """Latest traded price for a pair (e.g., "BTCUSDT")."""
        data = await self._request("GET", "/api/v3/ticker/price", {"symbol": symbol})
        return Decimal(str(data["price"]))

    async def get_klines(
        self,
        symbol: str,
        interval: str = "15m",
        limit: int = 50,
    ) -> list[Candle]:
        """
        Fetch the most recent K-lines, oldest first.

        Args:
            symbol: Trading pair (e.g., "BTCUSDT")
            interval: K-line interval (e.g., "15m", "1h")
            limit: Number of K-lines (max 1000)

        Returns:
            List of Candle objects
        """
        params = {
            "symbol": symbol,
            "interval": interval,
            "limit": min(limit, 1000),
        }
        data = await self._request("GET", "/api/v3/klines", params)
        return [candle_from_row(row) for row in data]

    async def get_order_book(self, symbol: str, limit: int = 100) -> OrderBook:
        """Order book snapshot with ``limit`` levels per side."""
        data = await self._request(
            "GET", "/api/v3/depth", {"symbol": symbol, "limit": limit}
        )
        return order_book_from_depth(data)
