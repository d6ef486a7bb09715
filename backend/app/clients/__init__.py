"""Exchange clients."""

from app.clients.binance_rest import BinanceRestClient, RateLimiter

__all__ = [
    "BinanceRestClient",
    "RateLimiter",
]
