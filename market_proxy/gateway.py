import logging
import re
from typing import Any, Dict, Optional

import httpx

from .cache import TTLCache
from .config import Settings
from .errors import (
    ConfigurationError,
    FetchFailed,
    GatewayError,
    InvalidParameter,
    MissingParameter,
)
from .finnhub import FinnhubClient
from .polygon import HANDLERS, VALID_CATEGORIES, Category, PolygonClient
from .schemas import DataRequest, Envelope

logger = logging.getLogger(__name__)

# Letters, digits, dots, colons and dashes (BRK.B, X:BTCUSD). Tickers end up in URL paths.
_TICKER_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9.:\-]*$")


class MarketDataGateway:
    """Validates ticker queries, forwards them upstream and reshapes the result.

    One upstream call per request, no retries. Successful payloads are kept
    in a short-lived TTL cache so identical requests inside the window reuse
    them.
    """

    def __init__(self, settings: Settings,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.polygon = PolygonClient(
            settings.polygon_api_key,
            base_url=settings.polygon_base_url,
            timeout=settings.upstream_timeout,
            transport=transport,
        )
        self.finnhub = FinnhubClient(
            settings.finnhub_api_key,
            base_url=settings.finnhub_base_url,
            timeout=settings.upstream_timeout,
            transport=transport,
        )
        self.company_cache = TTLCache(settings.company_cache_ttl)
        self.quote_cache = TTLCache(settings.quote_cache_ttl)

    # --- Company data (Polygon) ---

    @staticmethod
    def validate(request: DataRequest) -> tuple:
        ticker = (request.ticker or "").strip()
        if not ticker:
            raise MissingParameter("Ticker symbol is required")
        if not request.category:
            raise MissingParameter(
                "Category parameter is required (financials, news, overview, or price)"
            )
        try:
            category = Category(request.category)
        except ValueError:
            raise InvalidParameter(f"Invalid category. Use {VALID_CATEGORIES}") from None
        if not _TICKER_RE.match(ticker):
            raise InvalidParameter(f"Invalid ticker symbol: {ticker}")
        return ticker.upper(), category

    async def handle(self, request: DataRequest) -> Envelope:
        ticker, category = self.validate(request)
        if not self.settings.polygon_api_key:
            raise ConfigurationError("Polygon API key not configured")

        handler = HANDLERS[category]
        key = (category.value, ticker)
        try:
            payload = self.company_cache.get(key)
            if payload is None:
                logger.info("Fetching %s for %s from Polygon.io", category.value, ticker)
                payload = await self.polygon.fetch(handler.build_query(ticker))
                self.company_cache.set(key, payload)
            else:
                logger.debug("Cache hit for %s/%s", category.value, ticker)
            shaped = handler.reshape(payload)
            return Envelope(
                ticker=ticker,
                category=category,
                data=shaped.data,
                count=shaped.count,
                next_page_token=shaped.next_page_token,
            )
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Error fetching company data for %s/%s", category.value, ticker)
            raise FetchFailed("Failed to fetch company data from Polygon.io") from e

    # --- Real-time quote (Finnhub) ---

    async def quote(self, symbol: Optional[str]) -> Dict[str, Any]:
        symbol = (symbol or "").strip().upper()
        if not symbol:
            raise MissingParameter("Symbol parameter is required")
        if not self.settings.finnhub_api_key:
            raise ConfigurationError("Finnhub API key not configured")

        cached = self.quote_cache.get(symbol)
        if cached is not None:
            logger.debug("Cache hit for quote %s", symbol)
            return cached
        try:
            logger.info("Fetching stock price for %s from Finnhub", symbol)
            data = await self.finnhub.get_quote(symbol)
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Error fetching stock price for %s", symbol)
            raise FetchFailed("Failed to fetch stock price from Finnhub") from e
        self.quote_cache.set(symbol, data)
        return data
