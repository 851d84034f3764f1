import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

import httpx

from .errors import UpstreamError

logger = logging.getLogger(__name__)

BASE_URL = "https://api.polygon.io"


class Category(str, Enum):
    FINANCIALS = "financials"
    NEWS = "news"
    OVERVIEW = "overview"
    PRICE = "price"


_quoted = [f'"{c.value}"' for c in Category]
VALID_CATEGORIES = ", ".join(_quoted[:-1]) + ", or " + _quoted[-1]


@dataclass(frozen=True)
class UpstreamQuery:
    path: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Reshaped:
    data: Any
    count: int
    next_page_token: Optional[str] = None


# -----------------------
# Query templates
# -----------------------

def financials_query(ticker: str) -> UpstreamQuery:
    # /vX/reference/financials?ticker=AAPL&order=desc&limit=10&sort=filing_date
    return UpstreamQuery(
        "vX/reference/financials",
        {"ticker": ticker, "order": "desc", "limit": 10, "sort": "filing_date"},
    )

def news_query(ticker: str) -> UpstreamQuery:
    # /v2/reference/news?ticker=AAPL&order=desc&limit=20&sort=published_utc
    return UpstreamQuery(
        "v2/reference/news",
        {"ticker": ticker, "order": "desc", "limit": 20, "sort": "published_utc"},
    )

def overview_query(ticker: str) -> UpstreamQuery:
    # /v3/reference/tickers/{ticker}
    return UpstreamQuery(f"v3/reference/tickers/{ticker}")

def price_query(ticker: str) -> UpstreamQuery:
    # /v2/aggs/ticker/{ticker}/prev  (previous day aggregate)
    return UpstreamQuery(f"v2/aggs/ticker/{ticker}/prev", {"adjusted": "true"})


# -----------------------
# Reshapers
# -----------------------

def reshape_listing(payload: Dict[str, Any]) -> Reshaped:
    """Paged list endpoints (financials, news)."""
    return Reshaped(
        data=payload.get("results") or [],
        count=payload.get("count") or 0,
        next_page_token=payload.get("next_url") or None,
    )

def reshape_overview(payload: Dict[str, Any]) -> Reshaped:
    results = payload.get("results")
    return Reshaped(data=payload if results is None else results, count=1)

def reshape_price(payload: Dict[str, Any]) -> Reshaped:
    return Reshaped(data=payload, count=payload.get("resultsCount") or 0)


@dataclass(frozen=True)
class CategoryHandler:
    build_query: Callable[[str], UpstreamQuery]
    reshape: Callable[[Dict[str, Any]], Reshaped]


HANDLERS: Dict[Category, CategoryHandler] = {
    Category.FINANCIALS: CategoryHandler(financials_query, reshape_listing),
    Category.NEWS: CategoryHandler(news_query, reshape_listing),
    Category.OVERVIEW: CategoryHandler(overview_query, reshape_overview),
    Category.PRICE: CategoryHandler(price_query, reshape_price),
}


class PolygonClient:
    def __init__(self, api_key: str, base_url: str = BASE_URL, timeout: float = 25.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, query: UpstreamQuery) -> Dict[str, Any]:
        """
        GET against Polygon with the key attached both as ``apikey`` and as a
        bearer header. Raises UpstreamError for HTTP failures and for payloads
        flagged with ``status == "ERROR"``.
        """
        params = dict(query.params)
        params["apikey"] = self.api_key
        headers = {"Authorization": f"Bearer {self.api_key}"}
        url = f"{self.base_url}/{query.path.lstrip('/')}"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport,
                                     follow_redirects=True) as client:
            r = await client.get(url, params=params, headers=headers)

        if not r.is_success:
            logger.error("Polygon API error (%s): %s", r.status_code, r.text)
            raise UpstreamError(
                f"Polygon API error: {r.status_code} - {r.reason_phrase}",
                status_code=r.status_code,
            )

        payload = r.json()
        if not isinstance(payload, dict):
            raise ValueError(f"unexpected Polygon payload type: {type(payload).__name__}")

        # Polygon sometimes answers 200 with an embedded error marker
        if payload.get("status") == "ERROR":
            message = payload.get("error") or "Polygon API returned an error"
            logger.warning("Polygon flagged %s: %s", query.path, message)
            raise UpstreamError(message, status_code=400)
        return payload
