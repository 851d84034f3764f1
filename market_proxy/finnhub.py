import logging
from typing import Any, Dict, Optional

import httpx

from .errors import NotFound, UpstreamError

logger = logging.getLogger(__name__)

BASE_URL = "https://finnhub.io/api/v1"


class FinnhubClient:
    def __init__(self, api_key: str, base_url: str = BASE_URL, timeout: float = 25.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def get_quote(self, symbol: str) -> Dict[str, Any]:
        """
        Real-time quote:
          - /quote?symbol=AAPL&token=...
          - c = current, d = change, dp = percent change
        """
        params = {"symbol": symbol.upper(), "token": self.api_key}
        headers = {"X-Finnhub-Token": self.api_key}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport,
                                     follow_redirects=True) as client:
            r = await client.get(f"{self.base_url}/quote", params=params, headers=headers)

        if not r.is_success:
            logger.error("Finnhub API error (%s): %s", r.status_code, r.text)
            raise UpstreamError(
                f"Finnhub API error: {r.status_code} - {r.reason_phrase}",
                status_code=r.status_code,
            )

        data = r.json()
        if not isinstance(data, dict):
            raise ValueError(f"unexpected Finnhub payload type: {type(data).__name__}")
        # Unknown symbols come back as an all-zero quote instead of a 404
        if data.get("c") == 0 and data.get("d") == 0 and data.get("dp") == 0:
            raise NotFound("Symbol not found or market closed")
        return data
