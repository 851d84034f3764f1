import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import settings
from .errors import GatewayError
from .gateway import MarketDataGateway
from .schemas import DataRequest, Envelope, ErrorBody, HealthResponse

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
# httpx logs every request URL at INFO, and the URLs carry provider keys
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

app = FastAPI(title="Market Data Proxy", version=__version__)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_RESPONSES = {400: {"model": ErrorBody}, 500: {"model": ErrorBody}}


@lru_cache
def get_gateway() -> MarketDataGateway:
    return MarketDataGateway(settings)


# --- Error shape ---
@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    else:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# --- Endpoints ---

@app.get("/health", response_model=HealthResponse)
async def health(gateway: MarketDataGateway = Depends(get_gateway)):
    return HealthResponse(
        polygon_configured=bool(gateway.settings.polygon_api_key),
        finnhub_configured=bool(gateway.settings.finnhub_api_key),
    )

@app.get("/data", response_model=Envelope, responses=ERROR_RESPONSES)
async def data(ticker: Optional[str] = Query(None, description="Ticker symbol, e.g. AAPL"),
               category: Optional[str] = Query(None, description="financials | news | overview | price"),
               type_: Optional[str] = Query(None, alias="type", include_in_schema=False),
               gateway: MarketDataGateway = Depends(get_gateway)):
    # older front-ends send ?type= instead of ?category=
    req = DataRequest(ticker=ticker, category=category or type_)
    return await gateway.handle(req)

@app.get("/stock-price", responses={**ERROR_RESPONSES, 404: {"model": ErrorBody}})
async def stock_price(symbol: Optional[str] = Query(None, description="Ticker symbol, e.g. AAPL"),
                      gateway: MarketDataGateway = Depends(get_gateway)):
    return await gateway.quote(symbol)
