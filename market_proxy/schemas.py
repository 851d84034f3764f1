from pydantic import BaseModel, Field
from typing import Optional, Any

from .polygon import Category


class DataRequest(BaseModel):
    # Left optional on purpose: the gateway reports missing values itself.
    ticker: Optional[str] = None
    category: Optional[str] = None


class Envelope(BaseModel):
    ticker: str
    category: Category
    data: Any
    count: int = Field(0, ge=0)
    next_page_token: Optional[str] = None


class ErrorBody(BaseModel):
    error: str


class HealthResponse(BaseModel):
    ok: bool = True
    polygon_configured: bool
    finnhub_configured: bool
