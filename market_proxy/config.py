from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import List, Union


class Settings(BaseSettings):
    # Empty keys are allowed at startup; the routes report them per request.
    polygon_api_key: str = Field("", alias="POLYGON_API_KEY")
    polygon_base_url: str = Field("https://api.polygon.io", alias="POLYGON_BASE_URL")
    finnhub_api_key: str = Field("", alias="FINNHUB_API_KEY")
    finnhub_base_url: str = Field("https://finnhub.io/api/v1", alias="FINNHUB_BASE_URL")
    upstream_timeout: float = Field(25.0, alias="UPSTREAM_TIMEOUT")
    company_cache_ttl: int = Field(300, alias="COMPANY_CACHE_TTL")
    quote_cache_ttl: int = Field(60, alias="QUOTE_CACHE_TTL")
    cors_origins: Union[List[str], str] = Field(default_factory=lambda: ["*"], alias="CORS_ORIGINS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str) and not value.strip().startswith("["):
            return [o.strip() for o in value.split(",") if o.strip()]
        return value

    @field_validator("polygon_api_key", "finnhub_api_key")
    @classmethod
    def _strip_key(cls, value: str) -> str:
        return (value or "").strip()


settings = Settings()
