import time

from market_proxy.cache import TTLCache
from tests.conftest import make_settings


def test_cache_roundtrip_and_expiry(monkeypatch):
    now = [1000.0]
    monkeypatch.setattr(time, "monotonic", lambda: now[0])
    cache = TTLCache(ttl_seconds=300)
    cache.set(("news", "AAPL"), {"count": 1})
    assert cache.get(("news", "AAPL")) == {"count": 1}

    now[0] += 301
    assert cache.get(("news", "AAPL")) is None
    assert len(cache) == 0


def test_cache_evicts_oldest_entry(monkeypatch):
    now = [0.0]
    monkeypatch.setattr(time, "monotonic", lambda: now[0])
    cache = TTLCache(ttl_seconds=60, max_items=2)
    for key in ("a", "b", "c"):
        cache.set(key, key)
        now[0] += 1
    assert cache.get("a") is None
    assert cache.get("b") == "b"
    assert cache.get("c") == "c"


def test_disabled_cache_stores_nothing():
    cache = TTLCache(ttl_seconds=0)
    cache.set("k", "v")
    assert cache.get("k") is None
    assert len(cache) == 0


def test_settings_defaults():
    s = make_settings(polygon_api_key="  ")
    assert s.polygon_api_key == ""
    assert s.company_cache_ttl == 300
    assert s.quote_cache_ttl == 60
    assert s.cors_origins == ["*"]


def test_settings_read_from_environment(monkeypatch):
    from market_proxy.config import Settings

    monkeypatch.setenv("POLYGON_API_KEY", "env-key")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://example.com")
    s = Settings(_env_file=None)
    assert s.polygon_api_key == "env-key"
    assert s.cors_origins == ["http://localhost:3000", "https://example.com"]
