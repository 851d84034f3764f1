from market_proxy.polygon import (
    HANDLERS,
    VALID_CATEGORIES,
    Category,
    reshape_listing,
    reshape_overview,
    reshape_price,
)


def test_every_category_has_a_handler():
    assert set(HANDLERS) == set(Category)


def test_queries_are_deterministic():
    for handler in HANDLERS.values():
        assert handler.build_query("NVDA") == handler.build_query("NVDA")


def test_valid_categories_message():
    assert VALID_CATEGORIES == '"financials", "news", "overview", or "price"'


def test_listing_treats_null_fields_as_empty():
    shaped = reshape_listing({"results": None, "count": None, "next_url": None})
    assert shaped.data == []
    assert shaped.count == 0
    assert shaped.next_page_token is None


def test_overview_keeps_empty_results_object():
    assert reshape_overview({"results": {}}).data == {}


def test_price_count_defaults_to_zero():
    shaped = reshape_price({"status": "OK"})
    assert shaped.count == 0
    assert shaped.data == {"status": "OK"}
