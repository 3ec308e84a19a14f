"""Tests for fund search endpoint."""

import pytest
from unittest.mock import patch
from httpx import AsyncClient, ASGITransport

from fund_tracker.main import app
from fund_tracker.services.cache import nav_cache, search_cache


@pytest.fixture(autouse=True)
def clear_caches():
    nav_cache.clear()
    search_cache.clear()
    yield
    nav_cache.clear()
    search_cache.clear()


MOCK_SCHEMES = [
    {"scheme_code": "120503", "scheme_name": "Axis ELSS Tax Saver Fund - Direct Plan - Growth"},
    {"scheme_code": "120505", "scheme_name": "Axis Midcap Fund - Direct Plan - Growth"},
]


def _nav(code):
    return {"scheme_code": code, "scheme_name": "", "nav": 95.5, "date": "17-10-2026"}


@pytest.mark.asyncio
async def test_search_remote():
    with patch(
        "fund_tracker.services.fund_lookup.market_data_service.search_schemes",
        return_value=MOCK_SCHEMES,
    ), patch(
        "fund_tracker.services.fund_lookup.market_data_service.fetch_latest_nav",
        side_effect=_nav,
    ):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            resp = await c.get("/api/fund/search?q=axis")
    assert resp.status_code == 200
    results = resp.json()
    assert [r["id"] for r in results] == ["120503", "120505"]
    assert results[0]["current_price"] == 95.5
    assert results[0]["category"] == "Equity"


@pytest.mark.asyncio
async def test_search_falls_back_to_static_table():
    with patch(
        "fund_tracker.services.fund_lookup.market_data_service.search_schemes",
        side_effect=RuntimeError("mfapi down"),
    ):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            resp = await c.get("/api/fund/search?q=mirae")
    names = [r["name"] for r in resp.json()]
    assert len(names) == 3
    assert all(n.startswith("Mirae Asset") for n in names)


@pytest.mark.asyncio
async def test_search_short_query_returns_empty():
    with patch(
        "fund_tracker.services.fund_lookup.market_data_service.search_schemes"
    ) as mock_search:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            resp = await c.get("/api/fund/search?q=ax")
            empty = await c.get("/api/fund/search?q=")
    assert resp.json() == []
    assert empty.json() == []
    mock_search.assert_not_called()
