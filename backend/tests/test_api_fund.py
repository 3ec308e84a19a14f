"""Tests for fund NAV endpoints."""

import pytest
from unittest.mock import patch
from httpx import AsyncClient, ASGITransport

from fund_tracker.main import app


@pytest.mark.asyncio
async def test_latest_nav():
    nav = {"scheme_code": "120389", "scheme_name": "Axis Liquid Fund", "nav": 2804.5,
           "date": "17-10-2026"}
    with patch("fund_tracker.api.fund.market_data_service.fetch_latest_nav", return_value=nav):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            resp = await c.get("/api/fund/120389/nav")
    assert resp.status_code == 200
    assert resp.json() == nav


@pytest.mark.asyncio
async def test_latest_nav_not_found():
    with patch("fund_tracker.api.fund.market_data_service.fetch_latest_nav", return_value=None):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            resp = await c.get("/api/fund/999999/nav")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_mtm_change():
    mtm = {"previous_nav": 2804.0, "current_nav": 2804.5, "absolute_change": 0.5,
           "percent_change": 0.5 / 2804.0 * 100}
    with patch("fund_tracker.api.fund.market_data_service.calculate_mtm_change", return_value=mtm):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            resp = await c.get("/api/fund/120389/mtm")
    assert resp.status_code == 200
    data = resp.json()
    assert data["scheme_code"] == "120389"
    assert data["absolute_change"] == 0.5


@pytest.mark.asyncio
async def test_mtm_insufficient_data():
    with patch("fund_tracker.api.fund.market_data_service.calculate_mtm_change", return_value=None):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            resp = await c.get("/api/fund/120389/mtm")
    assert resp.status_code == 404
