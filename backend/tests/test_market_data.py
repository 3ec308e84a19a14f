"""Tests for mfapi.in market data service."""

from unittest.mock import patch, MagicMock

import httpx
import pytest

from fund_tracker.services.cache import nav_cache
from fund_tracker.services.market_data import MarketDataService

SCHEME_PAYLOAD = {
    "meta": {"scheme_name": "Axis Liquid Fund - Direct Plan - Growth", "scheme_code": 120389},
    "data": [
        {"date": "17-10-2026", "nav": "2804.50000"},
        {"date": "16-10-2026", "nav": "2804.00000"},
        {"date": "15-10-2026", "nav": "2803.20000"},
    ],
    "status": "SUCCESS",
}


@pytest.fixture(autouse=True)
def clear_cache():
    nav_cache.clear()
    yield
    nav_cache.clear()


@pytest.fixture
def market_service():
    return MarketDataService(base_url="https://api.mfapi.in/mf")


def _mock_response(payload, status_code=200):
    mock_resp = MagicMock()
    mock_resp.json.return_value = payload
    if status_code >= 400:
        mock_resp.raise_for_status.side_effect = httpx.HTTPStatusError(
            "error", request=MagicMock(), response=MagicMock()
        )
    return mock_resp


class TestFetchLatestNav:
    def test_latest_nav(self, market_service):
        with patch(
            "fund_tracker.services.market_data.httpx.get",
            return_value=_mock_response(SCHEME_PAYLOAD),
        ) as mock_get:
            result = market_service.fetch_latest_nav("120389")
        assert result == {
            "scheme_code": "120389",
            "scheme_name": "Axis Liquid Fund - Direct Plan - Growth",
            "nav": 2804.5,
            "date": "17-10-2026",
        }
        assert mock_get.call_args.args[0] == "https://api.mfapi.in/mf/120389"

    def test_result_is_cached(self, market_service):
        with patch(
            "fund_tracker.services.market_data.httpx.get",
            return_value=_mock_response(SCHEME_PAYLOAD),
        ) as mock_get:
            market_service.fetch_latest_nav("120389")
            market_service.calculate_mtm_change("120389")
        assert mock_get.call_count == 1

    def test_no_data(self, market_service):
        with patch(
            "fund_tracker.services.market_data.httpx.get",
            return_value=_mock_response({"meta": {}, "data": []}),
        ):
            assert market_service.fetch_latest_nav("000000") is None

    def test_http_error(self, market_service):
        with patch(
            "fund_tracker.services.market_data.httpx.get",
            return_value=_mock_response({}, status_code=500),
        ):
            assert market_service.fetch_latest_nav("120389") is None

    def test_network_failure(self, market_service):
        with patch(
            "fund_tracker.services.market_data.httpx.get",
            side_effect=httpx.ConnectError("down"),
        ):
            assert market_service.fetch_latest_nav("120389") is None


class TestMtmChange:
    def test_change_vs_previous_day(self, market_service):
        with patch(
            "fund_tracker.services.market_data.httpx.get",
            return_value=_mock_response(SCHEME_PAYLOAD),
        ):
            mtm = market_service.calculate_mtm_change("120389")
        assert mtm["current_nav"] == 2804.5
        assert mtm["previous_nav"] == 2804.0
        assert mtm["absolute_change"] == pytest.approx(0.5)
        assert mtm["percent_change"] == pytest.approx(0.5 / 2804.0 * 100)

    def test_single_data_point(self, market_service):
        payload = {"meta": {}, "data": SCHEME_PAYLOAD["data"][:1]}
        with patch(
            "fund_tracker.services.market_data.httpx.get",
            return_value=_mock_response(payload),
        ):
            assert market_service.calculate_mtm_change("120389") is None


class TestSearchSchemes:
    def test_search(self, market_service):
        payload = [
            {"schemeCode": 120389, "schemeName": "Axis Liquid Fund - Direct Plan - Growth"},
            {"schemeCode": 120390, "schemeName": "Axis Liquid Fund - Direct Plan - IDCW"},
        ]
        with patch(
            "fund_tracker.services.market_data.httpx.get",
            return_value=_mock_response(payload),
        ) as mock_get:
            results = market_service.search_schemes("axis liquid")
        assert results[0] == {
            "scheme_code": "120389",
            "scheme_name": "Axis Liquid Fund - Direct Plan - Growth",
        }
        assert mock_get.call_args.kwargs["params"] == {"q": "axis liquid"}

    def test_search_failure_raises(self, market_service):
        with patch(
            "fund_tracker.services.market_data.httpx.get",
            side_effect=httpx.ConnectError("down"),
        ):
            with pytest.raises(httpx.HTTPError):
                market_service.search_schemes("axis")
