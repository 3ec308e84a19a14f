"""Market data service for Indian mutual funds via the mfapi.in API."""

import logging
from typing import Any

import httpx

from fund_tracker.config import HTTP_TIMEOUT, MFAPI_BASE_URL
from fund_tracker.services.cache import nav_cache

logger = logging.getLogger(__name__)


class MarketDataService:
    """Fetches scheme search results and NAV history from mfapi.in."""

    def __init__(self, base_url: str = MFAPI_BASE_URL):
        self.base_url = base_url.rstrip("/")

    def _fetch_scheme(self, scheme_code: str) -> dict[str, Any] | None:
        """Raw scheme payload {meta, data: [{date, nav}, ...]}, latest NAV first."""
        try:
            resp = httpx.get(f"{self.base_url}/{scheme_code}", timeout=HTTP_TIMEOUT)
            resp.raise_for_status()
            return resp.json()
        except Exception as e:
            logger.error(f"Failed to fetch NAV data for scheme {scheme_code}: {e}")
            return None

    def _scheme_payload(self, scheme_code: str) -> dict[str, Any] | None:
        return nav_cache.get_or_load(
            f"scheme:{scheme_code}", lambda: self._fetch_scheme(scheme_code)
        )

    def fetch_latest_nav(self, scheme_code: str) -> dict[str, Any] | None:
        """Get the latest NAV for a scheme.

        Returns {scheme_code, scheme_name, nav, date} or None.
        """
        payload = self._scheme_payload(scheme_code)
        if not payload or not payload.get("data"):
            return None
        try:
            latest = payload["data"][0]
            return {
                "scheme_code": str(scheme_code),
                "scheme_name": str(payload.get("meta", {}).get("scheme_name", "")),
                "nav": float(latest["nav"]),
                "date": str(latest["date"]),
            }
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed NAV data for scheme {scheme_code}: {e}")
            return None

    def calculate_mtm_change(self, scheme_code: str) -> dict[str, float] | None:
        """Mark-to-market change of the latest NAV against the previous one.

        Returns {previous_nav, current_nav, absolute_change, percent_change},
        or None when fewer than two NAV points are available.
        """
        payload = self._scheme_payload(scheme_code)
        if not payload or len(payload.get("data") or []) < 2:
            return None
        try:
            current_nav = float(payload["data"][0]["nav"])
            previous_nav = float(payload["data"][1]["nav"])
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed NAV data for scheme {scheme_code}: {e}")
            return None
        if previous_nav == 0:
            return None

        absolute_change = current_nav - previous_nav
        return {
            "previous_nav": previous_nav,
            "current_nav": current_nav,
            "absolute_change": absolute_change,
            "percent_change": absolute_change / previous_nav * 100,
        }

    def search_schemes(self, query: str) -> list[dict[str, str]]:
        """Search schemes by name. Raises httpx.HTTPError on failure.

        Returns list of {scheme_code, scheme_name}.
        """
        resp = httpx.get(
            f"{self.base_url}/search", params={"q": query}, timeout=HTTP_TIMEOUT
        )
        resp.raise_for_status()
        return [
            {
                "scheme_code": str(item["schemeCode"]),
                "scheme_name": str(item["schemeName"]),
            }
            for item in resp.json()
        ]


# Global instance
market_data_service = MarketDataService()
