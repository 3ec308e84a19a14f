"""Fund search: mfapi.in first, static fallback table when it is unavailable."""

import logging
from dataclasses import dataclass

import pandas as pd

from fund_tracker.config import SEARCH_MAX_RESULTS, SEARCH_MIN_QUERY_LENGTH
from fund_tracker.services.cache import search_cache
from fund_tracker.services.market_data import MarketDataService, market_data_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FundSearchResult:
    id: str
    name: str
    current_price: float
    category: str


# Checked in order; the first matching keyword group wins
_CATEGORY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("Equity", ("equity", "growth", "large cap", "mid cap", "small cap", "flexi cap")),
    ("Debt", ("debt", "liquid", "overnight", "ultra short", "credit risk")),
    ("Hybrid", ("hybrid", "balanced")),
    ("ELSS", ("tax", "elss")),
]

FALLBACK_FUNDS = pd.DataFrame(
    [
        ("fund1", "HDFC Top 100 Direct Plan Growth", 1245.67, "Equity"),
        ("fund2", "SBI Blue Chip Fund Direct Growth", 65.89, "Equity"),
        ("fund3", "Axis Mid Cap Fund Direct Growth", 89.12, "Equity"),
        ("fund4", "ICICI Prudential Value Discovery Fund Direct Plan", 245.67, "Equity"),
        ("fund5", "Mirae Asset Large Cap Fund Direct Plan", 95.67, "Equity"),
        ("fund6", "Kotak Standard Multicap Fund Direct Plan", 52.36, "Equity"),
        ("fund7", "Aditya Birla Sun Life Tax Relief 96 Direct Growth", 45.25, "ELSS"),
        ("fund8", "HDFC Mid-Cap Opportunities Fund Direct Plan", 105.45, "Equity"),
        ("fund9", "DSP Small Cap Fund Direct Plan Growth", 95.36, "Equity"),
        ("fund10", "ICICI Prudential Liquid Fund Direct Plan", 315.0, "Debt"),
        ("fund11", "HDFC Liquid Fund Direct Plan", 4198.28, "Debt"),
        ("fund12", "Axis Liquid Fund Direct Growth", 2356.78, "Debt"),
        ("fund13", "ICICI Prudential Balanced Advantage Fund Direct Plan", 52.46, "Hybrid"),
        ("fund14", "Kotak Emerging Equity Scheme Direct Plan", 70.25, "Equity"),
        ("fund15", "SBI Magnum Multicap Fund Direct Growth", 68.93, "Equity"),
        ("fund16", "Franklin India Prima Fund Direct Growth", 1567.45, "Equity"),
        ("fund17", "Nippon India Small Cap Fund Direct Growth", 115.67, "Equity"),
        ("fund18", "UTI Mid Cap Fund Direct Growth", 187.25, "Equity"),
        ("fund19", "Mirae Asset Hybrid Equity Fund Direct Plan Growth", 28.35, "Hybrid"),
        ("fund20", "Axis Long Term Equity Fund Direct Growth", 75.46, "ELSS"),
        ("fund21", "Parag Parikh Long Term Equity Fund Direct Growth", 58.93, "Equity"),
        ("fund22", "Kotak Tax Saver Fund Direct Growth", 89.72, "ELSS"),
        ("fund23", "HDFC Corporate Bond Fund Direct Growth", 27.56, "Debt"),
        ("fund24", "ICICI Prudential Technology Fund Direct Plan", 156.78, "Equity"),
        ("fund25", "Mirae Asset Emerging Bluechip Fund Direct Plan", 114.32, "Equity"),
    ],
    columns=["id", "name", "current_price", "category"],
)


def categorize(scheme_name: str) -> str:
    """Guess a fund category from its scheme name."""
    name = scheme_name.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return category
    return "Other"


class FundLookupService:
    """Resolves a free-text query to candidate funds with a current NAV."""

    def __init__(
        self,
        market_data: MarketDataService = market_data_service,
        fallback_table: pd.DataFrame = FALLBACK_FUNDS,
    ):
        self.market_data = market_data
        self.fallback_table = fallback_table

    def search(self, query: str) -> list[FundSearchResult]:
        if not query or len(query.strip()) < SEARCH_MIN_QUERY_LENGTH:
            return []

        cache_key = query.strip().lower()
        cached = search_cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            schemes = self.market_data.search_schemes(query)
        except Exception as e:
            logger.error(f"Fund search against mfapi.in failed: {e}")
            schemes = []

        if schemes:
            results = self._priced_results(schemes[:SEARCH_MAX_RESULTS])
            search_cache.set(cache_key, results)
            return results

        logger.info(f"Falling back to static fund table for search: {query}")
        return self.search_fallback(query)

    def _priced_results(self, schemes: list[dict[str, str]]) -> list[FundSearchResult]:
        """Attach the latest NAV to each scheme; schemes without one are dropped."""
        results = []
        for scheme in schemes:
            nav_data = self.market_data.fetch_latest_nav(scheme["scheme_code"])
            if nav_data is None:
                continue
            results.append(
                FundSearchResult(
                    id=scheme["scheme_code"],
                    name=scheme["scheme_name"],
                    current_price=nav_data["nav"],
                    category=categorize(scheme["scheme_name"]),
                )
            )
        return results

    def search_fallback(self, query: str) -> list[FundSearchResult]:
        df = self.fallback_table
        q = query.strip()
        mask = df["name"].str.contains(q, case=False, regex=False) | df[
            "category"
        ].str.contains(q, case=False, regex=False)
        return [
            FundSearchResult(
                id=str(row["id"]),
                name=str(row["name"]),
                current_price=float(row["current_price"]),
                category=str(row["category"]),
            )
            for _, row in df[mask].iterrows()
        ]


fund_lookup_service = FundLookupService()
