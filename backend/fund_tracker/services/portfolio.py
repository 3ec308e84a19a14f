"""Portfolio management service.

The portfolio is loaded whole, mutated in memory and written back after every
change. Mutations are serialized by the caller; there is no merge logic.
"""

import logging
import math
from datetime import date, datetime

from fund_tracker.errors import FundValidationError, LookupUnavailableError, NotFoundError
from fund_tracker.models.portfolio import (
    FundEntry,
    FundHolding,
    Member,
    NavQuote,
    Portfolio,
)
from fund_tracker.services.auth import UserSession
from fund_tracker.services.market_data import MarketDataService, market_data_service
from fund_tracker.services.user_data import UserDataService

logger = logging.getLogger(__name__)

PORTFOLIO_KEY = "portfolio"


def _parse_units(raw: float | str | None) -> float:
    try:
        units = float(raw)
    except (TypeError, ValueError):
        raise FundValidationError("Please enter a valid number of units")
    if not math.isfinite(units) or units <= 0:
        raise FundValidationError("Please enter a valid number of units")
    return units


def _parse_purchase_date(raw: date | str | None) -> date:
    if isinstance(raw, date):
        return raw
    if not raw or not raw.strip():
        raise FundValidationError("Please select a purchase date")
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        raise FundValidationError("Please select a purchase date")


def _is_positive(value: float) -> bool:
    return math.isfinite(value) and value > 0


def build_fund(entry: FundEntry) -> FundHolding:
    """Validate raw form input and build a new holding.

    current_value is taken as given, else seeded from the NAV shown at entry
    time (rounded to whole currency units), else 0.
    """
    name = entry.name.strip()
    if not name:
        raise FundValidationError("Please enter a fund name")
    units = _parse_units(entry.units)
    purchase_date = _parse_purchase_date(entry.purchase_date)

    if entry.purchase_nav is not None and not _is_positive(entry.purchase_nav):
        raise FundValidationError("Purchase NAV must be greater than zero")
    if entry.current_nav is not None and not _is_positive(entry.current_nav):
        raise FundValidationError("Current NAV must be greater than zero")

    if entry.current_value is not None:
        if not math.isfinite(entry.current_value) or entry.current_value < 0:
            raise FundValidationError("Current value cannot be negative")
        current_value = entry.current_value
    elif entry.current_nav is not None:
        current_value = float(round(units * entry.current_nav))
    else:
        current_value = 0.0

    return FundHolding(
        name=name,
        units=units,
        current_value=current_value,
        purchase_date=purchase_date,
        purchase_nav=entry.purchase_nav,
        scheme_code=entry.scheme_code or None,
    )


class PortfolioService:
    """Manages a user's members and their fund holdings."""

    def __init__(
        self,
        data: UserDataService,
        market_data: MarketDataService = market_data_service,
    ):
        self.data = data
        self.market_data = market_data

    async def get_portfolio(self, user: UserSession) -> Portfolio:
        raw = await self.data.get_data(user, PORTFOLIO_KEY)
        if raw is None:
            return Portfolio()
        return Portfolio.model_validate(raw)

    async def save_portfolio(self, user: UserSession, portfolio: Portfolio) -> None:
        portfolio.last_updated = datetime.now()
        await self.data.save_data(user, PORTFOLIO_KEY, portfolio.model_dump(mode="json"))

    async def add_member(self, user: UserSession, name: str) -> Member:
        name = name.strip()
        if not name:
            raise FundValidationError("Please enter a name")
        portfolio = await self.get_portfolio(user)
        member = Member(name=name)
        portfolio.members.append(member)
        await self.save_portfolio(user, portfolio)
        return member

    async def remove_member(self, user: UserSession, member_id: str) -> None:
        """Remove a member together with all of its funds."""
        portfolio = await self.get_portfolio(user)
        portfolio.members = [m for m in portfolio.members if m.id != member_id]
        await self.save_portfolio(user, portfolio)

    async def _load_member(
        self, user: UserSession, member_id: str
    ) -> tuple[Portfolio, Member]:
        portfolio = await self.get_portfolio(user)
        member = portfolio.find_member(member_id)
        if member is None:
            raise NotFoundError(f"Member {member_id} not found")
        return portfolio, member

    async def add_fund(
        self, user: UserSession, member_id: str, entry: FundEntry
    ) -> FundHolding:
        # Validate before loading so a bad entry never touches the store
        fund = build_fund(entry)
        portfolio, member = await self._load_member(user, member_id)
        member.funds.append(fund)
        await self.save_portfolio(user, portfolio)
        return fund

    async def remove_fund(self, user: UserSession, member_id: str, fund_id: str) -> None:
        portfolio, member = await self._load_member(user, member_id)
        member.funds = [f for f in member.funds if f.id != fund_id]
        await self.save_portfolio(user, portfolio)

    def apply_nav_refresh(self, fund: FundHolding) -> FundHolding:
        """Store the latest NAV quote on `fund` and re-seed its current value."""
        if not fund.scheme_code:
            raise LookupUnavailableError(f"Fund {fund.name} has no scheme code")
        nav_data = self.market_data.fetch_latest_nav(fund.scheme_code)
        if nav_data is None:
            raise LookupUnavailableError(
                f"NAV data unavailable for scheme {fund.scheme_code}"
            )

        mtm = self.market_data.calculate_mtm_change(fund.scheme_code) or {}
        fund.nav_quote = NavQuote(
            nav=nav_data["nav"],
            nav_date=nav_data["date"],
            previous_nav=mtm.get("previous_nav"),
            absolute_change=mtm.get("absolute_change"),
            percent_change=mtm.get("percent_change"),
        )
        fund.current_value = float(round(fund.units * nav_data["nav"]))
        fund.last_updated = datetime.now()
        return fund

    async def refresh_fund_nav(
        self, user: UserSession, member_id: str, fund_id: str
    ) -> FundHolding:
        portfolio, member = await self._load_member(user, member_id)
        fund = next((f for f in member.funds if f.id == fund_id), None)
        if fund is None:
            raise NotFoundError(f"Fund {fund_id} not found")
        self.apply_nav_refresh(fund)
        await self.save_portfolio(user, portfolio)
        return fund

    async def refresh_all_navs(self, user: UserSession) -> int:
        """Refresh every holding with a scheme code. Returns how many updated."""
        portfolio = await self.get_portfolio(user)
        updated = 0
        for member in portfolio.members:
            for fund in member.funds:
                if not fund.scheme_code:
                    continue
                try:
                    self.apply_nav_refresh(fund)
                    updated += 1
                except LookupUnavailableError as e:
                    logger.error(f"Skipping NAV refresh for {fund.name}: {e}")
        if updated:
            await self.save_portfolio(user, portfolio)
        return updated

    async def reset_portfolio(self, user: UserSession) -> Portfolio:
        portfolio = Portfolio()
        await self.save_portfolio(user, portfolio)
        return portfolio

    async def clear_user_data(self, user: UserSession) -> int:
        return await self.data.clear_user_data(user)
