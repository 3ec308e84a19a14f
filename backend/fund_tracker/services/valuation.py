"""Portfolio valuation engine.

Pure functions over in-memory holdings. Nothing here rounds: values are
rounded at the API/display layer only, so error does not compound across many
funds.

    invested_value = units * purchase_nav        (or current_value if unknown)
    current_nav    = current_value / units
    pl_pct         = (current_nav - purchase_nav) / purchase_nav * 100
"""

from dataclasses import dataclass
from typing import Iterable

from fund_tracker.models.portfolio import FundHolding, Member, Portfolio


@dataclass(frozen=True)
class ProfitLoss:
    percent: float
    is_profit: bool


@dataclass(frozen=True)
class MemberTotals:
    current_value: float
    invested_value: float


@dataclass(frozen=True)
class PortfolioTotals:
    current_value: float
    invested_value: float
    profit_loss: float
    profit_loss_percentage: float
    total_funds: int


def invested_value(fund: FundHolding) -> float:
    """Cost basis of a holding; falls back to current value (no gain/loss)."""
    if fund.purchase_nav is None:
        return fund.current_value
    return fund.units * fund.purchase_nav


def profit_loss_percent(fund: FundHolding) -> ProfitLoss | None:
    """P/L percent via the NAV implied by current value, or None if cost unknown."""
    if fund.purchase_nav is None:
        return None
    # units > 0 is enforced when the holding is created
    current_nav = fund.current_value / fund.units
    percent = (current_nav - fund.purchase_nav) / fund.purchase_nav * 100
    return ProfitLoss(percent=percent, is_profit=percent >= 0)


def member_totals(member: Member) -> MemberTotals:
    return MemberTotals(
        current_value=sum(f.current_value for f in member.funds),
        invested_value=sum(invested_value(f) for f in member.funds),
    )


def totals_for_members(members: Iterable[Member]) -> PortfolioTotals:
    current = 0.0
    invested = 0.0
    total_funds = 0
    for member in members:
        totals = member_totals(member)
        current += totals.current_value
        invested += totals.invested_value
        total_funds += len(member.funds)

    profit_loss = current - invested
    profit_loss_pct = (profit_loss / invested * 100) if invested > 0 else 0.0
    return PortfolioTotals(
        current_value=current,
        invested_value=invested,
        profit_loss=profit_loss,
        profit_loss_percentage=profit_loss_pct,
        total_funds=total_funds,
    )


def portfolio_totals(portfolio: Portfolio) -> PortfolioTotals:
    return totals_for_members(portfolio.members)
