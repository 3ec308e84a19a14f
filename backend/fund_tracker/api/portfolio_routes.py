"""Portfolio API routes."""

from fastapi import APIRouter, Depends, HTTPException

from fund_tracker.api.deps import get_portfolio_service, get_user_session
from fund_tracker.api.schemas import (
    FundCreatedResponse,
    FundHoldingResponse,
    MemberCreateRequest,
    MemberCreatedResponse,
    MemberResponse,
    PortfolioResponse,
    ProfitLossResponse,
    SimulationRequest,
    SimulationResponse,
    SimulationRowResponse,
)
from fund_tracker.errors import (
    FundValidationError,
    LookupUnavailableError,
    NotFoundError,
    SimulationError,
)
from fund_tracker.models.portfolio import FundEntry, FundHolding, Member, Portfolio
from fund_tracker.services.auth import UserSession
from fund_tracker.services.formatting import format_inr
from fund_tracker.services.portfolio import PortfolioService
from fund_tracker.services.simulator import CompoundingFrequency, growth_simulator
from fund_tracker.services.valuation import (
    invested_value,
    member_totals,
    portfolio_totals,
    profit_loss_percent,
)

router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])


def _fund_response(fund: FundHolding) -> FundHoldingResponse:
    pl = profit_loss_percent(fund)
    return FundHoldingResponse(
        id=fund.id,
        name=fund.name,
        units=fund.units,
        current_value=round(fund.current_value, 2),
        purchase_date=fund.purchase_date,
        purchase_nav=fund.purchase_nav,
        scheme_code=fund.scheme_code,
        invested_value=round(invested_value(fund), 2),
        profit_loss=(
            ProfitLossResponse(percent=round(pl.percent, 4), is_profit=pl.is_profit)
            if pl is not None
            else None
        ),
        nav_quote=fund.nav_quote,
        last_updated=fund.last_updated,
    )


def _member_response(member: Member) -> MemberResponse:
    totals = member_totals(member)
    return MemberResponse(
        id=member.id,
        name=member.name,
        funds=[_fund_response(f) for f in member.funds],
        current_value=round(totals.current_value, 2),
        invested_value=round(totals.invested_value, 2),
    )


def _portfolio_response(portfolio: Portfolio) -> PortfolioResponse:
    totals = portfolio_totals(portfolio)
    return PortfolioResponse(
        members=[_member_response(m) for m in portfolio.members],
        last_updated=portfolio.last_updated,
        total_current_value=round(totals.current_value, 2),
        total_invested_value=round(totals.invested_value, 2),
        profit_loss=round(totals.profit_loss, 2),
        profit_loss_percentage=round(totals.profit_loss_percentage, 4),
        total_funds=totals.total_funds,
    )


@router.get("", response_model=PortfolioResponse)
async def get_portfolio(
    user: UserSession = Depends(get_user_session),
    service: PortfolioService = Depends(get_portfolio_service),
):
    portfolio = await service.get_portfolio(user)
    return _portfolio_response(portfolio)


@router.post("/members", response_model=MemberCreatedResponse)
async def add_member(
    req: MemberCreateRequest,
    user: UserSession = Depends(get_user_session),
    service: PortfolioService = Depends(get_portfolio_service),
):
    try:
        member = await service.add_member(user, req.name)
    except FundValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MemberCreatedResponse(id=member.id, name=member.name)


@router.delete("/members/{member_id}")
async def remove_member(
    member_id: str,
    user: UserSession = Depends(get_user_session),
    service: PortfolioService = Depends(get_portfolio_service),
):
    await service.remove_member(user, member_id)
    return {"status": "ok"}


@router.post("/members/{member_id}/funds", response_model=FundCreatedResponse)
async def add_fund(
    member_id: str,
    entry: FundEntry,
    user: UserSession = Depends(get_user_session),
    service: PortfolioService = Depends(get_portfolio_service),
):
    try:
        fund = await service.add_fund(user, member_id, entry)
    except FundValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return FundCreatedResponse(
        id=fund.id, name=fund.name, units=fund.units, current_value=fund.current_value
    )


@router.delete("/members/{member_id}/funds/{fund_id}")
async def remove_fund(
    member_id: str,
    fund_id: str,
    user: UserSession = Depends(get_user_session),
    service: PortfolioService = Depends(get_portfolio_service),
):
    try:
        await service.remove_fund(user, member_id, fund_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "ok"}


@router.post(
    "/members/{member_id}/funds/{fund_id}/refresh-nav",
    response_model=FundHoldingResponse,
)
async def refresh_fund_nav(
    member_id: str,
    fund_id: str,
    user: UserSession = Depends(get_user_session),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Fetch the latest NAV for a holding and re-seed its current value."""
    try:
        fund = await service.refresh_fund_nav(user, member_id, fund_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except LookupUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return _fund_response(fund)


@router.post("/reset", response_model=PortfolioResponse)
async def reset_portfolio(
    user: UserSession = Depends(get_user_session),
    service: PortfolioService = Depends(get_portfolio_service),
):
    portfolio = await service.reset_portfolio(user)
    return _portfolio_response(portfolio)


@router.delete("/data")
async def clear_user_data(
    user: UserSession = Depends(get_user_session),
    service: PortfolioService = Depends(get_portfolio_service),
):
    removed = await service.clear_user_data(user)
    return {"status": "ok", "removed": removed}


@router.post("/simulate", response_model=SimulationResponse)
async def simulate_growth(
    req: SimulationRequest,
    user: UserSession = Depends(get_user_session),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Project portfolio growth; starts from the current total unless overridden."""
    current_value = req.current_value
    if current_value is None:
        portfolio = await service.get_portfolio(user)
        current_value = portfolio_totals(portfolio).current_value

    try:
        rows = growth_simulator.simulate(
            current_value, req.annual_return_percent, req.years, req.frequency
        )
    except SimulationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    result = growth_simulator.summarize(current_value, rows)

    compounding = (
        "compounding monthly"
        if req.frequency is CompoundingFrequency.MONTHLY
        else "compounding yearly"
    )
    direction = "growth" if result.growth_pct > 0 else "decline"
    summary = (
        f"Starting with {format_inr(current_value)} and {compounding}, "
        f"at {req.annual_return_percent:g}% annual returns, your portfolio would grow "
        f"to {format_inr(result.final_value)}. That's a {direction} of "
        f"{result.growth_pct:.1f}% over {req.years} years."
    )

    return SimulationResponse(
        current_value=current_value,
        annual_return_percent=req.annual_return_percent,
        years=req.years,
        frequency=req.frequency,
        rows=[
            SimulationRowResponse(
                year=r.year,
                start_value=r.start_value,
                growth_amount=r.growth_amount,
                end_value=r.end_value,
            )
            for r in rows
        ],
        final_value=result.final_value,
        growth_pct=result.growth_pct,
        summary=summary,
    )
