"""Pydantic schemas for API request/response."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from fund_tracker.models.portfolio import NavQuote
from fund_tracker.services.simulator import CompoundingFrequency


class CredentialsRequest(BaseModel):
    name: str
    pin: str


class UserResponse(BaseModel):
    id: str
    name: str
    created_at: str


class MemberCreateRequest(BaseModel):
    name: str


class MemberCreatedResponse(BaseModel):
    id: str
    name: str


class FundCreatedResponse(BaseModel):
    id: str
    name: str
    units: float
    current_value: float


class ProfitLossResponse(BaseModel):
    percent: float
    is_profit: bool


class FundHoldingResponse(BaseModel):
    id: str
    name: str
    units: float
    current_value: float
    purchase_date: date
    purchase_nav: float | None = None
    scheme_code: str | None = None
    invested_value: float
    profit_loss: ProfitLossResponse | None = None
    nav_quote: NavQuote | None = None
    last_updated: datetime | None = None


class MemberResponse(BaseModel):
    id: str
    name: str
    funds: list[FundHoldingResponse]
    current_value: float
    invested_value: float


class PortfolioResponse(BaseModel):
    members: list[MemberResponse]
    last_updated: datetime
    total_current_value: float
    total_invested_value: float
    profit_loss: float
    profit_loss_percentage: float
    total_funds: int


class SimulationRequest(BaseModel):
    annual_return_percent: float = 12.0
    years: int = Field(default=5, ge=0, le=100)
    frequency: CompoundingFrequency = CompoundingFrequency.YEARLY
    # Defaults to the portfolio's total current value
    current_value: float | None = Field(default=None, ge=0)


class SimulationRowResponse(BaseModel):
    year: int
    start_value: float
    growth_amount: float
    end_value: float


class SimulationResponse(BaseModel):
    current_value: float
    annual_return_percent: float
    years: int
    frequency: CompoundingFrequency
    rows: list[SimulationRowResponse]
    final_value: float
    growth_pct: float
    summary: str


class FundSearchResponse(BaseModel):
    id: str
    name: str
    current_price: float
    category: str


class NavResponse(BaseModel):
    scheme_code: str
    scheme_name: str
    nav: float
    date: str


class MtmResponse(BaseModel):
    scheme_code: str
    previous_nav: float
    current_nav: float
    absolute_change: float
    percent_change: float
