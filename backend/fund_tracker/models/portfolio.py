"""Portfolio document models: members, fund holdings and NAV quotes.

A user's whole portfolio is one JSON document in the key-value store, so these
are pydantic models rather than ORM tables.
"""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field


def new_id() -> str:
    return str(uuid.uuid4())


class NavQuote(BaseModel):
    """Latest published NAV with its mark-to-market change vs the prior day."""

    nav: float
    nav_date: str
    previous_nav: float | None = None
    absolute_change: float | None = None
    percent_change: float | None = None


class FundHolding(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    units: float = Field(gt=0)
    current_value: float = Field(default=0.0, ge=0)
    purchase_date: date
    # Cost basis is unknown when the purchase NAV was not recorded
    purchase_nav: float | None = Field(default=None, gt=0)
    scheme_code: str | None = None
    nav_quote: NavQuote | None = None
    last_updated: datetime | None = None


class Member(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    funds: list[FundHolding] = Field(default_factory=list)


class Portfolio(BaseModel):
    members: list[Member] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=datetime.now)

    def find_member(self, member_id: str) -> Member | None:
        for member in self.members:
            if member.id == member_id:
                return member
        return None


class FundEntry(BaseModel):
    """Raw add-fund form input, validated by the portfolio service."""

    name: str = ""
    units: float | str | None = None
    current_value: float | None = None
    purchase_date: date | str | None = None
    purchase_nav: float | None = None
    # NAV shown in search results, used to seed current_value
    current_nav: float | None = None
    scheme_code: str | None = None
