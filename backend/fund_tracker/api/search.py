"""Fund search endpoint."""

from fastapi import APIRouter

from fund_tracker.api.schemas import FundSearchResponse
from fund_tracker.services.fund_lookup import fund_lookup_service

router = APIRouter(prefix="/api", tags=["search"])


@router.get("/fund/search", response_model=list[FundSearchResponse])
async def search_funds(q: str = ""):
    """Search funds by name or category.

    Queries shorter than 3 characters return []. Falls back to a static fund
    table when mfapi.in is unreachable.
    """
    results = fund_lookup_service.search(q)
    return [
        FundSearchResponse(
            id=r.id, name=r.name, current_price=r.current_price, category=r.category
        )
        for r in results
    ]
