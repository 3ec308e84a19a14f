"""Fund NAV API routes."""

from fastapi import APIRouter, HTTPException

from fund_tracker.api.schemas import MtmResponse, NavResponse
from fund_tracker.services.market_data import market_data_service

router = APIRouter(prefix="/api/fund", tags=["fund"])


@router.get("/{scheme_code}/nav", response_model=NavResponse)
async def get_latest_nav(scheme_code: str):
    nav_data = market_data_service.fetch_latest_nav(scheme_code)
    if nav_data is None:
        raise HTTPException(status_code=404, detail="NAV data not available")
    return NavResponse(**nav_data)


@router.get("/{scheme_code}/mtm", response_model=MtmResponse)
async def get_mtm_change(scheme_code: str):
    """Change of the latest NAV against the previous trading day."""
    mtm = market_data_service.calculate_mtm_change(scheme_code)
    if mtm is None:
        raise HTTPException(status_code=404, detail="Insufficient NAV data")
    return MtmResponse(scheme_code=scheme_code, **mtm)
