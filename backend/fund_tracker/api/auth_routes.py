"""Auth API routes: name + PIN registration and login."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from fund_tracker.api.schemas import CredentialsRequest, UserResponse
from fund_tracker.errors import AuthError
from fund_tracker.models.database import get_db
from fund_tracker.services.auth import auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse)
async def register(req: CredentialsRequest, db: AsyncSession = Depends(get_db)):
    try:
        user = await auth_service.register_user(db, req.name, req.pin)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return UserResponse(id=user.id, name=user.name, created_at=user.created_at)


@router.post("/login", response_model=UserResponse)
async def login(req: CredentialsRequest, db: AsyncSession = Depends(get_db)):
    try:
        user = await auth_service.login_user(db, req.name, req.pin)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return UserResponse(id=user.id, name=user.name, created_at=user.created_at)
