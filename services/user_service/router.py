from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.errors import Unauthorized
from shared.security.dependencies import get_token_claims

from .dependencies import CurrentUser, get_optional_user
from .repository import UserRepository
from .schemas import UserResponse
from .service import UserService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get(
    "/me",
    response_model=Optional[UserResponse],
    summary="Get the current session's user, or null",
)
async def get_me(
    caller: Optional[CurrentUser] = Depends(get_optional_user),
    db: Optional[AsyncSession] = Depends(get_db),
):
    if caller is None:
        return None
    return await UserRepository.get_by_id(db, caller.id)


@router.post(
    "/login",
    response_model=UserResponse,
    summary="Record a login from the identity provider's token",
)
async def login(
    request: Request,
    claims: Optional[dict] = Depends(get_token_claims),
    db: Optional[AsyncSession] = Depends(get_db),
):
    if claims is None:
        raise Unauthorized("Could not validate credentials")
    return await UserService.sync_from_claims(db, claims, request.app.state.role_policy)
