from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request

from shared.errors import StorageUnavailable, Unauthorized
from shared.security.dependencies import get_token_claims

from .models import UserRole
from .service import UserService


@dataclass(frozen=True)
class CurrentUser:
    """The resolved caller, as business logic sees it."""
    id: int
    open_id: str
    role: UserRole


async def _resolve(request: Request, claims: Optional[dict]) -> Optional[CurrentUser]:
    if claims is None:
        return None
    database = request.app.state.db
    policy = request.app.state.role_policy
    if database.available:
        # Short-lived session of its own, so no read transaction stays open
        # for the rest of the request.
        async with database.session() as db:
            user = await UserService.resolve(db, claims, policy)
    else:
        user = await UserService.resolve(None, claims, policy)
    if user is None:
        return None
    return CurrentUser(id=user.id, open_id=user.open_id, role=UserRole(user.role))


async def get_optional_user(
    request: Request,
    claims: Optional[dict] = Depends(get_token_claims),
) -> Optional[CurrentUser]:
    """Dependency for public routes: the caller if identifiable, else None."""
    return await _resolve(request, claims)


async def get_current_user(
    request: Request,
    claims: Optional[dict] = Depends(get_token_claims),
) -> CurrentUser:
    """Dependency for protected routes."""
    if claims is None:
        raise Unauthorized("Could not validate credentials")
    if not request.app.state.db.available:
        raise StorageUnavailable("Cannot resolve caller: storage is not configured")
    user = await _resolve(request, claims)
    if user is None:
        raise Unauthorized("Could not validate credentials")
    return user
