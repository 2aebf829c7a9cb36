from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from .models import User
from .policy import RolePolicy
from .repository import UserRepository

logger = structlog.get_logger(__name__)


class UserService:

    @staticmethod
    async def sync_from_claims(db: Optional[AsyncSession], claims: dict, policy: RolePolicy) -> User:
        """Upsert the user described by verified identity-provider claims."""
        open_id = claims["sub"]
        user = await UserRepository.upsert(
            db,
            open_id=open_id,
            name=claims.get("name"),
            email=claims.get("email"),
            login_method=claims.get("login_method"),
            role=policy.role_for(open_id),
        )
        logger.info("user_upserted", user_id=user.id, role=user.role)
        return user

    @staticmethod
    async def resolve(db: Optional[AsyncSession], claims: dict, policy: RolePolicy) -> Optional[User]:
        """Find the caller's user row, creating it the first time we see them."""
        user = await UserRepository.get_by_open_id(db, claims["sub"])
        if user is None and db is not None:
            user = await UserService.sync_from_claims(db, claims, policy)
        return user
