from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from shared.config.database import degrades_to, requires_storage

from .models import User, UserRole

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class UserRepository:

    @staticmethod
    @requires_storage
    async def upsert(
        db: AsyncSession,
        open_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        login_method: Optional[str] = None,
        role: Optional[UserRole] = None,
    ) -> User:
        """Insert the user keyed by open_id, or refresh its mutable fields.

        Fields passed as None are left untouched on an existing row.
        """
        refreshed = {"last_signed_in": func.now(), "updated_at": func.now()}
        for field, value in (("name", name), ("email", email), ("login_method", login_method)):
            if value is not None:
                refreshed[field] = value
        if role is not None:
            refreshed["role"] = role.value

        insert = _UPSERT_DIALECTS.get(db.bind.dialect.name)
        if insert is not None:
            stmt = insert(User).values(
                open_id=open_id,
                name=name,
                email=email,
                login_method=login_method,
                role=(role or UserRole.USER).value,
            )
            stmt = stmt.on_conflict_do_update(index_elements=[User.open_id], set_=refreshed)
            await db.execute(stmt)
        else:
            existing = await UserRepository.get_by_open_id(db, open_id)
            if existing is None:
                db.add(User(
                    open_id=open_id,
                    name=name,
                    email=email,
                    login_method=login_method,
                    role=(role or UserRole.USER).value,
                ))
            else:
                for field, value in refreshed.items():
                    setattr(existing, field, value)
        await db.commit()

        result = await db.execute(
            select(User).where(User.open_id == open_id).execution_options(populate_existing=True)
        )
        return result.scalars().one()

    @staticmethod
    @degrades_to(lambda: None)
    async def get_by_open_id(db: AsyncSession, open_id: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.open_id == open_id))
        return result.scalars().first()

    @staticmethod
    @degrades_to(lambda: None)
    async def get_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalars().first()
