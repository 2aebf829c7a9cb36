from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import degrades_to, requires_storage

from .models import Order, OrderStatus


class OrderRepository:

    @staticmethod
    @requires_storage
    async def create_order(db: AsyncSession, order: Order) -> Order:
        db.add(order)
        await db.commit()
        await db.refresh(order)
        return order

    @staticmethod
    @degrades_to(lambda: None)
    async def get_order(db: AsyncSession, order_id: int) -> Optional[Order]:
        result = await db.execute(select(Order).where(Order.id == order_id))
        return result.scalars().first()

    @staticmethod
    @degrades_to(list)
    async def list_by_buyer(db: AsyncSession, buyer_id: int) -> List[Order]:
        result = await db.execute(
            select(Order).where(Order.buyer_id == buyer_id).order_by(Order.created_at.desc(), Order.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    @degrades_to(list)
    async def list_by_seller(db: AsyncSession, seller_id: int) -> List[Order]:
        result = await db.execute(
            select(Order).where(Order.seller_id == seller_id).order_by(Order.created_at.desc(), Order.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    @requires_storage
    async def update_status(db: AsyncSession, order_id: int, status: OrderStatus) -> Optional[Order]:
        result = await db.execute(select(Order).where(Order.id == order_id))
        order = result.scalars().first()

        if not order:
            return None

        order.status = OrderStatus(status).value

        await db.commit()
        await db.refresh(order)
        return order
