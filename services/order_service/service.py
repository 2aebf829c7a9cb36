from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from services.user_service.dependencies import CurrentUser
from shared.errors import Forbidden, NotFound

from .models import Order
from .repository import OrderRepository


class OrderService:

    @staticmethod
    async def get_order(db: Optional[AsyncSession], caller: CurrentUser, order_id: int) -> Order:
        order = await OrderRepository.get_order(db, order_id)
        if order is None:
            raise NotFound(f"Order {order_id} not found")
        if caller.id not in (order.buyer_id, order.seller_id):
            raise Forbidden("Only the buyer or the seller can view this order")
        return order

    @staticmethod
    async def list_purchases(db: Optional[AsyncSession], caller: CurrentUser) -> List[Order]:
        return await OrderRepository.list_by_buyer(db, caller.id)

    @staticmethod
    async def list_sales(db: Optional[AsyncSession], caller: CurrentUser) -> List[Order]:
        return await OrderRepository.list_by_seller(db, caller.id)
