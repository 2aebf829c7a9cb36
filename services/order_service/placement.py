"""Order placement: the one multi-step write in the marketplace.

The stock decrement and the order insert run in a single transaction. The
decrement is a conditional update (``WHERE quantity >= :requested``), so two
concurrent placements can never take the same unit: the loser's update
matches no row, the transaction is rolled back and the caller gets
``InsufficientStock``. The product's status is derived in the same statement,
keeping ``status == 'sold'`` iff ``quantity == 0``.
"""
import time

import structlog
from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from services.product_service.models import Product, ProductStatus
from shared.config.database import Database
from shared.errors import InsufficientStock, InvalidRequest, MarketplaceError, NotFound
from shared.observability.metrics import (
    marketplace_order_placement_duration_seconds,
    marketplace_orders_placed_total,
)

from .models import Order, OrderStatus

logger = structlog.get_logger(__name__)


class OrderPlacementService:

    def __init__(self, database: Database):
        self.database = database

    async def place_order(self, buyer_id: int, product_id: int, quantity: int = 1) -> Order:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidRequest("quantity must be a positive integer")

        log = logger.bind(buyer_id=buyer_id, product_id=product_id, quantity=quantity)
        started = time.perf_counter()
        try:
            async with self.database.session() as db:
                async with db.begin():
                    order = await self._place(db, buyer_id, product_id, quantity)
        except MarketplaceError as e:
            marketplace_orders_placed_total.labels(status=e.code).inc()
            log.info("order_rejected", reason=e.code, detail=e.detail)
            raise
        except Exception:
            marketplace_orders_placed_total.labels(status="failed").inc()
            log.exception("order_placement_failed")
            raise
        finally:
            marketplace_order_placement_duration_seconds.observe(time.perf_counter() - started)

        marketplace_orders_placed_total.labels(status=order.status).inc()
        log.info("order_placed", order_id=order.id, seller_id=order.seller_id, price=order.price)
        return order

    @staticmethod
    async def _place(db: AsyncSession, buyer_id: int, product_id: int, quantity: int) -> Order:
        # 1. Take the stock, only if enough is left
        reserve = (
            update(Product)
            .where(Product.id == product_id, Product.quantity >= quantity)
            .values(
                quantity=Product.quantity - quantity,
                status=case(
                    (Product.quantity == quantity, ProductStatus.SOLD.value),
                    else_=ProductStatus.AVAILABLE.value,
                ),
            )
            .returning(Product.price, Product.seller_id)
            .execution_options(synchronize_session=False)
        )
        reserved = (await db.execute(reserve)).first()

        if reserved is None:
            exists = await db.scalar(select(Product.id).where(Product.id == product_id))
            if exists is None:
                raise NotFound(f"Product {product_id} not found")
            raise InsufficientStock(f"Insufficient stock for product {product_id}")

        # 2. Record the order with the price as it was at this moment
        order = Order(
            buyer_id=buyer_id,
            seller_id=reserved.seller_id,
            product_id=product_id,
            quantity=quantity,
            price=reserved.price * quantity,
            status=OrderStatus.COMPLETED.value,
        )
        db.add(order)
        await db.flush()
        await db.refresh(order)
        return order
