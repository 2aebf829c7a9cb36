from typing import List, Optional

from sqlalchemy import Integer, case, literal, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import degrades_to, requires_storage

from .models import Product, ProductStatus


class ProductRepository:

    @staticmethod
    @requires_storage
    async def create_product(db: AsyncSession, product: Product) -> Product:
        db.add(product)
        await db.commit()
        await db.refresh(product)
        return product

    @staticmethod
    @degrades_to(list)
    async def list_available_products(db: AsyncSession, limit: int = 50, offset: int = 0) -> List[Product]:
        result = await db.execute(
            select(Product)
            .where(Product.status == ProductStatus.AVAILABLE.value)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return result.scalars().all()

    @staticmethod
    @degrades_to(list)
    async def list_products_by_seller(db: AsyncSession, seller_id: int) -> List[Product]:
        result = await db.execute(
            select(Product)
            .where(Product.seller_id == seller_id)
            .order_by(Product.created_at.desc(), Product.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    @degrades_to(lambda: None)
    async def get_product_by_id(db: AsyncSession, product_id: int) -> Optional[Product]:
        result = await db.execute(select(Product).where(Product.id == product_id))
        return result.scalars().first()

    @staticmethod
    @requires_storage
    async def update_product(
        db: AsyncSession,
        product_id: int,
        seller_id: int,
        changes: dict,
        requested_status: Optional[ProductStatus] = None,
    ) -> Optional[Product]:
        """Apply a seller's edit as one conditional UPDATE.

        The status is computed by the database from the quantity the row holds
        at write time, so an order placed in between cannot leave a sold-out
        product marked anything but ``sold``. Returns None when no row matched:
        missing product, another seller's product, or ``sold`` requested while
        stock is left.
        """
        quantity = literal(changes["quantity"], Integer) if "quantity" in changes else Product.quantity
        if requested_status is not None and ProductStatus(requested_status) != ProductStatus.SOLD:
            otherwise = literal(ProductStatus(requested_status).value)
        else:
            otherwise = case(
                (Product.status == ProductStatus.SOLD.value, ProductStatus.AVAILABLE.value),
                else_=Product.status,
            )

        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.seller_id == seller_id)
            .values(**changes, status=case((quantity == 0, ProductStatus.SOLD.value), else_=otherwise))
            .returning(Product)
            .execution_options(synchronize_session=False, populate_existing=True)
        )
        if requested_status is not None and ProductStatus(requested_status) == ProductStatus.SOLD:
            stmt = stmt.where(quantity == 0)

        product = (await db.execute(stmt)).scalars().first()
        if product is None:
            await db.rollback()
            return None
        await db.commit()
        return product
