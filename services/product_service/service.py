from typing import List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from services.user_service.dependencies import CurrentUser
from shared.errors import Forbidden, InvalidRequest, NotFound
from shared.observability.metrics import marketplace_products_listed_total

from .models import Product, derive_status
from .repository import ProductRepository
from .schemas import ProductCreate, ProductUpdate

logger = structlog.get_logger(__name__)


class ProductService:

    @staticmethod
    async def create_product(db: Optional[AsyncSession], seller: CurrentUser, data: ProductCreate) -> Product:
        product = Product(
            seller_id=seller.id,
            name=data.name,
            description=data.description,
            category=data.category,
            image_url=data.image_url,
            price=data.price,
            quantity=data.quantity,
            status=derive_status(data.quantity).value,
        )
        product = await ProductRepository.create_product(db, product)
        marketplace_products_listed_total.inc()
        logger.info("product_created", product_id=product.id, seller_id=seller.id, quantity=product.quantity)
        return product

    @staticmethod
    async def list_products(db: Optional[AsyncSession], limit: int = 50, offset: int = 0) -> List[Product]:
        return await ProductRepository.list_available_products(db, limit=limit, offset=offset)

    @staticmethod
    async def list_seller_products(db: Optional[AsyncSession], seller: CurrentUser) -> List[Product]:
        return await ProductRepository.list_products_by_seller(db, seller.id)

    @staticmethod
    async def get_product_by_id(db: Optional[AsyncSession], product_id: int) -> Optional[Product]:
        return await ProductRepository.get_product_by_id(db, product_id)

    @staticmethod
    async def update_product(
        db: Optional[AsyncSession], caller: CurrentUser, product_id: int, data: ProductUpdate
    ) -> Product:
        changes = data.model_dump(exclude_unset=True)
        requested_status = changes.pop("status", None)
        for field in ("name", "price", "quantity"):
            if field in changes and changes[field] is None:
                raise InvalidRequest(f"{field} cannot be null")

        product = await ProductRepository.update_product(
            db, product_id, caller.id, changes, requested_status=requested_status
        )
        if product is None:
            existing = await ProductRepository.get_product_by_id(db, product_id)
            if existing is None:
                raise NotFound(f"Product {product_id} not found")
            if existing.seller_id != caller.id:
                raise Forbidden("Only the seller can update this product")
            raise InvalidRequest("A product with stock left cannot be marked sold")

        logger.info("product_updated", product_id=product.id, fields=sorted(changes), status=product.status)
        return product
