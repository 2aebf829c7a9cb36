import enum

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from shared.config.database import Base


class ProductStatus(str, enum.Enum):
    AVAILABLE = "available"
    PENDING = "pending"
    SOLD = "sold"


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("status IN ('available', 'pending', 'sold')", name="ck_products_status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    seller_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    image_url = Column(Text, nullable=True)
    price = Column(Integer, nullable=False)  # smallest currency unit
    quantity = Column(Integer, nullable=False, default=1)
    status = Column(String(16), nullable=False, default=ProductStatus.AVAILABLE.value, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


def derive_status(quantity: int) -> ProductStatus:
    """Status of a newly listed product: ``sold`` iff nothing is in stock.

    Later edits derive the status in SQL, see ``ProductRepository.update_product``.
    """
    if quantity == 0:
        return ProductStatus.SOLD
    return ProductStatus.AVAILABLE
