from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from shared.formatting import format_price

from .models import ProductStatus


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    price: int = Field(gt=0, description="Unit price in the smallest currency unit")
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    image_url: Optional[str] = None
    quantity: int = Field(default=1, ge=0)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    price: Optional[int] = Field(default=None, gt=0)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    image_url: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    status: Optional[ProductStatus] = None


class ProductResponse(BaseModel):
    id: int
    seller_id: int
    name: str
    description: Optional[str]
    category: Optional[str]
    image_url: Optional[str]
    price: int
    quantity: int
    status: ProductStatus
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def price_display(self) -> str:
        return format_price(self.price)

    class Config:
        from_attributes = True
