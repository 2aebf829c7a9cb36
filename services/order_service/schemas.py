from datetime import datetime

from pydantic import BaseModel, Field, computed_field

from shared.formatting import format_price

from .models import OrderStatus


class OrderCreate(BaseModel):
    product_id: int
    quantity: int = Field(default=1, gt=0)


class OrderResponse(BaseModel):
    id: int
    buyer_id: int
    seller_id: int
    product_id: int
    quantity: int
    price: int
    status: OrderStatus
    created_at: datetime

    @computed_field
    @property
    def price_display(self) -> str:
        return format_price(self.price)

    class Config:
        from_attributes = True
