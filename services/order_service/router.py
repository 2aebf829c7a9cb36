from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.user_service.dependencies import CurrentUser, get_current_user
from shared.config.database import get_db
from shared.security import limiter, order_rate_limit

from .placement import OrderPlacementService
from .schemas import OrderCreate, OrderResponse
from .service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])


def get_placement_service(request: Request) -> OrderPlacementService:
    return request.app.state.order_placement


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(order_rate_limit)
async def create_order(
    request: Request,
    order: OrderCreate,
    caller: CurrentUser = Depends(get_current_user),
    placement: OrderPlacementService = Depends(get_placement_service),
):
    return await placement.place_order(caller.id, order.product_id, order.quantity)


@router.get("/purchases", response_model=list[OrderResponse])
async def list_purchases(
    caller: CurrentUser = Depends(get_current_user),
    db: Optional[AsyncSession] = Depends(get_db),
):
    return await OrderService.list_purchases(db, caller)


@router.get("/sales", response_model=list[OrderResponse])
async def list_sales(
    caller: CurrentUser = Depends(get_current_user),
    db: Optional[AsyncSession] = Depends(get_db),
):
    return await OrderService.list_sales(db, caller)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    caller: CurrentUser = Depends(get_current_user),
    db: Optional[AsyncSession] = Depends(get_db),
):
    return await OrderService.get_order(db, caller, order_id)
