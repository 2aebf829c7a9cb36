from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.user_service.dependencies import CurrentUser, get_current_user
from shared.config.database import get_db

from .schemas import ProductCreate, ProductResponse, ProductUpdate
from .service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=list[ProductResponse])
async def list_products(
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Optional[AsyncSession] = Depends(get_db),
):
    """Products currently for sale, newest first."""
    return await ProductService.list_products(db, limit=limit, offset=offset)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product: ProductCreate,
    caller: CurrentUser = Depends(get_current_user),
    db: Optional[AsyncSession] = Depends(get_db),
):
    return await ProductService.create_product(db, caller, product)


@router.get("/mine", response_model=list[ProductResponse])
async def list_my_products(
    caller: CurrentUser = Depends(get_current_user),
    db: Optional[AsyncSession] = Depends(get_db),
):
    return await ProductService.list_seller_products(db, caller)


@router.get("/{product_id}", response_model=Optional[ProductResponse])
async def get_product(
    product_id: int,
    db: Optional[AsyncSession] = Depends(get_db),
):
    return await ProductService.get_product_by_id(db, product_id)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    changes: ProductUpdate,
    caller: CurrentUser = Depends(get_current_user),
    db: Optional[AsyncSession] = Depends(get_db),
):
    return await ProductService.update_product(db, caller, product_id, changes)
