from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from market.database import get_db
from market.dependencies import CurrentUser, CursorParams, OptionalUser, PaginationParams
from market.models import Product
from market.schemas import (
    CommentCreate,
    CommentPage,
    CommentResponse,
    LikeState,
    PaginatedResponse,
    ProductCreate,
    ProductDetail,
    ProductList,
    ProductResponse,
    ProductUpdate,
)
from market.services import comment_service, likes, product_service, user_service

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=PaginatedResponse)
async def list_products(
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await product_service.get_products(
        db, pagination.page, pagination.page_size, pagination.order_by, pagination.keyword
    )


@router.post("", status_code=201, response_model=ProductResponse)
async def create_product(data: ProductCreate, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await product_service.create_product(db, data, user)


# Declared before /{product_id} so "liked" is not parsed as an id.
@router.get("/liked", response_model=ProductList)
async def list_liked_products(user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return {"items": await user_service.get_liked_products(db, user)}


@router.get("/{product_id}", response_model=ProductDetail)
async def get_product(product_id: int, user: OptionalUser, db: AsyncSession = Depends(get_db)):
    return await product_service.get_product(db, product_id, user)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int, data: ProductUpdate, user: CurrentUser, db: AsyncSession = Depends(get_db)
):
    return await product_service.update_product(db, product_id, data, user)


@router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: int, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    await product_service.delete_product(db, product_id, user)


@router.post("/{product_id}/comments", status_code=201, response_model=CommentResponse)
async def add_comment(
    product_id: int, data: CommentCreate, user: CurrentUser, db: AsyncSession = Depends(get_db)
):
    return await comment_service.add_comment(db, Product, product_id, data, user)


@router.get("/{product_id}/comments", response_model=CommentPage)
async def list_comments(
    product_id: int,
    params: CursorParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.list_comments(db, Product, product_id, params.cursor, params.limit)


@router.post("/{product_id}/like", response_model=LikeState)
async def toggle_like(product_id: int, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    state = await likes.toggle_like(db, Product, product_id, user)
    return JSONResponse(status_code=201 if state["is_liked"] else 200, content=state)
