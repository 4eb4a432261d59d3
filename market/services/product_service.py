"""
Product service — business logic for the Product aggregate.

Mirrors the article service: cached anonymous list pages, uncached detail
views with per-viewer like state, owner-gated update and delete.
"""
import math

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from market.cache import cache
from market.config import settings
from market.errors import NotFound
from market.models import Product, User
from market.schemas import PaginatedResponse, ProductCreate, ProductUpdate
from market.services import likes, ownership


def product_to_dict(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "tags": list(product.tags or []),
        "images": list(product.images or []),
        "user_id": product.user_id,
        "created_at": product.created_at.isoformat() if product.created_at else None,
        "updated_at": product.updated_at.isoformat() if product.updated_at else None,
    }


async def get_products(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 10,
    order_by: str = "recent",
    keyword: str | None = None,
) -> PaginatedResponse:
    """Return one offset page of products; *keyword* matches name or description."""
    cache_key = f"products:list:{page}:{page_size}:{order_by}:{keyword or ''}"
    cached = await cache.get(cache_key)
    if cached:
        return PaginatedResponse(**cached)

    where = []
    if keyword:
        where.append(
            or_(
                Product.name.icontains(keyword, autoescape=True),
                Product.description.icontains(keyword, autoescape=True),
            )
        )

    total: int = (
        await db.execute(select(func.count()).select_from(Product).where(*where))
    ).scalar_one()

    if order_by == "oldest":
        order = (Product.created_at.asc(), Product.id.asc())
    else:
        order = (Product.created_at.desc(), Product.id.desc())

    products_q = (
        select(Product)
        .where(*where)
        .order_by(*order)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    products = (await db.execute(products_q)).scalars().all()

    response = PaginatedResponse(
        items=[product_to_dict(p) for p in products],
        total=total,
        page=page,
        page_size=page_size,
        pages=math.ceil(total / page_size) if total > 0 else 0,
    )
    await cache.set(cache_key, response.model_dump(), ttl=settings.CACHE_TTL_LIST)
    return response


async def get_product(db: AsyncSession, product_id: int, viewer: User | None = None) -> dict:
    product = await db.get(Product, product_id)
    if product is None:
        raise NotFound("product", product_id)

    like_count, is_liked = await likes.like_summary(db, Product, product_id, viewer)
    data = product_to_dict(product)
    data["like_count"] = like_count
    data["is_liked"] = is_liked
    return data


async def create_product(db: AsyncSession, data: ProductCreate, owner: User) -> dict:
    product = Product(
        name=data.name,
        description=data.description,
        price=data.price,
        tags=data.tags,
        images=data.images,
        user_id=owner.id,
    )
    db.add(product)
    await db.flush()
    await db.refresh(product)

    await cache.invalidate_products()
    return product_to_dict(product)


async def update_product(
    db: AsyncSession, product_id: int, data: ProductUpdate, user: User
) -> dict:
    update_data = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None
    }
    product = await ownership.update_owned(db, Product, product_id, user, update_data)
    await cache.invalidate_products()
    return product_to_dict(product)


async def delete_product(db: AsyncSession, product_id: int, user: User) -> None:
    await ownership.delete_owned(db, Product, product_id, user)
    await cache.invalidate_products()
