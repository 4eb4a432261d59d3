"""
Like toggling for articles and products.

A like is a row keyed by the unique pair (user, resource): presence means
"liked".  Toggling is a read followed by a delete or an insert.  The unique
constraint on the pair is what actually guards the invariant; an insert that
loses a race against a concurrent toggle hits that constraint, and the
outcome is reported as liked instead of surfacing the integrity error.
"""
import logging
from dataclasses import dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from market.errors import NotFound
from market.models import Article, ArticleLike, Product, ProductLike, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LikeTarget:
    kind: str
    model: type
    like_model: type
    like_column: object


LIKE_TARGETS: dict[type, LikeTarget] = {
    Article: LikeTarget("article", Article, ArticleLike, ArticleLike.article_id),
    Product: LikeTarget("product", Product, ProductLike, ProductLike.product_id),
}


async def _find_like(db: AsyncSession, target: LikeTarget, resource_id: int, user_id: int):
    q = select(target.like_model).where(
        target.like_model.user_id == user_id,
        target.like_column == resource_id,
    )
    return (await db.execute(q)).scalar_one_or_none()


async def create_like(db: AsyncSession, target: LikeTarget, resource_id: int, user_id: int) -> None:
    """Insert the like row; a duplicate created concurrently counts as success."""
    like = target.like_model(user_id=user_id, **{target.like_column.key: resource_id})
    try:
        async with db.begin_nested():
            db.add(like)
    except IntegrityError:
        logger.info(
            "Concurrent like on %s %d by user %d already recorded",
            target.kind, resource_id, user_id,
        )


async def toggle_like(
    db: AsyncSession, model: type[Article] | type[Product], resource_id: int, user: User
) -> dict:
    """
    Flip the (user, resource) like and return ``{"is_liked": <new state>}``.

    Two sequential calls return ``True`` then ``False``; a third returns
    ``True`` again.
    """
    target = LIKE_TARGETS[model]
    if await db.get(target.model, resource_id) is None:
        raise NotFound(target.kind, resource_id)

    existing = await _find_like(db, target, resource_id, user.id)
    if existing is not None:
        await db.execute(
            delete(target.like_model)
            .where(
                target.like_model.user_id == user.id,
                target.like_column == resource_id,
            )
            .execution_options(synchronize_session="evaluate")
        )
        return {"is_liked": False}

    await create_like(db, target, resource_id, user.id)
    return {"is_liked": True}


async def like_summary(
    db: AsyncSession, model: type[Article] | type[Product], resource_id: int, user: User | None
) -> tuple[int, bool]:
    """Return ``(like_count, is_liked)`` for a detail view; anonymous callers never like."""
    target = LIKE_TARGETS[model]
    count_q = (
        select(func.count())
        .select_from(target.like_model)
        .where(target.like_column == resource_id)
    )
    like_count: int = (await db.execute(count_q)).scalar_one()
    if user is None or like_count == 0:
        return like_count, False
    return like_count, await _find_like(db, target, resource_id, user.id) is not None
