"""
Keyset (cursor) pagination over a parent's comments, newest first.

Order is ``created_at DESC, id DESC``; ids grow with insertion so rows that
share a timestamp still have a total order.  A page starts strictly after
the cursor comment's ``(created_at, id)`` position, which the database
resolves through a scalar subquery, so the cost of a page does not grow with
how far the client has paged.  When the cursor comment has since been
deleted the seek continues from its id alone.
"""
from dataclasses import dataclass

from sqlalchemy import and_, exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from market.errors import NotFound
from market.models import Article, Comment, Product

# Parent model -> foreign key column name on Comment.
_PARENT_COLUMNS = {
    Article: "article_id",
    Product: "product_id",
}

_PARENT_KINDS = {Article: "article", Product: "product"}


@dataclass
class CursorPage:
    items: list[Comment]
    next_cursor: int | None


async def paginate_comments(
    db: AsyncSession,
    parent: type[Article] | type[Product],
    parent_id: int,
    cursor: int | None,
    limit: int,
) -> CursorPage:
    """
    Return up to *limit* comments of ``parent_id`` after *cursor*.

    ``next_cursor`` is the id of the last comment on this page, not of the
    first comment of the next one; passing it back resumes strictly after
    it.  It is ``None`` when no further comment exists.

    A cursor naming a comment of another parent yields an empty page.  A
    cursor whose comment no longer exists resumes with the comments of
    lower id.
    """
    if limit < 1:
        raise ValueError("limit must be positive")

    if await db.get(parent, parent_id) is None:
        raise NotFound(_PARENT_KINDS[parent], parent_id)

    parent_column = _PARENT_COLUMNS[parent]
    q = select(Comment).where(getattr(Comment, parent_column) == parent_id)

    if cursor is not None:
        # Aliased so the subqueries never correlate with the outer scan.
        anchor = aliased(Comment)
        cursor_created_at = (
            select(anchor.created_at)
            .where(anchor.id == cursor, getattr(anchor, parent_column) == parent_id)
            .scalar_subquery()
        )
        cursor_row_exists = exists().where(anchor.id == cursor)
        q = q.where(
            or_(
                Comment.created_at < cursor_created_at,
                and_(Comment.created_at == cursor_created_at, Comment.id < cursor),
                and_(~cursor_row_exists, Comment.id < cursor),
            )
        )

    q = q.order_by(Comment.created_at.desc(), Comment.id.desc()).limit(limit + 1)
    rows = list((await db.execute(q)).scalars().all())

    items = rows[:limit]
    next_cursor = items[-1].id if len(rows) > limit else None
    return CursorPage(items=items, next_cursor=next_cursor)
