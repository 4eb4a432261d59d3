"""
Comment service — comments under an article or a product.

Comments are created by any logged-in user, listed newest first through the
cursor pagination engine, and edited or deleted only by their author.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from market.errors import NotFound
from market.models import Article, Comment, Product, User
from market.schemas import CommentCreate, CommentUpdate
from market.services import ownership
from market.services.pagination import paginate_comments


def comment_to_dict(comment: Comment) -> dict:
    return {
        "id": comment.id,
        "content": comment.content,
        "user_id": comment.user_id,
        "article_id": comment.article_id,
        "product_id": comment.product_id,
        "created_at": comment.created_at.isoformat() if comment.created_at else None,
        "updated_at": comment.updated_at.isoformat() if comment.updated_at else None,
    }


async def add_comment(
    db: AsyncSession,
    parent: type[Article] | type[Product],
    parent_id: int,
    data: CommentCreate,
    author: User,
) -> dict:
    """Append a comment by *author* to the article or product *parent_id*."""
    if await db.get(parent, parent_id) is None:
        raise NotFound(ownership.RESOURCE_KINDS[parent], parent_id)

    comment = Comment(content=data.content, user_id=author.id)
    if parent is Article:
        comment.article_id = parent_id
    else:
        comment.product_id = parent_id
    db.add(comment)
    await db.flush()
    await db.refresh(comment)
    return comment_to_dict(comment)


async def list_comments(
    db: AsyncSession,
    parent: type[Article] | type[Product],
    parent_id: int,
    cursor: int | None,
    limit: int,
) -> dict:
    page = await paginate_comments(db, parent, parent_id, cursor, limit)
    return {
        "items": [comment_to_dict(c) for c in page.items],
        "next_cursor": page.next_cursor,
    }


async def update_comment(db: AsyncSession, comment_id: int, data: CommentUpdate, user: User) -> dict:
    comment = await ownership.update_owned(
        db, Comment, comment_id, user, {"content": data.content}
    )
    return comment_to_dict(comment)


async def delete_comment(db: AsyncSession, comment_id: int, user: User) -> None:
    await ownership.delete_owned(db, Comment, comment_id, user)
