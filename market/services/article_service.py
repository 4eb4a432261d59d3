"""
Article service — business logic for the Article aggregate.

Design notes
------------
- List pages are identical for every caller, so they go through the
  cache-aside layer; keys encode page, size, order and keyword.  Detail
  views carry the caller's ``is_liked`` and are never cached.
- Update and delete run through the ownership gate's conditional writes.
- Service functions flush but do not commit; the transaction boundary is
  owned by the ``get_db`` dependency in the router layer.
"""
import math

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from market.cache import cache
from market.config import settings
from market.errors import NotFound
from market.models import Article, User
from market.schemas import ArticleCreate, ArticleUpdate, PaginatedResponse
from market.services import likes, ownership


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def article_to_dict(article: Article) -> dict:
    return {
        "id": article.id,
        "title": article.title,
        "content": article.content,
        "image": article.image,
        "user_id": article.user_id,
        "created_at": article.created_at.isoformat() if article.created_at else None,
        "updated_at": article.updated_at.isoformat() if article.updated_at else None,
    }


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_articles(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 10,
    order_by: str = "recent",
    keyword: str | None = None,
) -> PaginatedResponse:
    """
    Return one offset page of articles, optionally filtered by a title
    keyword, using Redis as a cache layer.
    """
    cache_key = f"articles:list:{page}:{page_size}:{order_by}:{keyword or ''}"
    cached = await cache.get(cache_key)
    if cached:
        return PaginatedResponse(**cached)

    where = [Article.title.icontains(keyword, autoescape=True)] if keyword else []

    count_q = select(func.count()).select_from(Article).where(*where)
    total: int = (await db.execute(count_q)).scalar_one()

    if order_by == "oldest":
        order = (Article.created_at.asc(), Article.id.asc())
    else:
        order = (Article.created_at.desc(), Article.id.desc())

    articles_q = (
        select(Article)
        .where(*where)
        .order_by(*order)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    articles = (await db.execute(articles_q)).scalars().all()

    response = PaginatedResponse(
        items=[article_to_dict(a) for a in articles],
        total=total,
        page=page,
        page_size=page_size,
        pages=math.ceil(total / page_size) if total > 0 else 0,
    )
    await cache.set(cache_key, response.model_dump(), ttl=settings.CACHE_TTL_LIST)
    return response


async def get_article(db: AsyncSession, article_id: int, viewer: User | None = None) -> dict:
    """Return the article with its like count and whether *viewer* liked it."""
    article = await db.get(Article, article_id)
    if article is None:
        raise NotFound("article", article_id)

    like_count, is_liked = await likes.like_summary(db, Article, article_id, viewer)
    data = article_to_dict(article)
    data["like_count"] = like_count
    data["is_liked"] = is_liked
    return data


async def create_article(db: AsyncSession, data: ArticleCreate, owner: User) -> dict:
    article = Article(
        title=data.title,
        content=data.content,
        image=data.image,
        user_id=owner.id,
    )
    db.add(article)
    await db.flush()
    await db.refresh(article)

    await cache.invalidate_articles()
    return article_to_dict(article)


async def update_article(
    db: AsyncSession, article_id: int, data: ArticleUpdate, user: User
) -> dict:
    """
    Partially update an article owned by *user*.

    Only fields explicitly set in the request payload are modified
    (``model_dump(exclude_unset=True)``); explicit nulls for required
    columns are ignored.
    """
    update_data = data.model_dump(exclude_unset=True)
    for required in ("title", "content"):
        if update_data.get(required, "") is None:
            update_data.pop(required)

    article = await ownership.update_owned(db, Article, article_id, user, update_data)
    await cache.invalidate_articles()
    return article_to_dict(article)


async def delete_article(db: AsyncSession, article_id: int, user: User) -> None:
    await ownership.delete_owned(db, Article, article_id, user)
    await cache.invalidate_articles()
