from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from market.database import get_db
from market.dependencies import CurrentUser, CursorParams, OptionalUser, PaginationParams
from market.models import Article
from market.schemas import (
    ArticleCreate,
    ArticleDetail,
    ArticleResponse,
    ArticleUpdate,
    CommentCreate,
    CommentPage,
    CommentResponse,
    LikeState,
    PaginatedResponse,
)
from market.services import article_service, comment_service, likes

router = APIRouter(prefix="/articles", tags=["articles"])


@router.get("", response_model=PaginatedResponse)
async def list_articles(
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.get_articles(
        db, pagination.page, pagination.page_size, pagination.order_by, pagination.keyword
    )


@router.post("", status_code=201, response_model=ArticleResponse)
async def create_article(data: ArticleCreate, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await article_service.create_article(db, data, user)


@router.get("/{article_id}", response_model=ArticleDetail)
async def get_article(article_id: int, user: OptionalUser, db: AsyncSession = Depends(get_db)):
    return await article_service.get_article(db, article_id, user)


@router.patch("/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: int, data: ArticleUpdate, user: CurrentUser, db: AsyncSession = Depends(get_db)
):
    return await article_service.update_article(db, article_id, data, user)


@router.delete("/{article_id}", status_code=204)
async def delete_article(article_id: int, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    await article_service.delete_article(db, article_id, user)


@router.post("/{article_id}/comments", status_code=201, response_model=CommentResponse)
async def add_comment(
    article_id: int, data: CommentCreate, user: CurrentUser, db: AsyncSession = Depends(get_db)
):
    return await comment_service.add_comment(db, Article, article_id, data, user)


@router.get("/{article_id}/comments", response_model=CommentPage)
async def list_comments(
    article_id: int,
    params: CursorParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.list_comments(db, Article, article_id, params.cursor, params.limit)


@router.post("/{article_id}/like", response_model=LikeState)
async def toggle_like(article_id: int, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    state = await likes.toggle_like(db, Article, article_id, user)
    return JSONResponse(status_code=201 if state["is_liked"] else 200, content=state)
