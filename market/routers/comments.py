from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from market.database import get_db
from market.dependencies import CurrentUser
from market.schemas import CommentResponse, CommentUpdate
from market.services import comment_service

router = APIRouter(prefix="/comments", tags=["comments"])


@router.patch("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int, data: CommentUpdate, user: CurrentUser, db: AsyncSession = Depends(get_db)
):
    return await comment_service.update_comment(db, comment_id, data, user)


@router.delete("/{comment_id}", status_code=204)
async def delete_comment(comment_id: int, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    await comment_service.delete_comment(db, comment_id, user)
