import logging
from typing import Annotated

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from market.config import settings
from market.database import get_db
from market.errors import Unauthenticated
from market.models import User
from market.tokens import TokenError, TokenKind, token_service

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Session identity
# ---------------------------------------------------------------------------

async def _resolve_identity(request: Request, db: AsyncSession, optional: bool) -> User | None:
    token = request.cookies.get(settings.ACCESS_TOKEN_COOKIE)
    if not token:
        if optional:
            return None
        raise Unauthenticated("Login required")

    try:
        user_id = token_service.verify(token, TokenKind.ACCESS)
    except TokenError as exc:
        logger.info("Rejected access token on %s: %s", request.url.path, exc)
        raise Unauthenticated("Invalid or expired access token") from exc

    user = await db.get(User, user_id)
    if user is None:
        logger.info("Access token subject %d no longer exists", user_id)
        if optional:
            return None
        raise Unauthenticated("User no longer exists")
    return user


async def require_identity(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    """
    Resolve the logged-in user from the access-token cookie or fail with
    ``Unauthenticated``.  This and ``optional_identity`` are the only places
    access tokens are verified.
    """
    return await _resolve_identity(request, db, optional=False)


async def optional_identity(request: Request, db: AsyncSession = Depends(get_db)) -> User | None:
    """
    Like ``require_identity`` but yields ``None`` for anonymous callers or
    a token whose subject was removed.  A presented but invalid or expired
    token is still rejected.
    """
    return await _resolve_identity(request, db, optional=True)


CurrentUser = Annotated[User, Depends(require_identity)]
OptionalUser = Annotated[User | None, Depends(optional_identity)]


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

class PaginationParams:
    """
    Offset pagination and search parameters for article / product lists.

    Attributes
    ----------
    page:
        1-based page number (minimum 1).
    page_size:
        Number of items per page, at most ``settings.MAX_PAGE_SIZE``.
    order_by:
        ``"recent"`` (newest first) or ``"oldest"``.
    keyword:
        Optional case-insensitive substring filter.
    offset:
        Computed SQL OFFSET derived from *page* and *page_size*.
    """

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number (1-based)."),
        page_size: int = Query(
            settings.DEFAULT_PAGE_SIZE,
            ge=1,
            le=settings.MAX_PAGE_SIZE,
            description="Number of items returned per page.",
        ),
        order_by: str = Query(
            "recent",
            pattern="^(recent|oldest)$",
            description="Sort direction: 'recent' or 'oldest'.",
        ),
        keyword: str | None = Query(None, max_length=100, description="Search keyword."),
    ) -> None:
        self.page = page
        self.page_size = page_size
        self.order_by = order_by
        self.keyword = keyword or None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class CursorParams:
    """Keyset pagination parameters for comment listings."""

    def __init__(
        self,
        cursor: int | None = Query(
            None, ge=1, description="Id of the last comment of the previous page."
        ),
        limit: int = Query(
            settings.DEFAULT_COMMENT_LIMIT,
            ge=1,
            le=settings.MAX_COMMENT_LIMIT,
            description="Maximum number of comments to return.",
        ),
    ) -> None:
        self.cursor = cursor
        self.limit = limit
