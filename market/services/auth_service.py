"""
Auth service — registration, login and token refresh.

Login and refresh both produce a fresh ``TokenPair``; placing the pair in
the session cookies is the router's job.  Refresh tokens are not rotated or
revoked: any unexpired refresh token keeps minting new pairs.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from market.errors import InvalidRefreshToken, Unauthenticated, ValidationError
from market.models import User
from market.passwords import password_hasher
from market.schemas import LoginRequest, RegisterRequest
from market.services.user_service import nickname_taken, user_to_dict
from market.tokens import TokenError, TokenKind, TokenPair, token_service

logger = logging.getLogger(__name__)


async def register(db: AsyncSession, data: RegisterRequest) -> dict:
    """
    Create a user with a bcrypt-hashed password.

    Duplicate email or nickname is a ``ValidationError``; a duplicate that
    slips past the counts under concurrency is caught at the unique
    constraint and reported the same way.
    """
    email_count = (
        await db.execute(select(func.count()).select_from(User).where(User.email == data.email))
    ).scalar_one()
    if email_count > 0:
        raise ValidationError("email already in use")
    if await nickname_taken(db, data.nickname):
        raise ValidationError("nickname already in use")

    user = User(
        email=data.email,
        nickname=data.nickname,
        password=await password_hasher.hash_async(data.password),
    )
    try:
        async with db.begin_nested():
            db.add(user)
    except IntegrityError as exc:
        raise ValidationError("email or nickname already in use") from exc

    await db.refresh(user)
    logger.info("Registered user %d", user.id)
    return user_to_dict(user)


async def login(db: AsyncSession, data: LoginRequest) -> tuple[dict, TokenPair]:
    """Check credentials and issue a new token pair for the user."""
    user = (
        await db.execute(select(User).where(User.email == data.email))
    ).scalar_one_or_none()
    # Same message for unknown email and wrong password.
    if user is None or not await password_hasher.verify_async(data.password, user.password):
        logger.info("Failed login attempt")
        raise ValidationError("invalid email or password")

    logger.info("User %d logged in", user.id)
    return user_to_dict(user), token_service.issue_pair(user.id)


def refresh(refresh_token: str | None) -> TokenPair:
    """Mint a new pair for the subject of a valid refresh token."""
    if not refresh_token:
        raise Unauthenticated("Refresh token missing")
    try:
        user_id = token_service.verify(refresh_token, TokenKind.REFRESH)
    except TokenError as exc:
        logger.info("Rejected refresh token: %s", exc)
        raise InvalidRefreshToken() from exc

    logger.info("Refreshed session for user %d", user_id)
    return token_service.issue_pair(user_id)
