from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from market.config import settings
from market.database import get_db
from market.dependencies import CurrentUser
from market.schemas import (
    LoginRequest,
    MessageResponse,
    PasswordUpdate,
    ProductResponse,
    RegisterRequest,
    UserResponse,
    UserUpdate,
)
from market.services import auth_service, user_service
from market.services.user_service import user_to_dict
from market.tokens import TokenPair

router = APIRouter(prefix="/auth", tags=["auth"])


# ---------------------------------------------------------------------------
# Session cookies
# ---------------------------------------------------------------------------

def set_session_cookies(response: Response, tokens: TokenPair) -> None:
    """
    Write both session slots.  The refresh slot is scoped to the refresh
    path so it is not sent with every request.  Clients must treat the two
    cookies as one unit.
    """
    response.set_cookie(
        key=settings.ACCESS_TOKEN_COOKIE,
        value=tokens.access_token,
        max_age=settings.ACCESS_TOKEN_TTL_SECONDS,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
        path="/",
    )
    response.set_cookie(
        key=settings.REFRESH_TOKEN_COOKIE,
        value=tokens.refresh_token,
        max_age=settings.REFRESH_TOKEN_TTL_SECONDS,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
        path=settings.REFRESH_TOKEN_PATH,
    )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(
        key=settings.ACCESS_TOKEN_COOKIE,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )
    # A path-scoped cookie is only removed when the same path is given.
    response.delete_cookie(
        key=settings.REFRESH_TOKEN_COOKIE,
        path=settings.REFRESH_TOKEN_PATH,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------

@router.post("/register", status_code=201, response_model=UserResponse)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    return await auth_service.register(db, data)


@router.post("/login", response_model=UserResponse)
async def login(data: LoginRequest, response: Response, db: AsyncSession = Depends(get_db)):
    user, tokens = await auth_service.login(db, data)
    set_session_cookies(response, tokens)
    return user


@router.post("/refresh", response_model=MessageResponse)
async def refresh(request: Request, response: Response):
    tokens = auth_service.refresh(request.cookies.get(settings.REFRESH_TOKEN_COOKIE))
    set_session_cookies(response, tokens)
    return {"message": "Token refreshed"}


@router.post("/logout", status_code=204)
async def logout(response: Response):
    # TODO: revoke the refresh token server-side once a denylist store exists;
    # until then a copied refresh token stays valid for its full lifetime.
    clear_session_cookies(response)


# ---------------------------------------------------------------------------
# Self-service profile
# ---------------------------------------------------------------------------

@router.get("/me", response_model=UserResponse)
async def get_me(user: CurrentUser):
    return user_to_dict(user)


@router.patch("/me", response_model=UserResponse)
async def update_me(data: UserUpdate, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await user_service.update_profile(db, user, data)


@router.patch("/me/password", response_model=MessageResponse)
async def update_password(data: PasswordUpdate, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    await user_service.change_password(db, user, data)
    return {"message": "Password changed"}


@router.get("/me/products", response_model=list[ProductResponse])
async def get_my_products(user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await user_service.get_owned_products(db, user)
