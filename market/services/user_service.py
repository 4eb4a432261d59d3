"""
User service — self-service profile operations for the logged-in user.

The password hash never leaves this layer: every public function returns
``user_to_dict`` output, which omits it.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from market.errors import ValidationError
from market.models import Product, ProductLike, User
from market.passwords import password_hasher
from market.schemas import PasswordUpdate, UserUpdate
from market.services.product_service import product_to_dict

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def user_to_dict(user: User) -> dict:
    """Serialise a User ORM instance without its password hash."""
    return {
        "id": user.id,
        "email": user.email,
        "nickname": user.nickname,
        "image": user.image,
        "created_at": user.created_at.isoformat() if user.created_at else None,
        "updated_at": user.updated_at.isoformat() if user.updated_at else None,
    }


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def nickname_taken(db: AsyncSession, nickname: str, exclude_user_id: int | None = None) -> bool:
    q = select(func.count()).select_from(User).where(User.nickname == nickname)
    if exclude_user_id is not None:
        q = q.where(User.id != exclude_user_id)
    return (await db.execute(q)).scalar_one() > 0


async def update_profile(db: AsyncSession, user: User, data: UserUpdate) -> dict:
    """Change nickname and/or image; a nickname held by someone else is rejected."""
    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("nickname") is None:
        update_data.pop("nickname", None)

    if "nickname" in update_data and await nickname_taken(db, update_data["nickname"], user.id):
        raise ValidationError("nickname already in use")

    for field, value in update_data.items():
        setattr(user, field, value)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise ValidationError("nickname already in use") from exc
    await db.refresh(user)
    return user_to_dict(user)


async def change_password(db: AsyncSession, user: User, data: PasswordUpdate) -> None:
    if not await password_hasher.verify_async(data.current_password, user.password):
        raise ValidationError("current password does not match")
    user.password = await password_hasher.hash_async(data.new_password)
    await db.flush()
    logger.info("User %d changed password", user.id)


async def get_owned_products(db: AsyncSession, user: User) -> list[dict]:
    """Products registered by *user*, newest first."""
    q = (
        select(Product)
        .where(Product.user_id == user.id)
        .order_by(Product.created_at.desc(), Product.id.desc())
    )
    return [product_to_dict(p) for p in (await db.execute(q)).scalars().all()]


async def get_liked_products(db: AsyncSession, user: User) -> list[dict]:
    """Products *user* has liked, most recently liked first."""
    q = (
        select(Product)
        .join(ProductLike, ProductLike.product_id == Product.id)
        .where(ProductLike.user_id == user.id)
        .order_by(ProductLike.created_at.desc(), ProductLike.id.desc())
    )
    return [product_to_dict(p) for p in (await db.execute(q)).scalars().all()]
