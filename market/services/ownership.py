"""
Ownership gate for mutating owned resources (articles, products, comments).

Mutations are issued as conditional writes (``WHERE id = :id AND user_id =
:owner``) so the ownership check and the write are a single statement.  When
no row is affected the resource is re-read only to tell ``NotFound`` apart
from ``Forbidden``.
"""
import logging
from typing import Any, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from market.errors import Forbidden, NotFound
from market.models import Article, Comment, Product, User

logger = logging.getLogger(__name__)

OwnedModel = TypeVar("OwnedModel", Article, Product, Comment)

# Human-readable kind used in NotFound messages.
RESOURCE_KINDS: dict[type, str] = {
    Article: "article",
    Product: "product",
    Comment: "comment",
}


async def _raise_for_missed_write(
    db: AsyncSession, model: type[OwnedModel], resource_id: int, user: User
) -> None:
    owner_id = (
        await db.execute(select(model.user_id).where(model.id == resource_id))
    ).scalar_one_or_none()
    if owner_id is None:
        raise NotFound(RESOURCE_KINDS[model], resource_id)
    logger.info(
        "User %d denied write on %s %d owned by %d",
        user.id, RESOURCE_KINDS[model], resource_id, owner_id,
    )
    raise Forbidden(f"Only the owner can modify this {RESOURCE_KINDS[model]}")


async def load_owned(
    db: AsyncSession, model: type[OwnedModel], resource_id: int, user: User
) -> OwnedModel:
    """
    Return the resource when *user* owns it.

    Raises ``NotFound`` for an unknown id and ``Forbidden`` when someone else
    owns it.  Read-then-compare only; use ``update_owned`` / ``delete_owned``
    for the mutation itself.
    """
    resource = await db.get(model, resource_id)
    if resource is None:
        raise NotFound(RESOURCE_KINDS[model], resource_id)
    if resource.user_id != user.id:
        raise Forbidden(f"Only the owner can modify this {RESOURCE_KINDS[model]}")
    return resource


async def update_owned(
    db: AsyncSession,
    model: type[OwnedModel],
    resource_id: int,
    user: User,
    values: dict[str, Any],
) -> OwnedModel:
    """Apply *values* to the resource if *user* owns it and return the fresh row."""
    values = {k: v for k, v in values.items() if k not in ("id", "user_id")}
    if values:
        stmt = (
            update(model)
            .where(model.id == resource_id, model.user_id == user.id)
            .values(**values)
            .execution_options(synchronize_session="evaluate")
        )
        result = await db.execute(stmt)
        if result.rowcount != 1:
            await _raise_for_missed_write(db, model, resource_id, user)
    else:
        # Empty patch: still enforce the gate.
        await load_owned(db, model, resource_id, user)

    refreshed = await db.execute(
        select(model)
        .where(model.id == resource_id)
        .execution_options(populate_existing=True)
    )
    return refreshed.scalar_one()


async def delete_owned(
    db: AsyncSession, model: type[OwnedModel], resource_id: int, user: User
) -> None:
    """Delete the resource if *user* owns it."""
    stmt = (
        delete(model)
        .where(model.id == resource_id, model.user_id == user.id)
        .execution_options(synchronize_session="evaluate")
    )
    result = await db.execute(stmt)
    if result.rowcount != 1:
        await _raise_for_missed_write(db, model, resource_id, user)
