"""
Account Manager

Registration, login, self-service profile management and the admin variants
of get/update/delete.
"""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from uaifood.core.config import Settings
from uaifood.core.errors import Conflict, Forbidden, NotFound, Unauthenticated
from uaifood.core.security import (
    CurrentUser,
    TokenService,
    hash_password_async,
    verify_password_async,
)
from uaifood.models import Order, User, UserRole
from uaifood.schemas import (
    AdminUserUpdate,
    PasswordChange,
    UserCreate,
    UserLogin,
    UserUpdate,
)

logger = logging.getLogger(__name__)

EMAIL_IN_USE = "This email is already in use."
INVALID_CREDENTIALS = "Invalid email or password."
USER_NOT_FOUND = "User not found."
USER_HAS_ORDERS = "This user cannot be deleted because it is linked to existing orders."


async def create_user(db: AsyncSession, data: UserCreate, settings: Settings) -> User:
    """Register a new CLIENT account."""
    existing = await db.scalar(select(User).where(User.email == data.email))
    if existing is not None:
        raise Conflict(EMAIL_IN_USE, email=data.email)

    user = User(
        name=data.name,
        email=data.email,
        phone=data.phone,
        password=await hash_password_async(data.password, settings.password_hash_rounds),
        role=UserRole.CLIENT,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration with the same email
        await db.rollback()
        raise Conflict(EMAIL_IN_USE, email=data.email)

    logger.info(f"User #{user.id} registered")
    return user


async def authenticate(db: AsyncSession, data: UserLogin, tokens: TokenService) -> str:
    """Check credentials and return a signed access token."""
    user = await db.scalar(select(User).where(User.email == data.email))
    if user is None:
        raise Unauthenticated(INVALID_CREDENTIALS)

    if not await verify_password_async(data.password, user.password):
        logger.info(f"Failed login for user #{user.id}")
        raise Unauthenticated(INVALID_CREDENTIALS)

    return tokens.issue(user_id=user.id, name=user.name, role=user.role)


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFound(USER_NOT_FOUND, user_id=user_id)
    return user


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.scalars(select(User).order_by(User.created_at, User.id))
    return list(result)


async def update_profile(db: AsyncSession, user_id: int, data: UserUpdate) -> User:
    """
    Partial update: only fields present in the request are written.

    AdminUserUpdate goes through here too and may additionally carry `role`.
    """
    user = await get_user(db, user_id)
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(user, field, value)
    await db.commit()
    return user


async def change_password(
    db: AsyncSession,
    user_id: int,
    data: PasswordChange,
    settings: Settings,
) -> None:
    user = await get_user(db, user_id)
    if not await verify_password_async(data.old_password, user.password):
        raise Unauthenticated("The old password is incorrect.", user_id=user_id)

    user.password = await hash_password_async(data.new_password, settings.password_hash_rounds)
    await db.commit()
    logger.info(f"User #{user_id} changed password")


async def delete_user(db: AsyncSession, user_id: int) -> None:
    """Delete an account unless an order still points at it."""
    user = await get_user(db, user_id)

    order_count = await db.scalar(
        select(func.count(Order.id)).where(
            or_(Order.client_id == user_id, Order.created_by_id == user_id)
        )
    )
    if order_count:
        raise Conflict(USER_HAS_ORDERS, user_id=user_id, orders=order_count)

    await db.delete(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict(USER_HAS_ORDERS, user_id=user_id)

    logger.info(f"User #{user_id} deleted")


# =============================================================================
# ADMIN VARIANTS
# =============================================================================

def _reject_self_management(target_id: int, actor: CurrentUser) -> None:
    if target_id == actor.id:
        raise Forbidden(
            "Administrators must manage their own account through /users/me.",
            user_id=actor.id,
        )


async def admin_update_user(
    db: AsyncSession,
    target_id: int,
    actor: CurrentUser,
    data: AdminUserUpdate,
) -> User:
    _reject_self_management(target_id, actor)
    user = await update_profile(db, target_id, data)
    logger.info(f"Admin #{actor.id} updated user #{target_id}")
    return user


async def admin_delete_user(db: AsyncSession, target_id: int, actor: CurrentUser) -> None:
    _reject_self_management(target_id, actor)
    await delete_user(db, target_id)
