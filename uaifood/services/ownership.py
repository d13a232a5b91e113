"""
Resource Ownership Guard

One lookup-and-compare routine shared by every user-scoped resource. Each
resource type describes who owns a row and how a foreign row is reported:

    - hide_foreign=True: "absent" and "not yours" are the same NotFound, so
      callers cannot probe for rows owned by others (addresses).
    - hide_foreign=False: the row's existence is disclosed and a foreign
      caller gets Forbidden (orders).
"""

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from uaifood.core.errors import Forbidden, NotFound
from uaifood.core.security import CurrentUser
from uaifood.models import Address, Order, User


@dataclass(frozen=True)
class OwnershipRule:
    model: Any
    owner_filter: Callable[[int], ColumnElement]
    not_found_message: str
    forbidden_message: str = ""
    hide_foreign: bool = True
    admin_bypass: bool = False


ADDRESS_OWNERSHIP = OwnershipRule(
    model=Address,
    owner_filter=lambda user_id: Address.users.any(User.id == user_id),
    not_found_message="Address not found or does not belong to this user.",
    hide_foreign=True,
)

ORDER_OWNERSHIP = OwnershipRule(
    model=Order,
    owner_filter=lambda user_id: Order.client_id == user_id,
    not_found_message="Order not found.",
    forbidden_message="Unauthorized access to this order.",
    hide_foreign=False,
    admin_bypass=True,
)


async def assert_owned(
    db: AsyncSession,
    rule: OwnershipRule,
    resource_id: int,
    user: CurrentUser,
    options: Sequence[Any] = (),
):
    """
    Load a resource and make sure `user` may act on it.

    Returns:
        The ORM object, with `options` applied and fresh from the database

    Raises:
        NotFound: the row is absent (or foreign, when the rule hides it)
        Forbidden: the row exists but belongs to someone else
    """
    model = rule.model
    bypass = rule.admin_bypass and user.is_admin
    context = {"resource": model.__tablename__, "resource_id": resource_id, "user_id": user.id}

    stmt = select(model).where(model.id == resource_id)
    if rule.hide_foreign and not bypass:
        stmt = stmt.where(rule.owner_filter(user.id))
    stmt = stmt.options(*options).execution_options(populate_existing=True)

    resource = await db.scalar(stmt)
    if resource is None:
        raise NotFound(rule.not_found_message, **context)

    if not rule.hide_foreign and not bypass:
        owned = await db.scalar(
            select(func.count())
            .select_from(model)
            .where(model.id == resource_id, rule.owner_filter(user.id))
        )
        if not owned:
            raise Forbidden(rule.forbidden_message, **context)

    return resource
