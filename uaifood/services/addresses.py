"""
Address Book Service

Addresses are shared rows linked to users through user_addresses. Every
per-address operation goes through the ownership guard, which reports
"absent" and "not yours" identically.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from uaifood.core.errors import NotFound
from uaifood.core.security import CurrentUser
from uaifood.models import Address, User, user_addresses
from uaifood.schemas import AddressCreate, AddressUpdate
from uaifood.services.ownership import ADDRESS_OWNERSHIP, assert_owned

logger = logging.getLogger(__name__)


async def create_address(db: AsyncSession, data: AddressCreate, user: CurrentUser) -> Address:
    """Insert the address and link it to the caller in one transaction."""
    owner = await db.get(User, user.id)
    if owner is None:
        raise NotFound("User not found.", user_id=user.id)

    address = Address(**data.model_dump())
    address.users = [owner]
    db.add(address)
    await db.commit()

    logger.info(f"Address #{address.id} created for user #{user.id}")
    return address


async def list_addresses(db: AsyncSession, user: CurrentUser) -> list[Address]:
    if await db.get(User, user.id) is None:
        raise NotFound("User not found.", user_id=user.id)

    result = await db.scalars(
        select(Address)
        .where(ADDRESS_OWNERSHIP.owner_filter(user.id))
        .order_by(Address.created_at.desc(), Address.id.desc())
    )
    return list(result)


async def get_address(db: AsyncSession, address_id: int, user: CurrentUser) -> Address:
    return await assert_owned(db, ADDRESS_OWNERSHIP, address_id, user)


async def update_address(
    db: AsyncSession,
    address_id: int,
    user: CurrentUser,
    data: AddressUpdate,
) -> Address:
    address = await assert_owned(db, ADDRESS_OWNERSHIP, address_id, user)
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(address, field, value)
    await db.commit()
    return address


async def delete_address(db: AsyncSession, address_id: int, user: CurrentUser) -> None:
    """
    Unlink the address from the caller.

    The row itself stays: other users (and past orders) may still use it.
    """
    await assert_owned(db, ADDRESS_OWNERSHIP, address_id, user)
    await db.execute(
        delete(user_addresses).where(
            user_addresses.c.user_id == user.id,
            user_addresses.c.address_id == address_id,
        )
    )
    await db.commit()
    logger.info(f"Address #{address_id} unlinked from user #{user.id}")
