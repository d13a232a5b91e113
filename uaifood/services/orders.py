"""
Order Workflow

Order placement validates the requested items, copies their current prices
into the order lines, checks that the delivery address belongs to the client
and writes the order with all of its lines in a single transaction.

Author: UaiFood Team
Version: 1.0.0
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from uaifood.core.errors import NotFound, ValidationFailed
from uaifood.core.security import CurrentUser
from uaifood.models import ORDER_INITIAL_STATUS, Item, Order, OrderItem
from uaifood.schemas import OrderCreate
from uaifood.services.ownership import ADDRESS_OWNERSHIP, ORDER_OWNERSHIP, assert_owned

logger = logging.getLogger(__name__)

# Everything OrderResponse serializes
ORDER_GRAPH = (
    selectinload(Order.order_items).selectinload(OrderItem.item),
    selectinload(Order.address),
    selectinload(Order.client),
)


async def load_order(db: AsyncSession, order_id: int) -> Order:
    order = await db.scalar(
        select(Order)
        .options(*ORDER_GRAPH)
        .where(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    if order is None:
        raise NotFound("Order not found.", order_id=order_id)
    return order


async def create_order(db: AsyncSession, data: OrderCreate, user: CurrentUser) -> Order:
    """
    Place an order for the calling user.

    Steps:
        1. Resolve all requested items in one query
        2. Copy each item's current unit price into its order line
        3. Check the address belongs to the caller
        4. Insert the order (status PENDING) and its lines, then commit

    Raises:
        ValidationFailed: one or more item ids do not exist
        NotFound: the address is absent or not linked to the caller
    """
    requested = {line.item_id: line.quantity for line in data.items}

    result = await db.scalars(select(Item).where(Item.id.in_(list(requested))))
    items_by_id = {item.id: item for item in result}

    if len(items_by_id) != len(requested):
        missing = sorted(set(requested) - set(items_by_id))
        raise ValidationFailed("One or more items were not found.", missing_item_ids=missing)

    lines = [
        OrderItem(
            item_id=item_id,
            quantity=quantity,
            unit_price=items_by_id[item_id].unit_price,
        )
        for item_id, quantity in requested.items()
    ]

    try:
        await assert_owned(db, ADDRESS_OWNERSHIP, data.address_id, user)

        order = Order(
            payment_method=data.payment_method,
            status=ORDER_INITIAL_STATUS,
            client_id=user.id,
            created_by_id=user.id,
            address_id=data.address_id,
        )
        db.add(order)
        await db.flush()

        for line in lines:
            line.order_id = order.id
        db.add_all(lines)

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        f"Order #{order.id} created for user #{user.id} "
        f"({len(lines)} lines, {data.payment_method.value})"
    )
    return await load_order(db, order.id)


async def list_orders(db: AsyncSession, user: CurrentUser) -> list[Order]:
    """Admins see every order; clients only their own. Newest first."""
    stmt = select(Order).options(*ORDER_GRAPH)
    if not user.is_admin:
        stmt = stmt.where(ORDER_OWNERSHIP.owner_filter(user.id))
    stmt = stmt.order_by(Order.created_at.desc(), Order.id.desc())

    result = await db.scalars(stmt)
    return list(result)


async def get_order(db: AsyncSession, order_id: int, user: CurrentUser) -> Order:
    return await assert_owned(db, ORDER_OWNERSHIP, order_id, user, options=ORDER_GRAPH)


async def update_order_status(db: AsyncSession, order_id: int, status: str) -> Order:
    """
    Overwrite the order status (admin only, checked by the route).

    Any value is accepted; there is no fixed lifecycle between statuses.
    """
    order = await db.get(Order, order_id)
    if order is None:
        raise NotFound("Order not found.", order_id=order_id)

    previous = order.status
    order.status = status
    await db.commit()
    logger.info(f"Order #{order_id} status {previous} -> {status}")
    return await load_order(db, order_id)
