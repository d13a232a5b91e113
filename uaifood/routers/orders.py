"""
Order Routes

Any authenticated user can place and read orders (clients only see their
own); setting an order's status is admin-only.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from uaifood.core.auth import get_app_settings, get_current_user, require_admin
from uaifood.core.config import Settings
from uaifood.core.security import CurrentUser
from uaifood.database import get_db
from uaifood.schemas import ErrorResponse, OrderCreate, OrderResponse, OrderStatusUpdate
from uaifood.services import orders as order_service
from uaifood.services.ledger import queue_order_event

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
    responses={401: {"model": ErrorResponse}},
)


@router.post(
    "",
    response_model=OrderResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Place an order",
)
async def create_order(
    data: OrderCreate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Create an order for the authenticated user.

    Prices come from the menu at the moment of ordering; the delivery address
    must be one of the caller's own addresses.
    """
    logger.info(f"Creating order for user #{user.id}")
    order = await order_service.create_order(db, data, user)
    await queue_order_event(settings, order, "created")
    return order


@router.get("", response_model=list[OrderResponse], summary="List orders")
async def list_orders(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await order_service.list_orders(db, user)


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Get an order by id",
)
async def get_order(
    order_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await order_service.get_order(db, order_id, user)


@router.patch(
    "/{order_id}/status",
    response_model=OrderResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="(Admin) Set the order status",
)
async def update_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    order = await order_service.update_order_status(db, order_id, data.status)
    await queue_order_event(settings, order, "status_changed")
    return order
