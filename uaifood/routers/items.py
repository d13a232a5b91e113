"""
Menu Item Routes
Reads are public; writes require an administrator.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from uaifood.core.auth import require_admin
from uaifood.core.security import CurrentUser
from uaifood.database import get_db
from uaifood.schemas import (
    ErrorResponse,
    ItemCreate,
    ItemListEntry,
    ItemResponse,
    ItemUpdate,
)
from uaifood.services import catalog

router = APIRouter(prefix="/items", tags=["Items"])


@router.get("", response_model=list[ItemListEntry])
async def list_items(db: AsyncSession = Depends(get_db)):
    return await catalog.list_items(db)


@router.get(
    "/{item_id}",
    response_model=ItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(item_id: int, db: AsyncSession = Depends(get_db)):
    return await catalog.get_item(db, item_id)


@router.post(
    "",
    response_model=ItemResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
)
async def create_item(
    data: ItemCreate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.create_item(db, data)


@router.put(
    "/{item_id}",
    response_model=ItemResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_item(
    item_id: int,
    data: ItemUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.update_item(db, item_id, data)


@router.delete(
    "/{item_id}",
    status_code=204,
    response_class=Response,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_item(
    item_id: int,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await catalog.delete_item(db, item_id)
    return Response(status_code=204)
