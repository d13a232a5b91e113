"""
Category Routes
Reads are public; writes require an administrator.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from uaifood.core.auth import require_admin
from uaifood.core.security import CurrentUser
from uaifood.database import get_db
from uaifood.schemas import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ErrorResponse,
)
from uaifood.services import catalog

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await catalog.list_categories(db)


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_category(category_id: int, db: AsyncSession = Depends(get_db)):
    return await catalog.get_category(db, category_id)


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=201,
    responses={409: {"model": ErrorResponse}},
)
async def create_category(
    data: CategoryCreate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.create_category(db, data)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await catalog.update_category(db, category_id, data)


@router.delete(
    "/{category_id}",
    status_code=204,
    response_class=Response,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_category(
    category_id: int,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await catalog.delete_category(db, category_id)
    return Response(status_code=204)
