"""
Address Routes
Every route is scoped to the authenticated caller's own address book.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from uaifood.core.auth import get_current_user
from uaifood.core.security import CurrentUser
from uaifood.database import get_db
from uaifood.schemas import AddressCreate, AddressResponse, AddressUpdate, ErrorResponse
from uaifood.services import addresses as address_service

router = APIRouter(
    prefix="/addresses",
    tags=["Addresses"],
    responses={401: {"model": ErrorResponse}},
)


@router.post("", response_model=AddressResponse, status_code=201)
async def create_address(
    data: AddressCreate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await address_service.create_address(db, data, user)


@router.get("", response_model=list[AddressResponse])
async def list_addresses(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await address_service.list_addresses(db, user)


@router.get(
    "/{address_id}",
    response_model=AddressResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_address(
    address_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await address_service.get_address(db, address_id, user)


@router.put(
    "/{address_id}",
    response_model=AddressResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_address(
    address_id: int,
    data: AddressUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await address_service.update_address(db, address_id, user, data)


@router.delete(
    "/{address_id}",
    status_code=204,
    response_class=Response,
    responses={404: {"model": ErrorResponse}},
)
async def delete_address(
    address_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await address_service.delete_address(db, address_id, user)
    return Response(status_code=204)
