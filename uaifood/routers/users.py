"""
User Routes

Public registration and login, self-service under /users/me and the
admin-only management endpoints.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from uaifood.core.auth import (
    get_app_settings,
    get_current_user,
    get_token_service,
    require_admin,
)
from uaifood.core.config import Settings
from uaifood.core.security import CurrentUser, TokenService
from uaifood.database import get_db
from uaifood.schemas import (
    AdminUserUpdate,
    ErrorResponse,
    LoginResponse,
    PasswordChange,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)
from uaifood.services import users as user_service

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={400: {"model": ErrorResponse}},
)


# =============================================================================
# PUBLIC
# =============================================================================

@router.post(
    "",
    response_model=UserResponse,
    status_code=201,
    responses={409: {"model": ErrorResponse}},
    summary="Register a new client account",
)
async def register(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    return await user_service.create_user(db, data, settings)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Exchange credentials for an access token",
)
async def login(
    data: UserLogin,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> LoginResponse:
    token = await user_service.authenticate(db, data, tokens)
    return LoginResponse(message="Login successful!", token=token)


# =============================================================================
# SELF-SERVICE
# =============================================================================

@router.get("/me", response_model=UserResponse, summary="Current user's profile")
async def read_me(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.get_user(db, user.id)


@router.put("/me", response_model=UserResponse, summary="Update name and/or phone")
async def update_me(
    data: UserUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.update_profile(db, user.id, data)


@router.put(
    "/me/password",
    status_code=204,
    response_class=Response,
    responses={401: {"model": ErrorResponse}},
    summary="Change password (old password required)",
)
async def change_my_password(
    data: PasswordChange,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    await user_service.change_password(db, user.id, data, settings)
    return Response(status_code=204)


@router.delete(
    "/me",
    status_code=204,
    response_class=Response,
    responses={409: {"model": ErrorResponse}},
    summary="Delete own account",
)
async def delete_me(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await user_service.delete_user(db, user.id)
    return Response(status_code=204)


# =============================================================================
# ADMIN
# =============================================================================

@router.get("", response_model=list[UserResponse], summary="(Admin) List users")
async def list_users(
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.list_users(db)


@router.get("/{user_id}", response_model=UserResponse, summary="(Admin) Get user by id")
async def get_user(
    user_id: int,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.get_user(db, user_id)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="(Admin) Update name, phone or role",
)
async def update_user(
    user_id: int,
    data: AdminUserUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.admin_update_user(db, user_id, admin, data)


@router.delete(
    "/{user_id}",
    status_code=204,
    response_class=Response,
    responses={403: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="(Admin) Delete a user",
)
async def delete_user(
    user_id: int,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await user_service.admin_delete_user(db, user_id, admin)
    return Response(status_code=204)
