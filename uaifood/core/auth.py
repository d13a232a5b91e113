"""
Request Authentication Dependencies

get_current_user verifies the bearer token; require_admin runs after it and
checks the role. Chain them with Depends so the role check can never run
without a verified identity.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, Request

from uaifood.core.config import Settings
from uaifood.core.errors import Forbidden, Unauthenticated
from uaifood.core.security import CurrentUser, TokenService

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> CurrentUser:
    """Resolve the caller from an `Authorization: Bearer <token>` header."""
    if not authorization:
        raise Unauthenticated("Authentication token not provided.")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise Unauthenticated("Malformed authentication token.")

    user = tokens.verify(parts[1])
    request.state.user = user
    return user


async def require_admin(
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    if not user.is_admin:
        logger.info(f"User #{user.id} denied access to an admin route")
        raise Forbidden("Access denied. Administrator privileges required.")
    return user
