"""
Password Hashing and Access Tokens

Passwords are stored as salted bcrypt hashes and compared with bcrypt's own
checkpw. Access tokens are HS256 JWTs signed with the configured secret and
valid for a fixed eight hours.

Author: UaiFood Team
Version: 1.0.0
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
import jwt

from uaifood.core.config import Settings
from uaifood.core.errors import ConfigurationError, Unauthenticated, ValidationFailed
from uaifood.models import UserRole

logger = logging.getLogger(__name__)

ACCESS_TOKEN_LIFETIME = timedelta(hours=8)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


# =============================================================================
# PASSWORDS
# =============================================================================

def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a plaintext password with a fresh salt."""
    raw = password.encode("utf-8")
    if len(raw) > BCRYPT_MAX_BYTES:
        raise ValidationFailed("Password must be at most 72 bytes long.")
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Compare a plaintext password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Over-long input or a malformed stored hash never matches
        return False


async def hash_password_async(password: str, rounds: int = 10) -> str:
    """Run hash_password in a worker thread so the event loop stays free."""
    return await asyncio.to_thread(hash_password, password, rounds)


async def verify_password_async(password: str, password_hash: str) -> bool:
    return await asyncio.to_thread(verify_password, password, password_hash)


# =============================================================================
# ACCESS TOKENS
# =============================================================================

@dataclass(frozen=True)
class CurrentUser:
    """Verified identity attached to the request."""
    id: int
    name: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class TokenService:
    """
    Issues and verifies signed access tokens.

    The secret is read from the injected Settings once, at construction time.

    Example:
        >>> tokens = TokenService(settings)
        >>> token = tokens.issue(user_id=1, name="Ana", role=UserRole.CLIENT)
        >>> tokens.verify(token).id
        1
    """

    def __init__(self, settings: Settings):
        if not settings.jwt_secret:
            raise ConfigurationError(["JWT_SECRET"])
        self._secret = settings.jwt_secret
        self._algorithm = settings.jwt_algorithm

    def issue(
        self,
        user_id: int,
        name: str,
        role: UserRole,
        now: Optional[datetime] = None,
    ) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "name": name,
            "role": role.value,
            "iat": issued_at,
            "exp": issued_at + ACCESS_TOKEN_LIFETIME,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> CurrentUser:
        """
        Decode a token and return the identity it carries.

        Raises:
            Unauthenticated: bad signature, expired, or unexpected claims
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise Unauthenticated("Invalid or expired token.")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected token: {e}")
            raise Unauthenticated("Invalid or expired token.")

        try:
            role = UserRole(payload.get("role"))
        except ValueError:
            raise Unauthenticated("Invalid user role in token.")

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError):
            raise Unauthenticated("Invalid or expired token.")

        return CurrentUser(id=user_id, name=str(payload.get("name", "")), role=role)
