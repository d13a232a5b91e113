"""
Unit tests for password hashing, the token service and startup configuration.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from uaifood.celery_worker import celery_app
from uaifood.core.config import Settings
from uaifood.core.errors import ConfigurationError, Unauthenticated, ValidationFailed
from uaifood.core.security import (
    ACCESS_TOKEN_LIFETIME,
    TokenService,
    hash_password,
    hash_password_async,
    verify_password,
    verify_password_async,
)
from uaifood.main import create_app
from uaifood.models import UserRole
from tests.conftest import TEST_SECRET


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(Settings(_env_file=None, jwt_secret=TEST_SECRET))


# =============================================================================
# PASSWORDS
# =============================================================================

def test_hash_is_salted_and_verifiable():
    first = hash_password("pizza123", rounds=4)
    second = hash_password("pizza123", rounds=4)

    assert first != second
    assert first.startswith("$2")
    assert verify_password("pizza123", first)
    assert verify_password("pizza123", second)
    assert not verify_password("pizza124", first)


def test_hash_rejects_passwords_over_72_bytes():
    with pytest.raises(ValidationFailed):
        hash_password("x" * 73, rounds=4)


def test_verify_against_malformed_hash_is_false():
    assert verify_password("pizza123", "not-a-bcrypt-hash") is False


async def test_async_wrappers():
    hashed = await hash_password_async("pizza123", rounds=4)

    assert await verify_password_async("pizza123", hashed)
    assert not await verify_password_async("wrong", hashed)


# =============================================================================
# TOKENS
# =============================================================================

def test_issue_and_verify_round_trip(tokens):
    token = tokens.issue(user_id=7, name="Ana", role=UserRole.ADMIN)

    user = tokens.verify(token)

    assert user.id == 7
    assert user.name == "Ana"
    assert user.role == UserRole.ADMIN
    assert user.is_admin


def test_token_lifetime_is_eight_hours(tokens):
    now = datetime(2030, 1, 1, tzinfo=timezone.utc)
    token = tokens.issue(user_id=1, name="Ana", role=UserRole.CLIENT, now=now)

    claims = jwt.decode(token, options={"verify_signature": False})

    assert claims["sub"] == "1"
    assert claims["exp"] - claims["iat"] == int(ACCESS_TOKEN_LIFETIME.total_seconds())


def test_expired_token_rejected(tokens):
    stale = datetime.now(timezone.utc) - ACCESS_TOKEN_LIFETIME - timedelta(minutes=1)
    token = tokens.issue(user_id=1, name="Ana", role=UserRole.CLIENT, now=stale)

    with pytest.raises(Unauthenticated):
        tokens.verify(token)


def test_token_without_required_claims_rejected(tokens):
    token = jwt.encode({"sub": "1", "role": "CLIENT"}, TEST_SECRET, algorithm="HS256")

    with pytest.raises(Unauthenticated):
        tokens.verify(token)


def test_non_numeric_subject_rejected(tokens):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "abc", "role": "CLIENT", "iat": now, "exp": now + timedelta(hours=1)},
        TEST_SECRET,
        algorithm="HS256",
    )

    with pytest.raises(Unauthenticated):
        tokens.verify(token)


# =============================================================================
# CONFIGURATION
# =============================================================================

def test_token_service_requires_secret():
    with pytest.raises(ConfigurationError) as exc_info:
        TokenService(Settings(_env_file=None, jwt_secret=None))

    assert exc_info.value.missing == ["JWT_SECRET"]


def test_app_refuses_to_start_without_secret(tmp_path):
    settings = Settings(
        _env_file=None,
        jwt_secret=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'unused.db'}",
    )

    with pytest.raises(ConfigurationError):
        create_app(settings)


def test_settings_helpers():
    settings = Settings(
        _env_file=None,
        env_mode="PRODUCTION",
        cors_origins="http://a.test, http://b.test,",
    )

    assert settings.is_production
    assert not settings.is_development
    assert settings.cors_origins_list == ["http://a.test", "http://b.test"]


def test_ledger_broker_follows_app_settings(tmp_path):
    settings = Settings(
        _env_file=None,
        jwt_secret=TEST_SECRET,
        redis_url="redis://ledger-broker:6399/3",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'unused.db'}",
    )

    create_app(settings)

    assert celery_app.conf.broker_url == "redis://ledger-broker:6399/3"
    assert celery_app.conf.result_backend == "redis://ledger-broker:6399/3"
