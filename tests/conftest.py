"""
Shared fixtures: an application wired to a throwaway SQLite database and an
httpx client talking to it in-process.
"""

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update

from uaifood.core.config import Settings
from uaifood.database import init_db
from uaifood.main import create_app
from uaifood.models import Category, Item, User, UserRole

TEST_SECRET = "test-secret-with-enough-bytes-for-hs256"
DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret=TEST_SECRET,
        password_hash_rounds=4,
        ledger_export_enabled=False,
        data_directory=str(tmp_path / "data"),
    )


@pytest.fixture
async def app(settings):
    application = create_app(settings)
    # ASGITransport does not run the lifespan
    await init_db(application.state.engine)
    yield application
    await application.state.engine.dispose()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def session_maker(app):
    return app.state.session_maker


# =============================================================================
# HELPERS
# =============================================================================

def auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def user_payload(email: str, name: str = "Maria Silva", **overrides) -> dict:
    payload = {
        "name": name,
        "email": email,
        "password": DEFAULT_PASSWORD,
        "phone": "34999998888",
        "accepts_terms": True,
    }
    payload.update(overrides)
    return payload


def address_payload(**overrides) -> dict:
    payload = {
        "street": "Av. Rondon Pacheco",
        "number": "1200",
        "district": "Centro",
        "city": "Uberlandia",
        "state": "MG",
        "zip_code": "38400000",
    }
    payload.update(overrides)
    return payload


async def register(client: AsyncClient, email: str, name: str = "Maria Silva") -> dict:
    response = await client.post("/api/users", json=user_payload(email, name=name))
    assert response.status_code == 201, response.text
    return response.json()


async def login(client: AsyncClient, email: str, password: str = DEFAULT_PASSWORD) -> str:
    response = await client.post("/api/users/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


async def promote(session_maker, user_id: int) -> None:
    async with session_maker() as session:
        await session.execute(update(User).where(User.id == user_id).values(role=UserRole.ADMIN))
        await session.commit()


@pytest.fixture
async def client_token(client) -> str:
    await register(client, "client@example.com", name="Client One")
    return await login(client, "client@example.com")


@pytest.fixture
async def other_client_token(client) -> str:
    await register(client, "other@example.com", name="Client Two")
    return await login(client, "other@example.com")


@pytest.fixture
async def admin_token(client, session_maker) -> str:
    user = await register(client, "admin@example.com", name="Admin User")
    await promote(session_maker, user["id"])
    # Role is baked into the token, so log in after the promotion
    return await login(client, "admin@example.com")


@pytest.fixture
async def menu(session_maker) -> dict[str, int]:
    """One category with two items, written straight to the database."""
    async with session_maker() as session:
        category = Category(description="Pizzas")
        session.add(category)
        await session.flush()
        margherita = Item(
            description="Pizza Margherita",
            unit_price=Decimal("39.90"),
            category_id=category.id,
        )
        calabresa = Item(
            description="Pizza Calabresa",
            unit_price=Decimal("42.50"),
            category_id=category.id,
        )
        session.add_all([margherita, calabresa])
        await session.commit()
        return {
            "category_id": category.id,
            "margherita_id": margherita.id,
            "calabresa_id": calabresa.id,
        }
