"""Pytest fixtures: a throwaway SQLite database and an API client bound to it."""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from services.app import create_app
from services.order_service.placement import OrderPlacementService
from services.product_service.models import Product, ProductStatus
from services.user_service.models import User, UserRole
from shared.config.database import Database
from shared.config.settings import Settings
from shared.security import create_access_token

TEST_SECRET = "test-secret-key"
OWNER_OPEN_ID = "owner-open-id"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'marketplace.db'}",
        admin_open_ids=[OWNER_OPEN_ID],
        jwt_secret_key=TEST_SECRET,
        tracing_enabled=False,
        metrics_enabled=False,
        rate_limit_enabled=False,
    )


@pytest_asyncio.fixture
async def database(settings):
    database = Database(settings.database_url)
    await database.create_all()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def client(settings, database):
    app = create_app(settings, database=database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def placement(database) -> OrderPlacementService:
    return OrderPlacementService(database)


def auth_headers(open_id: str, **claims) -> dict:
    token = create_access_token({"sub": open_id, **claims}, TEST_SECRET)
    return {"Authorization": f"Bearer {token}"}


async def add_user(database: Database, open_id: str, role: UserRole = UserRole.USER) -> User:
    async with database.session() as db:
        user = User(open_id=open_id, name=open_id.title(), role=role.value)
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user


async def add_product(database: Database, seller: User, price: int = 500, quantity: int = 3, **fields) -> Product:
    status = ProductStatus.SOLD if quantity == 0 else ProductStatus.AVAILABLE
    async with database.session() as db:
        product = Product(
            seller_id=seller.id,
            name=fields.pop("name", "Vintage lamp"),
            price=price,
            quantity=quantity,
            status=fields.pop("status", status.value),
            **fields,
        )
        db.add(product)
        await db.commit()
        await db.refresh(product)
        return product


async def reload_product(database: Database, product_id: int) -> Product:
    async with database.session() as db:
        return await db.get(Product, product_id)


@pytest_asyncio.fixture
async def seller(database) -> User:
    return await add_user(database, "seller-open-id")


@pytest_asyncio.fixture
async def buyer(database) -> User:
    return await add_user(database, "buyer-open-id")
