"""Per-caller rate limiting on order creation."""
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from conftest import add_product, auth_headers
from services.app import create_app
from shared.security import limiter


@pytest_asyncio.fixture
async def limited_client(settings, database):
    settings = settings.model_copy(update={"rate_limit_enabled": True, "order_rate_limit": "2/minute"})
    limiter.reset()
    app = create_app(settings, database=database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    limiter.reset()
    limiter.enabled = False


async def test_third_order_from_same_caller_is_limited(limited_client, database, seller):
    product = await add_product(database, seller, quantity=10)
    payload = {"product_id": product.id}

    first = await limited_client.post("/orders", json=payload, headers=auth_headers("eager-buyer"))
    second = await limited_client.post("/orders", json=payload, headers=auth_headers("eager-buyer"))
    third = await limited_client.post("/orders", json=payload, headers=auth_headers("eager-buyer"))
    assert [first.status_code, second.status_code, third.status_code] == [201, 201, 429]

    other = await limited_client.post("/orders", json=payload, headers=auth_headers("patient-buyer"))
    assert other.status_code == 201


async def test_limited_order_takes_no_stock(limited_client, database, seller):
    product = await add_product(database, seller, quantity=10)
    payload = {"product_id": product.id, "quantity": 2}

    for _ in range(3):
        await limited_client.post("/orders", json=payload, headers=auth_headers("eager-buyer"))

    stored = (await limited_client.get(f"/products/{product.id}")).json()
    assert stored["quantity"] == 6
