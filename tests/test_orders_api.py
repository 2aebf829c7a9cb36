"""API tests for placing and viewing orders."""
import pytest
import pytest_asyncio

from conftest import auth_headers

SELLER = "seller-open-id"
BUYER = "buyer-open-id"


@pytest_asyncio.fixture
async def listed(client):
    resp = await client.post(
        "/products",
        json={"name": "Record player", "price": 500, "quantity": 3},
        headers=auth_headers(SELLER),
    )
    assert resp.status_code == 201
    return resp.json()


async def _buy(client, product_id, quantity=None, open_id=BUYER):
    payload = {"product_id": product_id}
    if quantity is not None:
        payload["quantity"] = quantity
    return await client.post("/orders", json=payload, headers=auth_headers(open_id))


async def test_place_order(client, listed):
    resp = await _buy(client, listed["id"], 3)
    assert resp.status_code == 201
    order = resp.json()
    assert order["price"] == 1500
    assert order["price_display"] == "$15.00"
    assert order["quantity"] == 3
    assert order["status"] == "completed"
    assert order["product_id"] == listed["id"]
    assert order["seller_id"] == listed["seller_id"]

    product = (await client.get(f"/products/{listed['id']}")).json()
    assert product["quantity"] == 0
    assert product["status"] == "sold"


async def test_quantity_defaults_to_one(client, listed):
    order = (await _buy(client, listed["id"])).json()
    assert order["quantity"] == 1
    assert order["price"] == 500


async def test_insufficient_stock_is_conflict(client, listed):
    resp = await _buy(client, listed["id"], 4)
    assert resp.status_code == 409
    assert resp.json()["code"] == "insufficient_stock"

    product = (await client.get(f"/products/{listed['id']}")).json()
    assert product["quantity"] == 3
    assert (await client.get("/orders/purchases", headers=auth_headers(BUYER))).json() == []


async def test_ordering_missing_product_is_not_found(client):
    resp = await _buy(client, 424242)
    assert resp.status_code == 404
    assert resp.json()["code"] == "not_found"


@pytest.mark.parametrize("quantity", [0, -2, "two"])
async def test_order_quantity_must_be_positive(client, listed, quantity):
    resp = await _buy(client, listed["id"], quantity)
    assert resp.status_code == 422

    product = (await client.get(f"/products/{listed['id']}")).json()
    assert product["quantity"] == 3


async def test_place_order_requires_authentication(client, listed):
    resp = await client.post("/orders", json={"product_id": listed["id"]})
    assert resp.status_code == 401


async def test_purchases_and_sales(client, listed):
    order = (await _buy(client, listed["id"], 2)).json()

    purchases = (await client.get("/orders/purchases", headers=auth_headers(BUYER))).json()
    sales = (await client.get("/orders/sales", headers=auth_headers(SELLER))).json()
    assert [o["id"] for o in purchases] == [order["id"]]
    assert [o["id"] for o in sales] == [order["id"]]

    assert (await client.get("/orders/sales", headers=auth_headers(BUYER))).json() == []
    assert (await client.get("/orders/purchases", headers=auth_headers(SELLER))).json() == []


async def test_order_visible_to_participants_only(client, listed):
    order = (await _buy(client, listed["id"])).json()
    url = f"/orders/{order['id']}"

    assert (await client.get(url, headers=auth_headers(BUYER))).status_code == 200
    assert (await client.get(url, headers=auth_headers(SELLER))).status_code == 200

    resp = await client.get(url, headers=auth_headers("bystander"))
    assert resp.status_code == 403
    assert resp.json()["code"] == "forbidden"


async def test_get_missing_order_is_not_found(client):
    resp = await client.get("/orders/424242", headers=auth_headers(BUYER))
    assert resp.status_code == 404


async def test_later_price_change_does_not_touch_orders(client, listed):
    order = (await _buy(client, listed["id"], 2)).json()

    await client.patch(f"/products/{listed['id']}", json={"price": 800}, headers=auth_headers(SELLER))

    stored = (await client.get(f"/orders/{order['id']}", headers=auth_headers(BUYER))).json()
    assert stored["price"] == 1000
