"""Tests for user upsert, the role policy and the auth endpoints."""
from datetime import timedelta

from conftest import OWNER_OPEN_ID, TEST_SECRET, auth_headers
from services.user_service.models import UserRole
from services.user_service.policy import RolePolicy
from services.user_service.repository import UserRepository
from shared.security import create_access_token


async def test_upsert_inserts_then_refreshes(database):
    async with database.session() as db:
        created = await UserRepository.upsert(db, "abc", name="Ada", email="ada@example.com", login_method="github")
        assert created.role == UserRole.USER.value

        refreshed = await UserRepository.upsert(db, "abc", name="Ada L.")

    assert refreshed.id == created.id
    assert refreshed.name == "Ada L."
    # Omitted fields are left alone
    assert refreshed.email == "ada@example.com"
    assert refreshed.login_method == "github"


async def test_upsert_keeps_existing_role_when_policy_is_silent(database):
    async with database.session() as db:
        await UserRepository.upsert(db, "boss", role=UserRole.ADMIN)
        again = await UserRepository.upsert(db, "boss", name="Boss", role=None)
    assert again.role == UserRole.ADMIN.value


async def test_get_by_open_id_returns_none_when_absent(database):
    async with database.session() as db:
        assert await UserRepository.get_by_open_id(db, "nobody") is None
        assert await UserRepository.get_by_id(db, 123) is None


def test_role_policy():
    policy = RolePolicy(["owner"])
    assert policy.role_for("owner") == UserRole.ADMIN
    assert policy.role_for("someone") is None


async def test_me_is_null_without_token(client):
    resp = await client.get("/auth/me")
    assert resp.status_code == 200
    assert resp.json() is None


async def test_me_is_null_with_expired_token(client):
    token = create_access_token({"sub": "late"}, TEST_SECRET, expires_delta=timedelta(seconds=-1))
    resp = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.json() is None


async def test_me_creates_user_on_first_sight(client):
    resp = await client.get("/auth/me", headers=auth_headers("new-user", name="Grace", email="g@example.com"))
    body = resp.json()
    assert body["open_id"] == "new-user"
    assert body["name"] == "Grace"
    assert body["role"] == "user"


async def test_login_upserts_and_refreshes(client):
    first = (await client.post("/auth/login", headers=auth_headers("u1", name="Old"))).json()
    second = (await client.post("/auth/login", headers=auth_headers("u1", name="New", login_method="email"))).json()
    assert second["id"] == first["id"]
    assert second["name"] == "New"
    assert second["login_method"] == "email"


async def test_login_requires_token(client):
    resp = await client.post("/auth/login")
    assert resp.status_code == 401


async def test_configured_owner_becomes_admin(client):
    body = (await client.post("/auth/login", headers=auth_headers(OWNER_OPEN_ID))).json()
    assert body["role"] == "admin"


async def test_health(client):
    resp = await client.get("/health")
    assert resp.json() == {"service": "marketplace", "status": "running", "database": "available"}
