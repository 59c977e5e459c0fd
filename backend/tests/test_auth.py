"""Tests for session resolution, /me and /stores."""
import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient, ASGITransport

from app.core.deps import load_principal
from app.core.security import create_access_token
from app.db.session import get_session
from app.main import app
from app.models.store import Store
from app.models.user import User, UserStore

TENANT = uuid.UUID("0b9b3b8e-2f4c-4d0f-9a51-000000000001")
STORE_A = uuid.UUID("5a1c0000-0000-4000-8000-00000000000a")
STORE_B = uuid.UUID("5a1c0000-0000-4000-8000-00000000000b")


# ─── Fixtures ─────────────────────────────────────────────────────────────────

class FakeUser:
    """Minimal user stub returned by DB mock."""

    id = uuid.UUID("f96955d0-752f-4e0c-b1dc-d26d8dd1460e")
    tenant_id = TENANT
    email = "billing@aksha.demo"
    name = "Billing Desk"
    role = "BILLING"
    is_active = True
    must_change_password = False
    assigned_store_ids = [STORE_A]


class FakeOwner(FakeUser):
    email = "owner@aksha.demo"
    name = "Chain Owner"
    role = "SHOP_OWNER"
    assigned_store_ids = []


class FakeAdmin(FakeUser):
    email = "admin@aksha.demo"
    name = "Chain Admin"
    role = "ADMIN"
    assigned_store_ids = [STORE_A, STORE_B]


class FakeDoctor(FakeUser):
    email = "doctor@aksha.demo"
    name = "Dr. Rao"
    role = "DOCTOR"


def _scalar(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _rows(records):
    result = MagicMock()
    result.all.return_value = records
    return result


def _store(store_id, name, city="Hyderabad"):
    return SimpleNamespace(id=store_id, name=name, city=city, is_active=True)


def _token(user=FakeUser) -> str:
    return create_access_token(str(user.id), user.role, str(TENANT))


async def _request(path, results, headers=None, cookies=None):
    mock_session = AsyncMock()
    mock_session.execute = AsyncMock(side_effect=results)

    async def override_get_session():
        yield mock_session

    app.dependency_overrides[get_session] = override_get_session
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test", cookies=cookies
        ) as client:
            return await client.get(path, headers=headers)
    finally:
        app.dependency_overrides.clear()


# ─── Session Tests ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_me_with_bearer_token():
    """GET /api/v1/me resolves the user from the bearer token."""
    response = await _request(
        "/api/v1/me",
        [
            _scalar(FakeUser()),
            _rows([_store(STORE_A, "Jubilee Hills")]),
            _scalar("Aksha Demo Chain"),
        ],
        headers={"Authorization": f"Bearer {_token()}"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "billing@aksha.demo"
    assert data["role"] == "BILLING"
    assert data["mustChangePassword"] is False
    assert data["tenant"] == {"name": "Aksha Demo Chain"}
    assert data["stores"] == [
        {"id": str(STORE_A), "name": "Jubilee Hills", "city": "Hyderabad", "isActive": True}
    ]


@pytest.mark.asyncio
async def test_me_with_session_cookie():
    """The session cookie is accepted in place of the Authorization header."""
    response = await _request(
        "/api/v1/me",
        [
            _scalar(FakeOwner()),
            _rows([_store(STORE_A, "Jubilee Hills"), _store(STORE_B, "Kukatpally", None)]),
            _scalar(None),
        ],
        cookies={"aksha_uid": _token(FakeOwner)},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "SHOP_OWNER"
    assert data["tenant"] is None
    assert [s["name"] for s in data["stores"]] == ["Jubilee Hills", "Kukatpally"]


@pytest.mark.asyncio
async def test_me_without_credentials_returns_401():
    response = await _request("/api/v1/me", [])

    assert response.status_code == 401
    assert response.json()["detail"] == "Not logged in"
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_invalid_token_returns_401():
    response = await _request(
        "/api/v1/me", [], headers={"Authorization": "Bearer not.a.jwt"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Could not validate credentials"


@pytest.mark.asyncio
async def test_unknown_user_returns_401():
    response = await _request(
        "/api/v1/me", [_scalar(None)], headers={"Authorization": f"Bearer {_token()}"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "User not found"


@pytest.mark.asyncio
async def test_disabled_user_returns_403():
    user = FakeUser()
    user.is_active = False

    response = await _request(
        "/api/v1/me", [_scalar(user)], headers={"Authorization": f"Bearer {_token()}"}
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Account disabled"


# ─── Store Listing ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_stores_listing_for_owner():
    response = await _request(
        "/api/v1/stores",
        [
            _scalar(FakeOwner()),
            _rows([_store(STORE_A, "Jubilee Hills"), _store(STORE_B, "Kukatpally")]),
        ],
        headers={"Authorization": f"Bearer {_token(FakeOwner)}"},
    )

    assert response.status_code == 200
    assert [s["id"] for s in response.json()["stores"]] == [str(STORE_A), str(STORE_B)]


@pytest.mark.asyncio
async def test_stores_listing_forbidden_for_billing():
    response = await _request(
        "/api/v1/stores",
        [_scalar(FakeUser())],
        headers={"Authorization": f"Bearer {_token()}"},
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_stores_listing_for_admin():
    response = await _request(
        "/api/v1/stores",
        [
            _scalar(FakeAdmin()),
            _rows([_store(STORE_A, "Jubilee Hills"), _store(STORE_B, "Kukatpally")]),
        ],
        headers={"Authorization": f"Bearer {_token(FakeAdmin)}"},
    )

    assert response.status_code == 200
    assert len(response.json()["stores"]) == 2


@pytest.mark.asyncio
async def test_stores_listing_forbidden_for_doctor():
    response = await _request(
        "/api/v1/stores",
        [_scalar(FakeDoctor())],
        headers={"Authorization": f"Bearer {_token(FakeDoctor)}"},
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Role 'DOCTOR' is not permitted for this action."


# ─── Principal Loading ────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_load_principal_ignores_assignments_outside_tenant():
    """A user_stores link to another tenant's store never reaches scope resolution."""
    own = Store(id=STORE_A, tenant_id=TENANT, name="Jubilee Hills")
    foreign = Store(id=STORE_B, tenant_id=uuid.uuid4(), name="Elsewhere")
    user = User(
        id=FakeUser.id,
        tenant_id=TENANT,
        email="billing@aksha.demo",
        name="Billing Desk",
        role="BILLING",
        is_active=True,
        must_change_password=False,
    )
    user.store_links = [
        UserStore(store_id=STORE_B, store=foreign),
        UserStore(store_id=STORE_A, store=own),
    ]
    db = AsyncMock()
    db.execute = AsyncMock(return_value=_scalar(user))

    principal = await load_principal(db, user.id)

    assert principal.tenant_id == TENANT
    assert principal.assigned_store_ids == (STORE_A,)
