"""Tests for store scope resolution."""
import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.errors import Forbidden, NotFound, Unauthenticated
from app.models.user import Role, can_manage_stores, can_view_insights, has_chain_wide_scope
from app.services.scope import ALL_STORES, Principal, resolve_request_scope, resolve_scope

TENANT = uuid.UUID("0b9b3b8e-2f4c-4d0f-9a51-000000000001")
STORE_A = uuid.UUID("5a1c0000-0000-4000-8000-00000000000a")
STORE_B = uuid.UUID("5a1c0000-0000-4000-8000-00000000000b")
STORE_C = uuid.UUID("5a1c0000-0000-4000-8000-00000000000c")
TENANT_STORES = [STORE_A, STORE_B, STORE_C]


def _principal(role: str, stores=()) -> Principal:
    return Principal(
        id=uuid.uuid4(),
        tenant_id=TENANT,
        role=role,
        assigned_store_ids=tuple(stores),
    )


# ─── Roles ────────────────────────────────────────────────────────────────────

def test_role_parse_is_case_insensitive():
    assert Role.parse(" shop_owner ") is Role.SHOP_OWNER
    assert Role.parse("RECEPTIONIST") is None
    assert Role.parse(None) is None


def test_only_shop_owner_has_chain_wide_scope():
    assert has_chain_wide_scope("SHOP_OWNER")
    assert not has_chain_wide_scope(Role.ADMIN)
    assert not has_chain_wide_scope("BILLING")


def test_insights_roles():
    assert can_view_insights("ADMIN")
    assert can_view_insights("billing")
    assert can_view_insights(Role.SHOP_OWNER)
    assert not can_view_insights("DOCTOR")
    assert not can_view_insights("")


def test_store_managers():
    assert can_manage_stores("ADMIN")
    assert can_manage_stores("SHOP_OWNER")
    assert not can_manage_stores("BILLING")


# ─── Non-owner roles ──────────────────────────────────────────────────────────

def test_non_owner_defaults_to_first_assigned_store():
    scope = resolve_scope(_principal("BILLING", [STORE_B, STORE_A]), None)

    assert scope.store_ids == (STORE_B,)
    assert scope.all_stores is False
    assert scope.tenant_id == TENANT


def test_non_owner_may_pick_an_assigned_store():
    scope = resolve_scope(_principal("ADMIN", [STORE_A, STORE_B]), str(STORE_B))

    assert scope.store_ids == (STORE_B,)


def test_non_owner_requesting_unassigned_store_is_forbidden():
    with pytest.raises(Forbidden):
        resolve_scope(_principal("BILLING", [STORE_A]), str(STORE_B))


def test_non_owner_requesting_garbage_store_id_is_forbidden():
    with pytest.raises(Forbidden):
        resolve_scope(_principal("BILLING", [STORE_A]), "not-a-uuid")


def test_non_owner_requesting_all_falls_back_to_own_store():
    scope = resolve_scope(_principal("ADMIN", [STORE_A, STORE_B]), ALL_STORES, TENANT_STORES)

    assert scope.store_ids == (STORE_A,)
    assert scope.all_stores is False


def test_non_owner_without_assignments_is_forbidden():
    with pytest.raises(Forbidden):
        resolve_scope(_principal("BILLING"), None)


# ─── Chain-wide role ──────────────────────────────────────────────────────────

def test_owner_all_covers_every_tenant_store():
    scope = resolve_scope(_principal("SHOP_OWNER"), "all", TENANT_STORES)

    assert scope.store_ids == tuple(TENANT_STORES)
    assert scope.all_stores is True


def test_owner_may_pick_any_tenant_store_without_assignment():
    scope = resolve_scope(_principal("SHOP_OWNER"), str(STORE_C), TENANT_STORES)

    assert scope.store_ids == (STORE_C,)


def test_owner_requesting_foreign_store_is_not_found():
    with pytest.raises(NotFound):
        resolve_scope(_principal("SHOP_OWNER"), str(uuid.uuid4()), TENANT_STORES)


def test_owner_default_prefers_assigned_store():
    scope = resolve_scope(_principal("SHOP_OWNER", [STORE_B]), None, TENANT_STORES)

    assert scope.store_ids == (STORE_B,)


def test_owner_default_without_assignment_is_first_tenant_store():
    scope = resolve_scope(_principal("SHOP_OWNER"), "", TENANT_STORES)

    assert scope.store_ids == (STORE_A,)


def test_owner_of_empty_tenant_is_forbidden():
    with pytest.raises(Forbidden):
        resolve_scope(_principal("SHOP_OWNER"), ALL_STORES, [])


def test_missing_principal_is_unauthenticated():
    with pytest.raises(Unauthenticated):
        resolve_scope(None, ALL_STORES, TENANT_STORES)


# ─── Async wrapper ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_request_scope_loads_tenant_stores_for_owner():
    result = MagicMock()
    result.all.return_value = [
        SimpleNamespace(id=s, name=n, city="Hyderabad", is_active=True)
        for s, n in zip(TENANT_STORES, ["Ameerpet", "Banjara Hills", "Charminar"])
    ]
    db = AsyncMock()
    db.execute = AsyncMock(return_value=result)

    scope = await resolve_request_scope(db, _principal("SHOP_OWNER"), "all")

    assert scope.store_ids == tuple(TENANT_STORES)
    assert [s.name for s in scope.stores] == ["Ameerpet", "Banjara Hills", "Charminar"]
    db.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_request_scope_for_non_owner_does_not_query():
    db = AsyncMock()

    scope = await resolve_request_scope(db, _principal("BILLING", [STORE_A]), None)

    assert scope.store_ids == (STORE_A,)
    db.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_request_scope_for_owner_single_store_keeps_only_that_store():
    result = MagicMock()
    result.all.return_value = [
        SimpleNamespace(id=s, name=n, city=None, is_active=True)
        for s, n in zip(TENANT_STORES, ["Ameerpet", "Banjara Hills", "Charminar"])
    ]
    db = AsyncMock()
    db.execute = AsyncMock(return_value=result)

    scope = await resolve_request_scope(db, _principal("SHOP_OWNER"), str(STORE_B))

    assert scope.store_ids == (STORE_B,)
    assert [s.id for s in scope.stores] == [STORE_B]
