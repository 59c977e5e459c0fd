"""Seed script: demo chain with two stores, four users and a spread of invoices.

Idempotent: checks for existing records before inserting.
Run: python scripts/seed.py   (from backend/)
"""
import asyncio
import os
import random
import sys
from datetime import datetime, timedelta, timezone

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings
from app.core.security import create_access_token
from app.models.invoice import Invoice
from app.models.store import Store
from app.models.tenant import Tenant
from app.models.user import Role, User, UserStore

NOW = datetime.now(timezone.utc)
TENANT_NAME = "Aksha Demo Chain"
STATUS_WEIGHTS = [("Paid", 6), ("Unpaid", 3), ("Partial", 1)]


# ─── Upsert helpers ───────────────────────────────────────────────────────────

async def _upsert_tenant(db: AsyncSession, name: str) -> Tenant:
    tenant = (await db.execute(select(Tenant).where(Tenant.name == name))).scalars().first()
    if tenant:
        print(f"  [skip] Tenant {name}")
        return tenant
    tenant = Tenant(name=name)
    db.add(tenant)
    await db.flush()
    print(f"  [new]  Tenant {name}")
    return tenant


async def _upsert_store(db: AsyncSession, tenant: Tenant, name: str, city: str) -> Store:
    store = (await db.execute(
        select(Store).where(Store.tenant_id == tenant.id, Store.name == name)
    )).scalars().first()
    if store:
        print(f"  [skip] Store {name}")
        return store
    store = Store(tenant_id=tenant.id, name=name, city=city, is_active=True)
    db.add(store)
    await db.flush()
    print(f"  [new]  Store {name} ({city})")
    return store


async def _upsert_user(
    db: AsyncSession, tenant: Tenant, email: str, name: str, role: Role, stores: list[Store],
) -> User:
    user = (await db.execute(select(User).where(User.email == email))).scalars().first()
    if user:
        print(f"  [skip] User {email}")
        return user
    user = User(tenant_id=tenant.id, email=email, name=name, role=role.value, is_active=True)
    db.add(user)
    await db.flush()
    for store in stores:
        db.add(UserStore(user_id=user.id, store_id=store.id))
    await db.flush()
    print(f"  [new]  User {email} ({role.value})")
    return user


async def _seed_invoices(db: AsyncSession, tenant: Tenant, store: Store, days: int, per_day: int) -> None:
    existing = (await db.execute(
        select(func.count(Invoice.id)).where(Invoice.store_id == store.id)
    )).scalar_one()
    if existing:
        print(f"  [skip] Invoices for {store.name} ({existing} present)")
        return

    rng = random.Random(str(store.id))
    statuses = [s for s, w in STATUS_WEIGHTS for _ in range(w)]
    count = 0
    for day in range(days):
        for _ in range(rng.randint(0, per_day)):
            sub_total = float(rng.randrange(800, 12000, 50))
            discount = float(rng.choice([0, 0, 100, 250]))
            status = rng.choice(statuses)
            db.add(Invoice(
                tenant_id=tenant.id,
                store_id=store.id,
                invoice_no=f"INV-{store.name[:3].upper()}-{day:03d}-{count:04d}",
                totals_json={
                    "items": [],
                    "subTotal": sub_total,
                    "discount": discount,
                    "total": max(0.0, sub_total - discount),
                    "paid": status == "Paid",
                    "paymentMode": rng.choice(["Cash", "UPI", "Card"]),
                },
                payment_status=status,
                created_at=NOW - timedelta(days=day, minutes=rng.randint(0, 600)),
            ))
            count += 1
    await db.flush()
    print(f"  [new]  {count} invoices for {store.name}")


# ─── Main ─────────────────────────────────────────────────────────────────────

async def seed() -> None:
    engine = create_async_engine(settings.DATABASE_URL)
    Session = async_sessionmaker(engine, expire_on_commit=False)

    async with Session() as db:
        print("── Tenant & stores ──")
        tenant = await _upsert_tenant(db, TENANT_NAME)
        jubilee = await _upsert_store(db, tenant, "Jubilee Hills", "Hyderabad")
        kukatpally = await _upsert_store(db, tenant, "Kukatpally", "Hyderabad")
        await db.commit()

        print("\n── Users ──")
        users = [
            await _upsert_user(db, tenant, "owner@aksha.demo", "Chain Owner", Role.SHOP_OWNER, []),
            await _upsert_user(db, tenant, "admin@aksha.demo", "Chain Admin", Role.ADMIN, [jubilee, kukatpally]),
            await _upsert_user(db, tenant, "doctor@aksha.demo", "Dr. Rao", Role.DOCTOR, [jubilee]),
            await _upsert_user(db, tenant, "billing@aksha.demo", "Billing Staff", Role.BILLING, [jubilee]),
        ]
        await db.commit()

        print("\n── Invoices (last 70 days) ──")
        await _seed_invoices(db, tenant, jubilee, days=70, per_day=8)
        await _seed_invoices(db, tenant, kukatpally, days=70, per_day=5)
        await db.commit()

    await engine.dispose()

    print("\n✓ Seed complete. Dev session tokens:")
    for user in users:
        token = create_access_token(subject=str(user.id), role=user.role, tenant_id=str(tenant.id))
        print(f"  {user.email:<22} {token}")


if __name__ == "__main__":
    asyncio.run(seed())
