# tests/test_permission_catalog.py
from __future__ import annotations

import pytest
from sqlalchemy import func, select

from runi.core.permissions import PERMISSION_DEFINITIONS, PermissionKey, PermissionSpec
from runi.crud.permission import list_permissions, permission_exists, seed_permissions
from runi.crud import staff_permission as grant_store
from runi.crud.staff_permission import is_granted, list_grants, set_grants
from runi.models.permission import PermissionDefinition
from runi.models.staff_permission import StaffPermission

from factories import create_staff, grant


def test_catalog_covers_every_permission_key():
    seeded_keys = {p.permission_key for p in PERMISSION_DEFINITIONS}
    assert seeded_keys == {k.value for k in PermissionKey}


def test_definition_with_unknown_key_is_rejected():
    with pytest.raises(ValueError):
        PermissionSpec("sales_view_typo", "sales", "manage_sales", "view", "Typo")


@pytest.mark.asyncio
async def test_seed_inserts_each_definition_once(db):
    created = await seed_permissions(db)
    assert created == len(PERMISSION_DEFINITIONS)

    again = await seed_permissions(db)
    assert again == 0

    count = (await db.execute(select(func.count(PermissionDefinition.id)))).scalar()
    assert count == len(PERMISSION_DEFINITIONS)


@pytest.mark.asyncio
async def test_reseed_keeps_edited_label(db, seeded):
    row = (
        await db.execute(
            select(PermissionDefinition).where(
                PermissionDefinition.permission_key == PermissionKey.MANAGE_SALES_VIEW.value
            )
        )
    ).scalar_one()
    row.label = "See all sales (renamed)"
    await db.commit()

    await seed_permissions(db)

    await db.refresh(row)
    assert row.label == "See all sales (renamed)"


@pytest.mark.asyncio
async def test_seed_only_adds_missing_rows(db):
    subset = [p for p in PERMISSION_DEFINITIONS if p.main_tab_key == "sales"]
    assert await seed_permissions(db, subset) == len(subset)

    created = await seed_permissions(db)
    assert created == len(PERMISSION_DEFINITIONS) - len(subset)


@pytest.mark.asyncio
async def test_permission_exists(db, seeded):
    assert await permission_exists(db, PermissionKey.DEBTORS_VIEW)
    assert await permission_exists(db, "debtors_view")
    assert not await permission_exists(db, "debtors_nuke")
    assert not await permission_exists(db, "")


@pytest.mark.asyncio
async def test_list_permissions_is_grouped_by_tab(db, seeded):
    rows = await list_permissions(db)
    assert len(rows) == len(PERMISSION_DEFINITIONS)

    tabs = [r.main_tab_key for r in rows]
    assert tabs == sorted(tabs)


@pytest.mark.asyncio
async def test_is_granted_requires_enabled_row(db, owner, seeded):
    staff = await create_staff(db, owner)
    await grant(db, staff, PermissionKey.LIVE_STOCK_VIEW.value, is_enabled=True)
    await grant(db, staff, PermissionKey.LIVE_STOCK_EDIT.value, is_enabled=False)

    assert await is_granted(db, staff.id, PermissionKey.LIVE_STOCK_VIEW)
    assert not await is_granted(db, staff.id, PermissionKey.LIVE_STOCK_EDIT)
    # no row at all
    assert not await is_granted(db, staff.id, PermissionKey.LIVE_STOCK_DELETE)


@pytest.mark.asyncio
async def test_grant_for_key_missing_from_catalog_denies(db, owner, seeded):
    staff = await create_staff(db, owner)
    await grant(db, staff, "retired_permission", is_enabled=True)

    assert not await is_granted(db, staff.id, "retired_permission")


@pytest.mark.asyncio
async def test_grants_are_per_staff(db, owner, seeded):
    alice = await create_staff(db, owner)
    bob = await create_staff(db, owner)
    await grant(db, alice, PermissionKey.DEPOSITED_VIEW.value)

    assert await is_granted(db, alice.id, PermissionKey.DEPOSITED_VIEW)
    assert not await is_granted(db, bob.id, PermissionKey.DEPOSITED_VIEW)


@pytest.mark.asyncio
async def test_set_grants_upserts_listed_keys_only(db, owner, seeded):
    staff = await create_staff(db, owner)
    await grant(db, staff, PermissionKey.DEBTORS_VIEW.value, is_enabled=True)

    rows = await set_grants(
        db,
        staff.id,
        {
            PermissionKey.PRODUCT_CATEGORIES_VIEW: True,
            PermissionKey.PRODUCT_CATEGORIES_EDIT: False,
        },
    )

    by_key = {r.permission_key: r.is_enabled for r in rows}
    assert by_key == {
        "debtors_view": True,
        "product_categories_view": True,
        "product_categories_edit": False,
    }

    await set_grants(db, staff.id, {PermissionKey.PRODUCT_CATEGORIES_EDIT: True})
    enabled = {r.permission_key for r in await list_grants(db, staff.id, enabled_only=True)}
    assert enabled == {"debtors_view", "product_categories_view", "product_categories_edit"}


@pytest.mark.asyncio
async def test_set_grants_wins_over_row_inserted_concurrently(db, sessionmaker, owner, seeded, monkeypatch):
    staff = await create_staff(db, owner)

    real_load = grant_store._load_grants
    calls = []

    async def load_then_race(session, staff_id, keys):
        calls.append(keys)
        if len(calls) == 1:
            # another admin request inserts the same key after our read
            async with sessionmaker() as other:
                other.add(StaffPermission(staff_id=staff_id, permission_key="debtors_view", is_enabled=False))
                await other.commit()
            return {}
        return await real_load(session, staff_id, keys)

    monkeypatch.setattr(grant_store, "_load_grants", load_then_race)

    async with sessionmaker() as admin:
        rows = await set_grants(admin, staff.id, {PermissionKey.DEBTORS_VIEW: True})

    assert len(calls) == 2
    assert [(r.permission_key, r.is_enabled) for r in rows] == [("debtors_view", True)]
    assert await is_granted(db, staff.id, PermissionKey.DEBTORS_VIEW)
