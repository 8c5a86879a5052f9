"""
Snapshot persistence for the in-memory store.
"""
from __future__ import annotations

import asyncio

import pytest

from storefront.storage import MemoryStore, SnapshotManager, Statement, StorageError


def run(coro):
    return asyncio.run(coro)


async def start_manager(path, interval=60.0):
    store = MemoryStore()
    await store.open()
    manager = SnapshotManager(store, path, interval=interval)
    loaded = await manager.load()
    await store.init_schema()
    await manager.start()
    return store, manager, loaded


async def stop_manager(store, manager):
    await manager.shutdown()
    await store.close()


def test_load_without_snapshot_starts_empty(tmp_path):
    async def scenario():
        store, manager, loaded = await start_manager(tmp_path / "snap.db")
        stats = await store.stats()
        await stop_manager(store, manager)
        return loaded, stats

    loaded, stats = run(scenario())
    assert loaded is False
    assert stats == {"shops": 0, "products": 0}


def test_write_flushes_immediately_and_reloads(tmp_path):
    path = tmp_path / "snap.db"

    async def write():
        store, manager, _ = await start_manager(path)
        result = await store.execute(Statement.INSERT_SHOP, ("Acme", "acme", "a@b.com"))
        await store.execute(Statement.INSERT_PRODUCT, (result.inserted_id, "Widget", "", 9.99, 3))
        written = path.exists()
        flushes = manager.flush_count
        dirty = manager.dirty
        await store.close()
        return written, flushes, dirty

    async def read():
        store, manager, loaded = await start_manager(path)
        shop = (await store.execute(Statement.GET_SHOP_BY_SUBDOMAIN, ("acme",))).first()
        products = (await store.execute(Statement.LIST_PRODUCTS_BY_SHOP, (shop["id"],))).rows
        await stop_manager(store, manager)
        return loaded, shop, products

    written, flushes, dirty = run(write())
    assert written
    assert flushes == 2
    assert dirty is False

    loaded, shop, products = run(read())
    assert loaded is True
    assert shop["name"] == "Acme"
    assert [p["name"] for p in products] == ["Widget"]
    assert products[0]["stock"] == 3


def test_shutdown_writes_final_snapshot(tmp_path):
    path = tmp_path / "snap.db"

    async def scenario():
        store, manager, _ = await start_manager(path)
        await stop_manager(store, manager)
        return manager.flush_count

    assert run(scenario()) == 1
    assert path.exists()
    assert not (tmp_path / "snap.db.tmp").exists()


def test_failed_flush_is_logged_and_retried_by_timer(tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    path = blocker / "snap.db"

    async def scenario():
        store, manager, _ = await start_manager(path, interval=0.05)
        await store.execute(Statement.INSERT_SHOP, ("Acme", "acme", "a@b.com"))
        state_after_failure = (manager.dirty, manager.failure_count)

        # Make the location writable again; the timer picks up the dirty state
        blocker.unlink()
        blocker.mkdir()
        for _ in range(40):
            await asyncio.sleep(0.05)
            if manager.flush_count:
                break

        state_after_retry = (manager.dirty, manager.flush_count)
        await stop_manager(store, manager)
        return state_after_failure, state_after_retry

    with caplog.at_level("ERROR"):
        (dirty, failures), (dirty_after, flushes) = run(scenario())

    assert dirty is True
    assert failures == 1
    assert "Snapshot flush" in caplog.text
    assert dirty_after is False
    assert flushes >= 1
    assert path.exists()


def test_corrupt_snapshot_fails_load(tmp_path):
    path = tmp_path / "snap.db"
    path.write_bytes(b"definitely not sqlite " * 64)

    async def scenario():
        store = MemoryStore()
        await store.open()
        manager = SnapshotManager(store, path)
        try:
            await manager.load()
        finally:
            await store.close()

    with pytest.raises(StorageError):
        run(scenario())


def test_state_stays_dirty_until_copy_completes(tmp_path, monkeypatch):
    path = tmp_path / "snap.db"
    seen_during_copy = []

    async def scenario():
        store, manager, _ = await start_manager(path)
        original_copy = store.copy_to

        async def observed_copy(target):
            seen_during_copy.append(manager.dirty)
            await original_copy(target)

        monkeypatch.setattr(store, "copy_to", observed_copy)
        await store.execute(Statement.INSERT_SHOP, ("Acme", "acme", "a@b.com"))
        dirty_after = manager.dirty
        await stop_manager(store, manager)
        return dirty_after

    assert run(scenario()) is False
    assert seen_during_copy[0] is True
