"""
Contract tests run against both order store backends.
"""
import pytest
import pytest_asyncio

from services.order_service.repository import InMemoryOrderStore, SqlOrderStore
from shared.config.database import build_engine, build_session_factory
from shared.errors import StorageError


def make_order(order_id: str, status: str = "received", email: str = "ada@example.com") -> dict:
    return {
        "orderId": order_id,
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": email,
        "payment": {"cardNumberLast4": "1111", "securityProvided": True},
        "product": "Difference Engine",
        "price": "99.99",
        "status": status,
        "createdAt": "2026-01-01T00:00:00+00:00",
        "updatedAt": "2026-01-01T00:00:00+00:00",
    }


@pytest_asyncio.fixture(params=["memory", "sql"])
async def store(request, tmp_path):
    if request.param == "memory":
        yield InMemoryOrderStore()
        return

    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")
    sql_store = SqlOrderStore(engine, build_session_factory(engine))
    await sql_store.ensure_schema()
    yield sql_store
    await engine.dispose()


class TestOrderStoreContract:

    @pytest.mark.asyncio
    async def test_create_then_get(self, store):
        await store.create(make_order("o-1"))
        order = await store.get("o-1")
        assert order["orderId"] == "o-1"
        assert order["payment"]["cardNumberLast4"] == "1111"

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store):
        assert await store.get("missing") is None

    @pytest.mark.asyncio
    async def test_update_merges_and_refreshes_updated_at(self, store):
        await store.create(make_order("o-1"))

        updated = await store.update("o-1", {"status": "shipped"})

        assert updated["status"] == "shipped"
        assert updated["product"] == "Difference Engine"
        assert updated["createdAt"] == "2026-01-01T00:00:00+00:00"
        assert updated["updatedAt"] > "2026-01-01T00:00:00+00:00"
        assert (await store.get("o-1"))["status"] == "shipped"

    @pytest.mark.asyncio
    async def test_update_missing_returns_none(self, store):
        assert await store.update("missing", {"status": "shipped"}) is None
        assert await store.list() == []

    @pytest.mark.asyncio
    async def test_delete_returns_removed_order(self, store):
        await store.create(make_order("o-1"))
        removed = await store.delete("o-1")
        assert removed["orderId"] == "o-1"
        assert await store.get("o-1") is None
        assert await store.delete("o-1") is None

    @pytest.mark.asyncio
    async def test_list_and_filters(self, store):
        await store.create(make_order("o-1", status="received", email="ada@example.com"))
        await store.create(make_order("o-2", status="shipped", email="Grace@Example.com"))
        await store.create(make_order("o-3", status="shipped", email="ada@example.com"))

        assert {o["orderId"] for o in await store.list()} == {"o-1", "o-2", "o-3"}
        assert {o["orderId"] for o in await store.filter_by_status("shipped")} == {"o-2", "o-3"}
        assert await store.filter_by_status("delivered") == []
        assert {o["orderId"] for o in await store.filter_by_email("grace@example.com")} == {"o-2"}
        assert {o["orderId"] for o in await store.filter_by_email("ADA@example.com")} == {"o-1", "o-3"}

    @pytest.mark.asyncio
    async def test_filters_follow_updates(self, store):
        await store.create(make_order("o-1"))
        await store.update("o-1", {"status": "delivered", "email": "new@example.com"})
        assert [o["orderId"] for o in await store.filter_by_status("delivered")] == ["o-1"]
        assert [o["orderId"] for o in await store.filter_by_email("new@example.com")] == ["o-1"]

    @pytest.mark.asyncio
    async def test_returned_copies_are_detached(self, store):
        await store.create(make_order("o-1"))
        order = await store.get("o-1")
        order["status"] = "tampered"
        assert (await store.get("o-1"))["status"] == "received"


class TestSqlStoreFaults:

    @pytest.mark.asyncio
    async def test_unreachable_database_raises_storage_error(self, tmp_path):
        engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'orders.db'}")
        sql_store = SqlOrderStore(engine, build_session_factory(engine))
        try:
            with pytest.raises(StorageError):
                await sql_store.create(make_order("o-1"))
            with pytest.raises(StorageError):
                await sql_store.ensure_schema()
        finally:
            await engine.dispose()
