"""
Order storage. Both backends share one async contract so the service layer
never knows which one it was handed.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from shared.config import settings
from shared.config.database import Base, build_engine, build_session_factory
from shared.errors import StorageError
from .models import OrderRecord


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class OrderStore(ABC):
    name = "store"
    # True when every service reads the same table the orders service writes
    shared = False

    @abstractmethod
    async def create(self, order: dict) -> dict:
        """Insert an order keyed by its orderId (replaces an existing copy)."""

    @abstractmethod
    async def get(self, order_id: str) -> Optional[dict]:
        ...

    @abstractmethod
    async def update(self, order_id: str, fields: dict) -> Optional[dict]:
        """Shallow-merge fields into the stored order and refresh updatedAt."""

    @abstractmethod
    async def delete(self, order_id: str) -> Optional[dict]:
        ...

    @abstractmethod
    async def list(self) -> List[dict]:
        ...

    @abstractmethod
    async def filter_by_status(self, status: str) -> List[dict]:
        ...

    @abstractmethod
    async def filter_by_email(self, email: str) -> List[dict]:
        ...


class InMemoryOrderStore(OrderStore):
    name = "in-memory"

    def __init__(self):
        self._orders: dict[str, dict] = {}

    async def create(self, order: dict) -> dict:
        self._orders[order["orderId"]] = dict(order)
        return dict(order)

    async def get(self, order_id: str) -> Optional[dict]:
        order = self._orders.get(order_id)
        return dict(order) if order else None

    async def update(self, order_id: str, fields: dict) -> Optional[dict]:
        if order_id not in self._orders:
            return None
        merged = {**self._orders[order_id], **fields, "updatedAt": utc_now()}
        self._orders[order_id] = merged
        return dict(merged)

    async def delete(self, order_id: str) -> Optional[dict]:
        return self._orders.pop(order_id, None)

    async def list(self) -> List[dict]:
        return [dict(o) for o in self._orders.values()]

    async def filter_by_status(self, status: str) -> List[dict]:
        return [dict(o) for o in self._orders.values() if o.get("status") == status]

    async def filter_by_email(self, email: str) -> List[dict]:
        wanted = email.lower()
        return [dict(o) for o in self._orders.values() if str(o.get("email", "")).lower() == wanted]


class SqlOrderStore(OrderStore):
    name = "database"
    shared = True

    def __init__(self, engine, session_factory):
        self.engine = engine
        self.session_factory = session_factory

    async def ensure_schema(self):
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"could not prepare orders table: {e}") from e

    @staticmethod
    def _to_record(order: dict) -> OrderRecord:
        return OrderRecord(
            order_id=order["orderId"],
            status=order.get("status", ""),
            email=str(order.get("email", "")).lower(),
            document=order,
        )

    async def create(self, order: dict) -> dict:
        try:
            async with self.session_factory() as db:
                await db.merge(self._to_record(order))
                await db.commit()
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"could not store order {order.get('orderId')}: {e}") from e
        return dict(order)

    async def get(self, order_id: str) -> Optional[dict]:
        try:
            async with self.session_factory() as db:
                record = await db.get(OrderRecord, order_id)
                return dict(record.document) if record else None
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"could not read order {order_id}: {e}") from e

    async def update(self, order_id: str, fields: dict) -> Optional[dict]:
        try:
            async with self.session_factory() as db:
                record = await db.get(OrderRecord, order_id)
                if not record:
                    return None

                merged = {**record.document, **fields, "updatedAt": utc_now()}
                # Reassign so the JSON column is flagged dirty
                record.document = merged
                record.status = merged.get("status", "")
                record.email = str(merged.get("email", "")).lower()
                await db.commit()
                return dict(merged)
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"could not update order {order_id}: {e}") from e

    async def delete(self, order_id: str) -> Optional[dict]:
        try:
            async with self.session_factory() as db:
                record = await db.get(OrderRecord, order_id)
                if not record:
                    return None
                snapshot = dict(record.document)
                await db.delete(record)
                await db.commit()
                return snapshot
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"could not delete order {order_id}: {e}") from e

    async def _scan(self, *criteria) -> List[dict]:
        try:
            async with self.session_factory() as db:
                stmt = select(OrderRecord)
                if criteria:
                    stmt = stmt.where(*criteria)
                result = await db.execute(stmt)
                return [dict(r.document) for r in result.scalars().all()]
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"could not scan orders: {e}") from e

    async def list(self) -> List[dict]:
        return await self._scan()

    async def filter_by_status(self, status: str) -> List[dict]:
        return await self._scan(OrderRecord.status == status)

    async def filter_by_email(self, email: str) -> List[dict]:
        return await self._scan(OrderRecord.email == email.lower())


def build_order_store() -> OrderStore:
    """Pick the backend once at startup from STORAGE_BACKEND."""
    if settings.STORAGE_BACKEND == "database":
        engine = build_engine()
        return SqlOrderStore(engine, build_session_factory(engine))
    return InMemoryOrderStore()
