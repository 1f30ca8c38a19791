import asyncio
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import structlog
from fastapi import UploadFile

from .repository import VerificationRepository
from .schemas import VerificationRecord

logger = structlog.get_logger(__name__)


class VerificationService:
    def __init__(self, repository: VerificationRepository, uploads_dir: str):
        self.repository = repository
        self.uploads_dir = Path(uploads_dir)

    def _write(self, path: Path, content: bytes):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    async def save_photo(self, photo: UploadFile) -> str:
        suffix = Path(photo.filename or "").suffix.lower()[:10]
        name = f"{uuid.uuid4().hex}{suffix}"
        content = await photo.read()
        await asyncio.to_thread(self._write, self.uploads_dir / name, content)
        return name

    async def verify(self, order_id: str, gps_lat: float, gps_long: float, photo: Optional[UploadFile] = None):
        photo_ref = await self.save_photo(photo) if photo and photo.filename else None
        record = VerificationRecord(
            id=str(uuid.uuid4()),
            orderId=order_id,
            gpsLat=gps_lat,
            gpsLong=gps_long,
            photo=photo_ref,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        await self.repository.add(record)
        logger.info("delivery_verified", order_id=order_id, has_photo=photo_ref is not None)
        return record

    async def list_verifications(self):
        return await self.repository.list()

    async def for_order(self, order_id: str):
        return await self.repository.for_order(order_id)
