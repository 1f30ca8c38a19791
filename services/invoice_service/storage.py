import asyncio
import secrets
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import httpx
import structlog

from shared.config import settings

logger = structlog.get_logger(__name__)


class ArtifactStoreError(Exception):
    """Raised when a rendered invoice could not be persisted."""
    pass


def invoice_filename(order_id: str) -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"invoice-{order_id}-{stamp}-{secrets.token_hex(3)}.pdf"


class ArtifactStore(ABC):
    name = "artifacts"

    @abstractmethod
    async def save(self, filename: str, content: bytes) -> str:
        """Persist the file and return a URL it can be fetched from."""


class LocalArtifactStore(ArtifactStore):
    name = "local"

    def __init__(self, directory: str, public_base_url: str):
        self.directory = Path(directory)
        self.public_base_url = public_base_url.rstrip("/")

    def path_for(self, filename: str) -> Optional[Path]:
        # Plain file names only, no traversal out of the exports dir
        if not filename or Path(filename).name != filename or filename.startswith("."):
            return None
        return self.directory / filename

    def _write(self, path: Path, content: bytes):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    async def save(self, filename: str, content: bytes) -> str:
        path = self.path_for(filename)
        if path is None:
            raise ArtifactStoreError(f"invalid artifact name: {filename!r}")
        try:
            await asyncio.to_thread(self._write, path, content)
        except OSError as e:
            raise ArtifactStoreError(f"could not write {path}: {e}") from e
        logger.info("invoice_stored", path=str(path), size=len(content))
        return f"{self.public_base_url}/invoices/files/{filename}"


class ObjectArtifactStore(ArtifactStore):
    """Uploads to an object store bucket under the invoices/ prefix."""

    name = "object-store"

    def __init__(self, base_url: str, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def save(self, filename: str, content: bytes) -> str:
        url = f"{self.base_url}/invoices/{filename}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.put(url, content=content, headers={"Content-Type": "application/pdf"})
                resp.raise_for_status()
        except httpx.HTTPError as e:
            raise ArtifactStoreError(f"upload to {url} failed: {e}") from e
        logger.info("invoice_uploaded", url=url, size=len(content))
        return url


def build_artifact_store() -> ArtifactStore:
    """Pick the artifact backend once at startup from ARTIFACT_BACKEND."""
    if settings.ARTIFACT_BACKEND == "object":
        if not settings.OBJECT_STORE_URL:
            raise RuntimeError("ARTIFACT_BACKEND=object requires OBJECT_STORE_URL")
        return ObjectArtifactStore(settings.OBJECT_STORE_URL)
    return LocalArtifactStore(settings.EXPORTS_DIR, settings.PUBLIC_BASE_URL)
