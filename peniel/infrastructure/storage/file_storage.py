import asyncio
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterable, Optional

import structlog

from peniel.core.observability import metrics
from peniel.domain.exceptions import StorageException

logger = structlog.get_logger(__name__)


def object_name_for(filename: str, now_ms: Optional[int] = None) -> str:
    """Build the stored object name: ``<epoch millis>.<extension>``.

    The extension is whatever follows the last dot; a name without a dot
    keeps the whole name as its extension.
    """
    extension = filename.rsplit(".", 1)[-1]
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{stamp}.{extension}"


class FileStorage(ABC):
    @abstractmethod
    async def upload(self, filename: str, data: bytes, bucket: str) -> str:
        """Store ``data`` in ``bucket`` and return its public URL."""

    @abstractmethod
    def public_url(self, bucket: str, object_name: str) -> str:
        pass


class LocalFileStorage(FileStorage):
    """Bucket storage on the local filesystem, served from a public base URL."""

    def __init__(
        self,
        root: str,
        public_base_url: str,
        buckets: Iterable[str],
        clock_ms: Callable[[], int] = lambda: int(time.time() * 1000),
    ) -> None:
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")
        self.buckets = set(buckets)
        self.clock_ms = clock_ms

    async def upload(self, filename: str, data: bytes, bucket: str) -> str:
        if bucket not in self.buckets:
            metrics.record_upload(bucket, "rejected")
            raise StorageException(bucket, "unknown bucket")

        object_name = object_name_for(filename, self.clock_ms())
        target = self.root / bucket / object_name

        try:
            await asyncio.to_thread(self._write, target, data)
        except OSError as e:
            metrics.record_upload(bucket, "error")
            logger.error("File upload failed", bucket=bucket, error=str(e))
            raise StorageException(bucket, str(e)) from e

        url = self.public_url(bucket, object_name)
        if not url:
            raise StorageException(bucket, "Could not get public URL for uploaded file.")

        metrics.record_upload(bucket, "success")
        logger.info("File uploaded", bucket=bucket, object_name=object_name, size=len(data))
        return url

    def public_url(self, bucket: str, object_name: str) -> str:
        return f"{self.public_base_url}/{bucket}/{object_name}"

    @staticmethod
    def _write(target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
