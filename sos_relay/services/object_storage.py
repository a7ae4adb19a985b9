"""
Object storage for report media.

Given an uploaded file, return a stable retrieval URL. The rest of the
service treats that URL as an opaque string.
"""
import asyncio
import logging
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Optional, Protocol

import httpx

from sos_relay.config import Settings
from sos_relay.errors import UpstreamFailure

logger = logging.getLogger(__name__)


@dataclass
class IncomingFile:
    """One file part of a submission."""

    filename: str
    content_type: str
    file: BinaryIO


class ObjectStorage(Protocol):
    async def upload(self, incoming: IncomingFile) -> str: ...


class LocalObjectStorage:
    """Writes files under ``upload_dir``; served back by GET /api/upload/{filename}."""

    def __init__(self, upload_dir: str | Path, media_base_url: str = "") -> None:
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.media_base_url = media_base_url.strip().rstrip("/")

    def public_url(self, filename: str) -> str:
        return f"{self.media_base_url}/api/upload/{filename}"

    def resolve(self, filename: str) -> Optional[Path]:
        """Path of a stored file, or None when the name escapes the upload dir or is missing."""
        path = (self.upload_dir / filename).resolve()
        if path.parent != self.upload_dir.resolve() or not path.is_file():
            return None
        return path

    def _write(self, incoming: IncomingFile, target: Path) -> None:
        with target.open("wb") as buffer:
            shutil.copyfileobj(incoming.file, buffer)

    async def upload(self, incoming: IncomingFile) -> str:
        unique_filename = f"{uuid.uuid4()}{Path(incoming.filename or 'file').suffix}"
        target = self.upload_dir / unique_filename
        try:
            await asyncio.to_thread(self._write, incoming, target)
        except OSError as e:
            logger.exception("Local upload of %s failed: %s", incoming.filename, e)
            raise UpstreamFailure("File upload failed") from e
        return self.public_url(unique_filename)


class HttpObjectStorage:
    """Unsigned multipart upload to a Cloudinary-style endpoint.

    The endpoint answers with JSON carrying ``secure_url`` or ``url``.
    """

    def __init__(
        self,
        upload_url: str,
        upload_preset: str = "",
        api_key: str = "",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.upload_url = upload_url
        self.upload_preset = upload_preset
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def upload(self, incoming: IncomingFile) -> str:
        data: dict[str, Any] = {}
        if self.upload_preset:
            data["upload_preset"] = self.upload_preset
        if self.api_key:
            data["api_key"] = self.api_key
        files = {"file": (incoming.filename or "file", incoming.file, incoming.content_type)}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.post(self.upload_url, data=data, files=files)
                r.raise_for_status()
                body = r.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Object storage upload of %s failed: %s", incoming.filename, e)
            raise UpstreamFailure("File upload failed") from e
        url = (body.get("secure_url") or body.get("url")) if isinstance(body, dict) else None
        if not url:
            logger.warning("Object storage response for %s had no URL: %s", incoming.filename, body)
            raise UpstreamFailure("File upload failed")
        return str(url)


def build_object_storage(settings: Settings) -> ObjectStorage:
    if settings.storage_backend == "http":
        if not settings.object_storage_upload_url:
            raise ValueError("OBJECT_STORAGE_UPLOAD_URL is required when STORAGE_BACKEND=http")
        return HttpObjectStorage(
            settings.object_storage_upload_url,
            upload_preset=settings.object_storage_upload_preset,
            api_key=settings.object_storage_api_key,
            timeout=settings.object_storage_timeout,
        )
    if settings.storage_backend != "local":
        logger.warning("Unknown STORAGE_BACKEND %r, using local disk", settings.storage_backend)
    return LocalObjectStorage(settings.upload_dir, settings.media_base_url)
