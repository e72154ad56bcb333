from __future__ import annotations

import asyncio
import random
from typing import Any

from cms_admin.backends.base import DeleteResult, FetchResult, LocalFile, UploadResult
from cms_admin.schemas.content import ContentTypeSchema, MediaRecord


class InMemoryCmsBackend:
    """
    Local stand-in for the CMS REST backend (dev server with backend=memory, and tests).

    - Files whose name starts with "FAIL" are rejected, like a server-side validation error.
    - failure_rate > 0 simulates occasional transport errors.
    - calls records every request as (operation, argument) for assertions.
    """

    def __init__(
        self,
        *,
        content_types: dict[str, dict[str, Any]] | None = None,
        entries: dict[str, list[dict[str, Any]]] | None = None,
        media: list[dict[str, Any]] | None = None,
        failure_rate: float = 0.0,
        latency_seconds: float = 0.0,
    ):
        self.content_types = dict(content_types or {})
        self.entries = {k: list(v) for k, v in (entries or {}).items()}
        self.media: list[dict[str, Any]] = list(media or [])
        self.failure_rate = failure_rate
        self.latency_seconds = latency_seconds
        self.calls: list[tuple[str, Any]] = []
        self._next_media_id = 1 + max((int(m["id"]) for m in self.media if str(m.get("id", "")).isdigit()), default=0)

    async def aclose(self) -> None:
        return None

    async def _roundtrip(self, op: str, arg: Any) -> bool:
        self.calls.append((op, arg))
        if self.latency_seconds:
            await asyncio.sleep(self.latency_seconds)
        return not (self.failure_rate and random.random() < self.failure_rate)

    async def fetch_schema(self, content_type_id: str) -> FetchResult:
        if not await self._roundtrip("fetch_schema", content_type_id):
            return FetchResult(ok=False, error_code="MOCK_TEMP", error_message="temporary error")
        raw = self.content_types.get(content_type_id)
        if raw is None:
            return FetchResult(ok=False, error_code="HTTP_404", error_message="Content type not found")
        return FetchResult(ok=True, schema=ContentTypeSchema.model_validate(raw))

    async def fetch_records(self, content_type_id: str, *, page: int, limit: int) -> FetchResult:
        if not await self._roundtrip("fetch_records", content_type_id):
            return FetchResult(ok=False, error_code="MOCK_TEMP", error_message="temporary error")
        if content_type_id not in self.entries:
            return FetchResult(ok=False, error_code="HTTP_404", error_message="Content type not found")
        start = (max(page, 1) - 1) * limit
        return FetchResult(ok=True, records=list(self.entries[content_type_id][start:start + limit]))

    async def list_media(self) -> FetchResult:
        if not await self._roundtrip("list_media", None):
            return FetchResult(ok=False, error_code="MOCK_TEMP", error_message="temporary error")
        return FetchResult(ok=True, records=[MediaRecord.model_validate(m).as_record() for m in self.media])

    async def upload_media(self, file: LocalFile) -> UploadResult:
        if not await self._roundtrip("upload_media", file.name):
            return UploadResult(ok=False, error_code="MOCK_TEMP", error_message="temporary error")
        if file.name.startswith("FAIL"):
            return UploadResult(ok=False, error_code="HTTP_400", error_message="File type not supported")

        media_id = self._next_media_id
        self._next_media_id += 1
        raw = {
            "id": media_id,
            "name": file.name,
            "url": f"memory://media/{media_id}/{file.name}",
            "type": file.guessed_mime_type,
            "size": file.size_bytes,
        }
        self.media.append(raw)
        return UploadResult(ok=True, media=MediaRecord.model_validate(raw))

    async def delete_media(self, media_id: str) -> DeleteResult:
        if not await self._roundtrip("delete_media", media_id):
            return DeleteResult(ok=False, error_code="MOCK_TEMP", error_message="temporary error")
        for i, m in enumerate(self.media):
            if str(m.get("id")) == media_id:
                self.media.pop(i)
                return DeleteResult(ok=True)
        return DeleteResult(ok=False, error_code="HTTP_404", error_message="Media not found")
