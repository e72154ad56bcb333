from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from cms_admin.schemas.content import ContentTypeSchema, MediaRecord


@dataclass(frozen=True)
class LocalFile:
    """
    A file picked or dropped by the user, not yet uploaded.
    """
    name: str
    content: bytes
    mime_type: str = ""

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def guessed_mime_type(self) -> str:
        if self.mime_type:
            return self.mime_type
        guessed, _ = mimetypes.guess_type(self.name)
        return guessed or "application/octet-stream"


@dataclass(frozen=True)
class FetchResult:
    ok: bool
    schema: ContentTypeSchema | None = None
    records: list[dict[str, Any]] | None = None
    error_code: str | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class UploadResult:
    ok: bool
    media: MediaRecord | None = None
    error_code: str | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class DeleteResult:
    ok: bool
    error_code: str | None = None
    error_message: str | None = None


@runtime_checkable
class RecordSource(Protocol):
    """
    Read side of the CMS: content-type schemas, entry pages and the media listing.
    Implementations never raise on backend failures; they return ok=False.
    """

    async def fetch_schema(self, content_type_id: str) -> FetchResult:
        ...

    async def fetch_records(self, content_type_id: str, *, page: int, limit: int) -> FetchResult:
        ...

    async def list_media(self) -> FetchResult:
        ...


@runtime_checkable
class MediaStore(Protocol):
    """
    Write side of the CMS. Not idempotent on the server: callers must not retry blindly.
    """

    async def upload_media(self, file: LocalFile) -> UploadResult:
        ...

    async def delete_media(self, media_id: str) -> DeleteResult:
        ...


class CmsBackend(RecordSource, MediaStore, Protocol):
    async def aclose(self) -> None:
        ...
