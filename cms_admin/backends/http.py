from __future__ import annotations

import base64
import logging
from urllib.parse import quote

from pydantic import ValidationError

from cms_admin.backends.base import DeleteResult, FetchResult, LocalFile, UploadResult
from cms_admin.schemas.content import ContentTypeSchema, MediaRecord
from cms_admin.services.http_client import CmsHttpClient


log = logging.getLogger(__name__)


def encode_upload_body(file: LocalFile) -> dict:
    return {
        "file": base64.b64encode(file.content).decode("ascii"),
        "fileName": file.name,
        "mimeType": file.guessed_mime_type,
        "size": file.size_bytes,
    }


class HttpCmsBackend:
    """
    CMS REST backend over HTTP.

    GET  /api/content-types/{apiId}
    GET  /api/content/{apiId}?page=&limit=
    GET  /api/media
    POST /api/media            {file: base64, fileName, mimeType, size}
    DELETE /api/media/{id}
    """

    def __init__(self, client: CmsHttpClient):
        self._http = client

    async def aclose(self) -> None:
        await self._http.aclose()

    async def fetch_schema(self, content_type_id: str) -> FetchResult:
        res = await self._http.get_json(url=f"/api/content-types/{quote(content_type_id, safe='')}")
        if not res.ok:
            log.warning("fetch_schema %s failed: %s", content_type_id, res.error_code)
            return FetchResult(ok=False, error_code=res.error_code, error_message=res.message("Failed to fetch content type"))
        try:
            schema = ContentTypeSchema.model_validate(res.detail)
        except ValidationError as e:
            return FetchResult(ok=False, error_code="MALFORMED_SCHEMA", error_message=str(e))
        return FetchResult(ok=True, schema=schema)

    async def fetch_records(self, content_type_id: str, *, page: int, limit: int) -> FetchResult:
        res = await self._http.get_json(
            url=f"/api/content/{quote(content_type_id, safe='')}",
            params={"page": str(page), "limit": str(limit)},
        )
        if not res.ok:
            log.warning("fetch_records %s failed: %s", content_type_id, res.error_code)
            return FetchResult(ok=False, error_code=res.error_code, error_message=res.message("Failed to fetch entries"))
        entries = res.detail.get("entries")
        if not isinstance(entries, list):
            return FetchResult(ok=False, error_code="MALFORMED_ENTRIES", error_message="Response has no entries list")
        return FetchResult(ok=True, records=[e for e in entries if isinstance(e, dict)])

    async def list_media(self) -> FetchResult:
        res = await self._http.get_json(url="/api/media")
        if not res.ok:
            log.warning("list_media failed: %s", res.error_code)
            return FetchResult(ok=False, error_code=res.error_code, error_message=res.message("Failed to fetch media"))
        items = res.detail.get("data")
        if not isinstance(items, list):
            return FetchResult(ok=False, error_code="MALFORMED_MEDIA", error_message="Response is not a media list")

        records = []
        for item in items:
            try:
                records.append(MediaRecord.model_validate(item).as_record())
            except ValidationError:
                log.debug("list_media: skipping malformed item %r", item)
        return FetchResult(ok=True, records=records)

    async def upload_media(self, file: LocalFile) -> UploadResult:
        res = await self._http.post_json(url="/api/media", json_body=encode_upload_body(file))
        if not res.ok:
            return UploadResult(ok=False, error_code=res.error_code, error_message=res.message("Upload failed"))
        try:
            media = MediaRecord.model_validate(res.detail)
        except ValidationError:
            # Stored server-side, but the body is unusable; the listing refetch will show it.
            log.warning("upload_media %s: malformed response body", file.name)
            media = None
        return UploadResult(ok=True, media=media)

    async def delete_media(self, media_id: str) -> DeleteResult:
        res = await self._http.delete(url=f"/api/media/{quote(media_id, safe='')}")
        if not res.ok:
            return DeleteResult(ok=False, error_code=res.error_code, error_message=res.message("Failed to delete media file"))
        return DeleteResult(ok=True)
