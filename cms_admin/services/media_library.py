from __future__ import annotations

import logging
from typing import Any

from cms_admin.backends.base import CmsBackend, DeleteResult
from cms_admin.services.query_cache import MEDIA_KEY, QueryCache


log = logging.getLogger(__name__)


class MediaLibrary:
    """
    Cached media listing plus deletion. Any successful mutation invalidates the listing,
    so the next list() reads the backend again.
    """

    def __init__(self, *, backend: CmsBackend, cache: QueryCache):
        self._backend = backend
        self._cache = cache

    async def list(self) -> tuple[list[dict[str, Any]], str | None]:
        """
        Returns (media, error). A failed fetch is an empty listing plus the error message.
        """
        res = await self._cache.get_or_fetch(MEDIA_KEY, self._backend.list_media)
        if not res.ok:
            return [], res.error_message or "Failed to fetch media"
        return list(res.records or []), None

    async def delete(self, media_id: str) -> DeleteResult:
        res = await self._backend.delete_media(media_id)
        if res.ok:
            self._cache.invalidate(MEDIA_KEY)
            log.info("media %s deleted", media_id)
        else:
            log.warning("media %s delete failed: %s", media_id, res.error_code)
        return res
