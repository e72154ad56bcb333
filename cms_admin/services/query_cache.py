from __future__ import annotations

import logging
from typing import Awaitable, Callable

from cms_admin.backends.base import FetchResult


log = logging.getLogger(__name__)

QueryKey = tuple


def schema_key(content_type_id: str) -> QueryKey:
    return ("content-types", content_type_id)


def records_key(content_type_id: str, page: int, limit: int) -> QueryKey:
    return ("content", content_type_id, page, limit)


MEDIA_KEY: QueryKey = ("media",)


class QueryCache:
    """
    Read-mostly cache of successful fetches, shared by every dialog.

    Failed fetches are never stored, so the next open asks the backend again.
    Only mutations (upload, delete) invalidate; there is no TTL.
    """

    def __init__(self) -> None:
        self._entries: dict[QueryKey, FetchResult] = {}

    async def get_or_fetch(self, key: QueryKey, fetch: Callable[[], Awaitable[FetchResult]]) -> FetchResult:
        hit = self._entries.get(key)
        if hit is not None:
            return hit

        res = await fetch()
        if res.ok:
            self._entries[key] = res
        return res

    def invalidate(self, prefix: QueryKey) -> int:
        """
        Drop every entry whose key starts with prefix. Returns the number dropped.
        """
        n = len(prefix)
        stale = [k for k in self._entries if k[:n] == prefix]
        for k in stale:
            del self._entries[k]
        if stale:
            log.debug("cache: invalidated %d entries under %r", len(stale), prefix)
        return len(stale)
