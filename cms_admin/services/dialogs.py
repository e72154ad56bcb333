from __future__ import annotations

import logging
from typing import Any

from cms_admin.backends.base import CmsBackend
from cms_admin.core.config import Settings
from cms_admin.core.ids import gen_id
from cms_admin.services.query_cache import QueryCache
from cms_admin.services.relation_selector import MediaSelector, RelationSelector
from cms_admin.services.selection import SelectionMode
from cms_admin.services.upload_pipeline import UploadSession


log = logging.getLogger(__name__)


class DialogRegistry:
    """
    Open dialogs of the console, addressed by id.

    Every dialog gets fresh state on open and is forgotten on close;
    only the query cache is shared between them.
    """

    def __init__(self, *, backend: CmsBackend, cache: QueryCache, settings: Settings):
        self.backend = backend
        self.cache = cache
        self.settings = settings
        self._selectors: dict[str, RelationSelector] = {}
        self._uploads: dict[str, UploadSession] = {}

    def __len__(self) -> int:
        return len(self._selectors) + len(self._uploads)

    async def open_relation(self, *, content_type_id: str, mode: SelectionMode, current_value: Any) -> tuple[str, RelationSelector]:
        selector = RelationSelector(
            backend=self.backend,
            cache=self.cache,
            content_type_id=content_type_id,
            mode=mode,
            page_size=self.settings.relation_page_size,
        )
        return await self._open_selector(selector, current_value)

    async def open_media(self, *, mode: SelectionMode, current_value: Any) -> tuple[str, RelationSelector]:
        selector = MediaSelector(backend=self.backend, cache=self.cache, mode=mode)
        return await self._open_selector(selector, current_value)

    async def _open_selector(self, selector: RelationSelector, current_value: Any) -> tuple[str, RelationSelector]:
        await selector.open(current_value)
        dialog_id = gen_id("dlg")
        self._selectors[dialog_id] = selector
        return dialog_id, selector

    def selector(self, dialog_id: str, kind: str) -> RelationSelector | None:
        selector = self._selectors.get(dialog_id)
        if selector is None or selector.kind != kind:
            return None
        if not selector.is_open:
            self.forget(dialog_id)
            return None
        return selector

    def open_upload(self) -> UploadSession:
        s = self.settings
        session = UploadSession(
            store=self.backend,
            cache=self.cache,
            progress_tick_seconds=s.upload_progress_tick_seconds,
            progress_step=s.upload_progress_step,
            progress_cap=s.upload_progress_cap,
            auto_close_seconds=s.upload_auto_close_seconds,
            on_close=lambda: self.forget(session.id),
        )
        self._uploads[session.id] = session
        return session

    def upload(self, dialog_id: str) -> UploadSession | None:
        session = self._uploads.get(dialog_id)
        if session is None:
            return None
        if not session.is_open:
            self.forget(dialog_id)
            return None
        return session

    def forget(self, dialog_id: str) -> None:
        """
        Drop a closed dialog. Unknown ids are ignored.
        """
        dropped = self._selectors.pop(dialog_id, None) or self._uploads.pop(dialog_id, None)
        if dropped is not None:
            log.debug("dialogs: forgot %s (%d still open)", dialog_id, len(self))
