from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Iterable, Literal

from cms_admin.backends.base import LocalFile, MediaStore
from cms_admin.core.ids import gen_id
from cms_admin.services.query_cache import MEDIA_KEY, QueryCache


log = logging.getLogger(__name__)

UploadStatus = Literal["pending", "uploading", "done", "failed"]
NoticeLevel = Literal["info", "error"]


@dataclass
class UploadItem:
    key: str
    file: LocalFile
    name: str
    size_bytes: int
    progress: int = 0
    status: UploadStatus = "pending"
    error: str | None = None

    @classmethod
    def from_file(cls, file: LocalFile) -> "UploadItem":
        # Same-name files are legal in one batch; the key never derives from the name.
        return cls(key=gen_id("upl"), file=file, name=file.name, size_bytes=file.size_bytes)


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    title: str
    description: str


@dataclass(frozen=True)
class UploadSummary:
    success_count: int
    total_count: int
    failed_keys: list[str] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return self.success_count == self.total_count

    @property
    def text(self) -> str:
        return f"Successfully uploaded {self.success_count} of {self.total_count} files"


class UploadSession:
    """
    One upload dialog: a list of UploadItems and the pipeline that drains it.

    Files are uploaded one at a time in the order they were added. A failed
    file never stops the batch. Retrying is manual: add the file again.
    """

    def __init__(
        self,
        *,
        store: MediaStore,
        cache: QueryCache,
        progress_tick_seconds: float = 0.3,
        progress_step: int = 10,
        progress_cap: int = 90,
        auto_close_seconds: float = 1.0,
        on_upload_complete: Callable[[], Any] | None = None,
        on_close: Callable[[], Any] | None = None,
    ):
        self._store = store
        self._cache = cache
        self.progress_tick_seconds = progress_tick_seconds
        self.progress_step = progress_step
        self.progress_cap = progress_cap
        self.auto_close_seconds = auto_close_seconds
        self.on_upload_complete = on_upload_complete
        self.on_close = on_close

        self.id = gen_id("dlg")
        self.items: list[UploadItem] = []
        self.notices: list[Notice] = []
        self.is_open = True
        self.uploading = False
        self.last_summary: UploadSummary | None = None
        self.auto_close_task: asyncio.Task | None = None

    # --- dialog interaction -------------------------------------------------

    def add_files(self, files: Iterable[LocalFile]) -> list[UploadItem]:
        if self.uploading or not self.is_open:
            log.info("upload %s: add_files ignored (uploading=%s open=%s)", self.id, self.uploading, self.is_open)
            return []
        added = [UploadItem.from_file(f) for f in files]
        self.items.extend(added)
        return added

    def get(self, key: str) -> UploadItem | None:
        for item in self.items:
            if item.key == key:
                return item
        return None

    def dismiss(self, key: str) -> bool:
        """
        Remove one item from the dialog. Not allowed while a batch is running.
        """
        if self.uploading:
            return False
        for i, item in enumerate(self.items):
            if item.key == key:
                self.items.pop(i)
                return True
        return False

    def pending(self) -> list[UploadItem]:
        return [i for i in self.items if i.status == "pending"]

    def reset(self) -> None:
        self.items = []
        self.notices = []
        self.last_summary = None

    def close(self) -> bool:
        """
        Close the dialog, discarding every item. Suppressed while uploading.
        """
        if self.uploading:
            return False
        self.reset()
        was_open, self.is_open = self.is_open, False
        if was_open and self.on_close is not None:
            self.on_close()
        return True

    # --- pipeline -------------------------------------------------------------

    @contextlib.asynccontextmanager
    async def _simulated_progress(self, item: UploadItem) -> AsyncIterator[None]:
        """
        The transfer has no progress signal; creep toward progress_cap while it is in flight.
        The ticker is cancelled as soon as the block exits, on success and failure alike.
        """
        async def _tick() -> None:
            while item.progress < self.progress_cap:
                await asyncio.sleep(self.progress_tick_seconds)
                item.progress = min(self.progress_cap, item.progress + self.progress_step)

        task = asyncio.create_task(_tick(), name=f"progress:{item.key}")
        try:
            yield
        finally:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _upload_one(self, item: UploadItem) -> bool:
        item.status = "uploading"
        item.progress = 0
        item.error = None

        try:
            async with self._simulated_progress(item):
                result = await self._store.upload_media(item.file)
        except Exception as e:
            log.exception("upload %s: %s crashed", self.id, item.name)
            ok, message = False, str(e) or "An unknown error occurred"
        else:
            ok, message = result.ok, (result.error_message or "Upload failed")

        if ok:
            item.status = "done"
            item.progress = 100
            return True

        item.status = "failed"
        item.error = message
        log.warning("upload %s: %s failed: %s", self.id, item.name, message)
        self.notices.append(Notice(level="error", title=f"Failed to upload {item.name}", description=message))
        return False

    async def run(self) -> UploadSummary | None:
        """
        Upload every pending item. Returns None when there was nothing to upload.
        """
        if self.uploading:
            return None
        batch = self.pending()
        if not batch:
            return None

        self.uploading = True
        successful = 0
        failed_keys: list[str] = []
        try:
            for item in batch:
                if await self._upload_one(item):
                    successful += 1
                else:
                    failed_keys.append(item.key)
        finally:
            self.uploading = False
            # Partial batches still created media server-side.
            self._cache.invalidate(MEDIA_KEY)

        summary = UploadSummary(success_count=successful, total_count=len(batch), failed_keys=failed_keys)
        self.last_summary = summary
        self.notices.append(Notice(level="info", title="Upload complete", description=summary.text))
        log.info("upload %s: %s", self.id, summary.text)

        if self.on_upload_complete is not None:
            self.on_upload_complete()

        if summary.all_succeeded:
            self.auto_close_task = asyncio.create_task(self._auto_close(), name=f"auto-close:{self.id}")
        return summary

    async def _auto_close(self) -> None:
        await asyncio.sleep(self.auto_close_seconds)
        self.close()
