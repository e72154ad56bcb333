from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from cms_admin.backends.base import FetchResult, RecordSource
from cms_admin.core.ids import normalize_record_id
from cms_admin.schemas.content import ContentTypeSchema
from cms_admin.services.display_field import describe_related, display_value, record_preview, resolve_display_field
from cms_admin.services.media_preview import format_file_size, is_image, resolve_media
from cms_admin.services.query_cache import MEDIA_KEY, QueryCache, records_key, schema_key
from cms_admin.services.search import filter_records
from cms_admin.services.selection import SelectionMode, SelectionState, SelectionValue


log = logging.getLogger(__name__)

FIRST_PAGE = 1


@dataclass(frozen=True)
class CandidateRow:
    id: str
    label: str
    chosen: bool
    details: list[tuple[str, str]] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SelectedItem:
    id: str
    label: str
    loaded: bool  # False: id not in the fetched page, label is the raw id
    secondary: str | None = None


class RelationSelector:
    """
    Picker for records of one content type.

    Lifecycle: open() -> search()/toggle() -> confirm() | cancel().
    State lives only as long as the dialog; nothing is written back to the
    backend, the confirmed value goes to on_select.
    """

    kind = "relation"

    def __init__(
        self,
        *,
        backend: RecordSource,
        cache: QueryCache,
        content_type_id: str,
        mode: SelectionMode = "single",
        page_size: int = 100,
        on_select: Callable[[SelectionValue], Any] | None = None,
    ):
        self._backend = backend
        self._cache = cache
        self.content_type_id = content_type_id
        self.page_size = page_size
        self.on_select = on_select

        self.selection = SelectionState(mode)
        self.schema: ContentTypeSchema | None = None
        self.display_field = "id"
        self.candidates: list[dict[str, Any]] = []
        self.load_error: str | None = None
        self.query = ""
        self.is_open = False

    @property
    def mode(self) -> SelectionMode:
        return self.selection.mode

    @property
    def title(self) -> str:
        return (self.schema.display_name if self.schema else "") or self.content_type_id

    async def open(self, current_value: Any = None) -> None:
        self._reset()
        self.selection.hydrate(current_value)
        self.is_open = True
        await self._load()

    async def _load(self) -> None:
        schema_res = await self._cache.get_or_fetch(
            schema_key(self.content_type_id),
            lambda: self._backend.fetch_schema(self.content_type_id),
        )
        if schema_res.ok:
            self.schema = schema_res.schema
        else:
            log.info("relation %s: schema unavailable (%s)", self.content_type_id, schema_res.error_code)
        self.display_field = resolve_display_field(self.schema)

        records_res = await self._cache.get_or_fetch(
            records_key(self.content_type_id, FIRST_PAGE, self.page_size),
            lambda: self._backend.fetch_records(self.content_type_id, page=FIRST_PAGE, limit=self.page_size),
        )
        self._take_candidates(records_res)

    def _take_candidates(self, res: FetchResult) -> None:
        if res.ok:
            self.candidates = list(res.records or [])
            self.load_error = None
        else:
            self.candidates = []
            self.load_error = res.error_message or "Failed to fetch entries"

    def _reset(self) -> None:
        self.selection = SelectionState(self.selection.mode)
        self.schema = None
        self.display_field = "id"
        self.candidates = []
        self.load_error = None
        self.query = ""

    def search(self, query: str | None) -> None:
        self.query = query or ""

    def visible(self) -> list[dict[str, Any]]:
        return list(filter_records(self.candidates, self.query))

    def toggle(self, record_id: Any) -> None:
        if not self.is_open:
            return
        self.selection.toggle(record_id)

    def _row(self, record: dict[str, Any]) -> CandidateRow | None:
        rid = normalize_record_id(record.get("id"))
        if rid is None:
            return None
        preview = record_preview(record, self.display_field)
        return CandidateRow(id=rid, label=preview.label, chosen=self.selection.is_chosen(rid), details=preview.details)

    def rows(self) -> list[CandidateRow]:
        """
        Visible candidates in fetch order, annotated with their selection state.
        """
        out = []
        for record in self.visible():
            row = self._row(record)
            if row is not None:
                out.append(row)
        return out

    def selected_items(self) -> list[SelectedItem]:
        by_id = {}
        for record in self.candidates:
            rid = normalize_record_id(record.get("id"))
            if rid is not None:
                by_id.setdefault(rid, record)

        items = []
        for rid in self.selection.chosen:
            record = by_id.get(rid)
            if record is None:
                items.append(SelectedItem(id=rid, label=rid, loaded=False))
            else:
                related = describe_related(rid, record, self.schema, content_type_id=self.content_type_id)
                items.append(SelectedItem(
                    id=rid,
                    label=record_preview(record, self.display_field).label,
                    loaded=True,
                    secondary=related.secondary,
                ))
        return items

    @property
    def can_confirm(self) -> bool:
        # An empty multi-selection is a valid way to clear a relation.
        if not self.is_open:
            return False
        return self.mode == "multiple" or len(self.selection) > 0

    def selection_summary(self) -> str:
        n = len(self.selection)
        if self.mode == "multiple":
            return f"{n} selected"
        return "1 selected" if n == 1 else "None selected"

    def confirm(self) -> SelectionValue | None:
        """
        Hand the flattened selection to the caller and close.
        Returns None (and notifies nobody) when confirming is not allowed.
        """
        if not self.can_confirm:
            return None
        value = self.selection.flatten()
        if self.on_select is not None:
            self.on_select(value)
        self.close()
        return value

    def cancel(self) -> None:
        self.close()

    def close(self) -> None:
        self.is_open = False
        self._reset()


class MediaSelector(RelationSelector):
    """
    Same picker over the media library (GET /api/media, one shared listing).
    """

    kind = "media"

    def __init__(
        self,
        *,
        backend: RecordSource,
        cache: QueryCache,
        mode: SelectionMode = "single",
        on_select: Callable[[SelectionValue], Any] | None = None,
    ):
        super().__init__(backend=backend, cache=cache, content_type_id="media", mode=mode, on_select=on_select)
        self.display_field = "name"

    @property
    def title(self) -> str:
        return "Media"

    async def _load(self) -> None:
        res = await self._cache.get_or_fetch(MEDIA_KEY, self._backend.list_media)
        self._take_candidates(res)

    def _reset(self) -> None:
        super()._reset()
        self.display_field = "name"

    def _row(self, record: dict[str, Any]) -> CandidateRow | None:
        row = super()._row(record)
        if row is None:
            return None
        name = record.get("name") if isinstance(record.get("name"), str) else ""
        size = record.get("size") if isinstance(record.get("size"), int) else 0
        return CandidateRow(
            id=row.id,
            label=row.label,
            chosen=row.chosen,
            extra={
                "url": record.get("url") or "",
                "size": format_file_size(size),
                "is_image": is_image(name),
            },
        )

    def selected_items(self) -> list[SelectedItem]:
        resolved = {}
        for m in resolve_media(self.selection.chosen, self.candidates):
            resolved[normalize_record_id(m.get("id"))] = m

        items = []
        for rid in self.selection.chosen:
            m = resolved.get(rid)
            if m is None:
                items.append(SelectedItem(id=rid, label=rid, loaded=False))
                continue
            size = m.get("size") if isinstance(m.get("size"), int) else 0
            items.append(SelectedItem(id=rid, label=display_value(m, "name"), loaded=True, secondary=format_file_size(size)))
        return items
