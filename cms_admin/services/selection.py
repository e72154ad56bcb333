from __future__ import annotations

from typing import Any, Iterable, Literal

from cms_admin.core.ids import normalize_record_id


SelectionMode = Literal["single", "multiple"]
SelectionValue = str | list[str]


class SelectionState:
    """
    Chosen record ids for one dialog.

    single:   at most one id; toggling always replaces.
    multiple: unique ids in toggle order; toggling an id again removes it,
              re-selecting appends it at the end.
    """

    def __init__(self, mode: SelectionMode = "single"):
        self.mode: SelectionMode = mode
        self._chosen: list[str] = []

    @property
    def chosen(self) -> list[str]:
        return list(self._chosen)

    def hydrate(self, initial: Any, mode: SelectionMode | None = None) -> None:
        """
        Replace the state with the caller's current value (id, list of ids, or empty).
        """
        if mode is not None:
            self.mode = mode

        if initial is None:
            raw: Iterable[Any] = []
        elif isinstance(initial, (list, tuple)):
            raw = initial
        else:
            raw = [initial]

        ids: list[str] = []
        for value in raw:
            rid = normalize_record_id(value)
            if rid is not None and rid not in ids:
                ids.append(rid)

        self._chosen = ids[:1] if self.mode == "single" else ids

    def toggle(self, value: Any) -> None:
        rid = normalize_record_id(value)
        if rid is None:
            return

        if self.mode == "single":
            self._chosen = [rid]
        elif rid in self._chosen:
            self._chosen.remove(rid)
        else:
            self._chosen.append(rid)

    def is_chosen(self, value: Any) -> bool:
        rid = normalize_record_id(value)
        return rid is not None and rid in self._chosen

    def __len__(self) -> int:
        return len(self._chosen)

    def flatten(self) -> SelectionValue:
        if self.mode == "single":
            return self._chosen[0] if self._chosen else ""

        out: list[str] = []
        for rid in self._chosen:
            if rid and rid not in out:
                out.append(rid)
        return out
