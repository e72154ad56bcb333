from __future__ import annotations

from typing import Any, Sequence

from cms_admin.core.ids import normalize_record_id


IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg", ".bmp")
_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def is_image(filename: str | None) -> bool:
    return bool(filename) and filename.lower().endswith(IMAGE_EXTENSIONS)


def format_file_size(size_bytes: int | None) -> str:
    """
    1536 -> "1.5 KB". Two decimals at most, trailing zeros dropped.
    """
    if not size_bytes or size_bytes <= 0:
        return "0 Bytes"
    i = 0
    while size_bytes >= 1024 ** (i + 1) and i < len(_SIZE_UNITS) - 1:
        i += 1
    value = round(size_bytes / (1024 ** i), 2)
    return f"{value:g} {_SIZE_UNITS[i]}"


def resolve_media(ids: str | Sequence[str] | None, media: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Look up attached media ids in the listing. Keeps the ids' order; unknown ids are dropped.
    """
    if ids is None:
        return []
    wanted = [ids] if isinstance(ids, str) else list(ids)

    by_id = {}
    for m in media:
        rid = normalize_record_id(m.get("id")) if isinstance(m, dict) else None
        if rid is not None:
            by_id.setdefault(rid, m)

    out = []
    for raw in wanted:
        rid = normalize_record_id(raw)
        if rid is not None and rid in by_id:
            out.append(by_id[rid])
    return out
