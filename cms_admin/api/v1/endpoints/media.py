from fastapi import APIRouter, Depends, HTTPException, Response

from cms_admin.api.deps import get_media_library, not_found
from cms_admin.core.ids import normalize_record_id
from cms_admin.schemas.common import ErrorResponse
from cms_admin.schemas.dialogs import MediaOut
from cms_admin.services.media_library import MediaLibrary
from cms_admin.services.media_preview import format_file_size, is_image
from cms_admin.services.search import filter_records

router = APIRouter()


@router.get("/media", response_model=list[MediaOut])
async def list_media(q: str | None = None, library: MediaLibrary = Depends(get_media_library)):
    """
    Media library listing, filtered client-side. A failed fetch is an empty list.
    """
    media, _error = await library.list()
    out = []
    for m in filter_records(media, q):
        mid = normalize_record_id(m.get("id"))
        if mid is None:
            continue
        name = m.get("name") or ""
        size = m.get("size") or 0
        out.append(MediaOut(
            id=mid,
            name=name,
            url=m.get("url") or "",
            type=m.get("type") or "",
            size=size,
            size_label=format_file_size(size),
            is_image=is_image(name),
        ))
    return out


@router.delete("/media/{media_id}", status_code=204, responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}})
async def delete_media(media_id: str, library: MediaLibrary = Depends(get_media_library)):
    res = await library.delete(media_id)
    if res.ok:
        return Response(status_code=204)
    if res.error_code == "HTTP_404":
        raise not_found(res.error_message or "Media not found")
    raise HTTPException(status_code=502, detail={"code": res.error_code or "BACKEND_ERROR", "message": res.error_message or "Failed to delete media file"})
