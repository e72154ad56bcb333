from fastapi import APIRouter, Depends, File, Response, UploadFile

from cms_admin.api.deps import conflict, get_registry, not_found
from cms_admin.backends.base import LocalFile
from cms_admin.schemas.common import ErrorResponse
from cms_admin.schemas.dialogs import (
    NoticeOut,
    UploadDialogOut,
    UploadItemOut,
    UploadRunOut,
    UploadSummaryOut,
)
from cms_admin.services.dialogs import DialogRegistry
from cms_admin.services.media_preview import format_file_size
from cms_admin.services.upload_pipeline import UploadSession, UploadSummary


router = APIRouter()

ERRORS = {404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}


def _summary_out(summary: UploadSummary | None) -> UploadSummaryOut | None:
    if summary is None:
        return None
    return UploadSummaryOut(success_count=summary.success_count, total_count=summary.total_count, text=summary.text)


def _out(s: UploadSession) -> UploadDialogOut:
    return UploadDialogOut(
        id=s.id,
        is_open=s.is_open,
        uploading=s.uploading,
        items=[
            UploadItemOut(
                key=i.key,
                name=i.name,
                size_bytes=i.size_bytes,
                size=format_file_size(i.size_bytes),
                progress=i.progress,
                status=i.status,
                error=i.error,
            )
            for i in s.items
        ],
        notices=[NoticeOut(level=n.level, title=n.title, description=n.description) for n in s.notices],
        summary=_summary_out(s.last_summary),
    )


def _get(registry: DialogRegistry, dialog_id: str) -> UploadSession:
    s = registry.upload(dialog_id)
    if s is None:
        raise not_found(f"No open upload dialog {dialog_id}")
    return s


@router.post("/upload-dialogs", response_model=UploadDialogOut, status_code=201)
async def open_upload_dialog(registry: DialogRegistry = Depends(get_registry)) -> UploadDialogOut:
    return _out(registry.open_upload())


@router.get("/upload-dialogs/{dialog_id}", response_model=UploadDialogOut, responses=ERRORS)
async def view_upload_dialog(dialog_id: str, registry: DialogRegistry = Depends(get_registry)):
    return _out(_get(registry, dialog_id))


@router.post("/upload-dialogs/{dialog_id}/files", response_model=UploadDialogOut, responses=ERRORS)
async def add_upload_files(
    dialog_id: str,
    files: list[UploadFile] = File(...),
    registry: DialogRegistry = Depends(get_registry),
):
    s = _get(registry, dialog_id)
    if s.uploading:
        raise conflict("UPLOAD_IN_PROGRESS", "Wait for the current upload to finish")

    local = []
    for f in files:
        local.append(LocalFile(name=f.filename or "untitled", content=await f.read(), mime_type=f.content_type or ""))
    s.add_files(local)
    return _out(s)


@router.delete("/upload-dialogs/{dialog_id}/files/{key}", status_code=204, responses=ERRORS)
async def dismiss_upload_file(dialog_id: str, key: str, registry: DialogRegistry = Depends(get_registry)):
    s = _get(registry, dialog_id)
    if s.uploading:
        raise conflict("UPLOAD_IN_PROGRESS", "Files cannot be removed while uploading")
    if not s.dismiss(key):
        raise not_found(f"No file {key} in dialog {dialog_id}")
    return Response(status_code=204)


@router.post("/upload-dialogs/{dialog_id}/run", response_model=UploadRunOut, responses=ERRORS)
async def run_upload(dialog_id: str, registry: DialogRegistry = Depends(get_registry)):
    s = _get(registry, dialog_id)
    if s.uploading:
        raise conflict("UPLOAD_IN_PROGRESS", "An upload is already running")

    summary = await s.run()
    return UploadRunOut(
        summary=_summary_out(summary),
        auto_close=bool(summary and summary.all_succeeded),
        dialog=_out(s),
    )


@router.post("/upload-dialogs/{dialog_id}/close", status_code=204, responses=ERRORS)
async def close_upload_dialog(dialog_id: str, registry: DialogRegistry = Depends(get_registry)):
    s = _get(registry, dialog_id)
    if not s.close():
        raise conflict("UPLOAD_IN_PROGRESS", "The dialog cannot be closed while uploading")
    return Response(status_code=204)
