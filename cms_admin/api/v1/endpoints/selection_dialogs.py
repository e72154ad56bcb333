from fastapi import APIRouter, Depends, Response

from cms_admin.api.deps import conflict, get_registry, not_found
from cms_admin.schemas.common import ErrorResponse
from cms_admin.schemas.dialogs import (
    CandidateRowOut,
    ConfirmOut,
    RelationDialogOpen,
    SelectedItemOut,
    SelectionDialogOpen,
    SelectionDialogOut,
    ToggleIn,
)
from cms_admin.services.dialogs import DialogRegistry
from cms_admin.services.relation_selector import RelationSelector


router = APIRouter()

ERRORS = {404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}


def _out(dialog_id: str, s: RelationSelector) -> SelectionDialogOut:
    return SelectionDialogOut(
        id=dialog_id,
        kind=s.kind,
        title=s.title,
        mode=s.mode,
        display_field=s.display_field,
        query=s.query,
        load_error=s.load_error,
        rows=[
            CandidateRowOut(id=r.id, label=r.label, chosen=r.chosen, details=r.details, **r.extra)
            for r in s.rows()
        ],
        selected=[SelectedItemOut(id=i.id, label=i.label, loaded=i.loaded, secondary=i.secondary) for i in s.selected_items()],
        summary=s.selection_summary(),
        can_confirm=s.can_confirm,
    )


def _get(registry: DialogRegistry, dialog_id: str, kind: str) -> RelationSelector:
    s = registry.selector(dialog_id, kind)
    if s is None:
        raise not_found(f"No open {kind} dialog {dialog_id}")
    return s


def _view(registry: DialogRegistry, dialog_id: str, kind: str, q: str | None) -> SelectionDialogOut:
    s = _get(registry, dialog_id, kind)
    if q is not None:
        s.search(q)
    return _out(dialog_id, s)


def _toggle(registry: DialogRegistry, dialog_id: str, kind: str, body: ToggleIn) -> SelectionDialogOut:
    s = _get(registry, dialog_id, kind)
    s.toggle(body.id)
    return _out(dialog_id, s)


def _confirm(registry: DialogRegistry, dialog_id: str, kind: str) -> ConfirmOut:
    s = _get(registry, dialog_id, kind)
    value = s.confirm()
    if value is None:
        raise conflict("EMPTY_SELECTION", "Select an item before confirming")
    registry.forget(dialog_id)
    return ConfirmOut(value=value)


def _cancel(registry: DialogRegistry, dialog_id: str, kind: str) -> Response:
    _get(registry, dialog_id, kind).cancel()
    registry.forget(dialog_id)
    return Response(status_code=204)


# --- relation pickers --------------------------------------------------------

@router.post("/relation-dialogs", response_model=SelectionDialogOut, status_code=201)
async def open_relation_dialog(payload: RelationDialogOpen, registry: DialogRegistry = Depends(get_registry)) -> SelectionDialogOut:
    dialog_id, s = await registry.open_relation(
        content_type_id=payload.content_type,
        mode=payload.mode,
        current_value=payload.current_value,
    )
    return _out(dialog_id, s)


@router.get("/relation-dialogs/{dialog_id}", response_model=SelectionDialogOut, responses=ERRORS)
async def view_relation_dialog(dialog_id: str, q: str | None = None, registry: DialogRegistry = Depends(get_registry)):
    return _view(registry, dialog_id, "relation", q)


@router.post("/relation-dialogs/{dialog_id}/toggle", response_model=SelectionDialogOut, responses=ERRORS)
async def toggle_relation(dialog_id: str, body: ToggleIn, registry: DialogRegistry = Depends(get_registry)):
    return _toggle(registry, dialog_id, "relation", body)


@router.post("/relation-dialogs/{dialog_id}/confirm", response_model=ConfirmOut, responses=ERRORS)
async def confirm_relation(dialog_id: str, registry: DialogRegistry = Depends(get_registry)):
    return _confirm(registry, dialog_id, "relation")


@router.post("/relation-dialogs/{dialog_id}/cancel", status_code=204, responses=ERRORS)
async def cancel_relation(dialog_id: str, registry: DialogRegistry = Depends(get_registry)):
    return _cancel(registry, dialog_id, "relation")


# --- media pickers -----------------------------------------------------------

@router.post("/media-dialogs", response_model=SelectionDialogOut, status_code=201)
async def open_media_dialog(payload: SelectionDialogOpen, registry: DialogRegistry = Depends(get_registry)) -> SelectionDialogOut:
    dialog_id, s = await registry.open_media(mode=payload.mode, current_value=payload.current_value)
    return _out(dialog_id, s)


@router.get("/media-dialogs/{dialog_id}", response_model=SelectionDialogOut, responses=ERRORS)
async def view_media_dialog(dialog_id: str, q: str | None = None, registry: DialogRegistry = Depends(get_registry)):
    return _view(registry, dialog_id, "media", q)


@router.post("/media-dialogs/{dialog_id}/toggle", response_model=SelectionDialogOut, responses=ERRORS)
async def toggle_media(dialog_id: str, body: ToggleIn, registry: DialogRegistry = Depends(get_registry)):
    return _toggle(registry, dialog_id, "media", body)


@router.post("/media-dialogs/{dialog_id}/confirm", response_model=ConfirmOut, responses=ERRORS)
async def confirm_media(dialog_id: str, registry: DialogRegistry = Depends(get_registry)):
    return _confirm(registry, dialog_id, "media")


@router.post("/media-dialogs/{dialog_id}/cancel", status_code=204, responses=ERRORS)
async def cancel_media(dialog_id: str, registry: DialogRegistry = Depends(get_registry)):
    return _cancel(registry, dialog_id, "media")
