from typing import Literal

from pydantic import BaseModel, Field


RecordIdIn = str | int
# Empty and null ids are accepted here and dropped when the selection is hydrated.
SelectionIn = RecordIdIn | list[RecordIdIn | None] | None


class SelectionDialogOpen(BaseModel):
    mode: Literal["single", "multiple"] = "single"
    current_value: SelectionIn = None


class RelationDialogOpen(SelectionDialogOpen):
    content_type: str = Field(min_length=1, max_length=120, description="API id of the related content type.")


class ToggleIn(BaseModel):
    id: RecordIdIn | None = None


class CandidateRowOut(BaseModel):
    id: str
    label: str
    chosen: bool
    details: list[tuple[str, str]] = Field(default_factory=list)
    url: str | None = None
    size: str | None = None
    is_image: bool | None = None


class SelectedItemOut(BaseModel):
    id: str
    label: str
    loaded: bool
    secondary: str | None = None


class SelectionDialogOut(BaseModel):
    id: str
    kind: Literal["relation", "media"]
    title: str
    mode: Literal["single", "multiple"]
    display_field: str
    query: str
    load_error: str | None
    rows: list[CandidateRowOut]
    selected: list[SelectedItemOut]
    summary: str
    can_confirm: bool


class ConfirmOut(BaseModel):
    value: str | list[str]


class UploadItemOut(BaseModel):
    key: str
    name: str
    size_bytes: int
    size: str
    progress: int
    status: Literal["pending", "uploading", "done", "failed"]
    error: str | None


class NoticeOut(BaseModel):
    level: Literal["info", "error"]
    title: str
    description: str


class UploadSummaryOut(BaseModel):
    success_count: int
    total_count: int
    text: str


class UploadDialogOut(BaseModel):
    id: str
    is_open: bool
    uploading: bool
    items: list[UploadItemOut]
    notices: list[NoticeOut]
    summary: UploadSummaryOut | None


class UploadRunOut(BaseModel):
    summary: UploadSummaryOut | None
    auto_close: bool
    dialog: UploadDialogOut


class MediaOut(BaseModel):
    id: str
    name: str
    url: str
    type: str
    size: int
    size_label: str
    is_image: bool
