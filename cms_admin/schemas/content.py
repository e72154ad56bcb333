from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cms_admin.core.ids import normalize_record_id


TEXT_FIELD_TYPES = ("text", "string", "email")


class FieldDef(BaseModel):
    """
    One field of a content type. Unknown keys (required, relationTo, multiple, ...) are kept.
    """
    model_config = ConfigDict(extra="allow")

    name: str
    type: str = "text"


class ContentTypeSchema(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    display_name: str = Field(default="", alias="displayName")
    fields: list[FieldDef] = Field(default_factory=list)

    @field_validator("fields", mode="before")
    @classmethod
    def _drop_malformed_fields(cls, v: Any) -> Any:
        # A field without a usable name can never be a display field.
        if not isinstance(v, list):
            return []
        return [f for f in v if isinstance(f, dict) and isinstance(f.get("name"), str)]


class MediaRecord(BaseModel):
    """
    Stored-file entity returned by GET/POST /api/media.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    name: str = ""
    url: str = ""
    type: str = Field(default="", description="MIME type")
    size_bytes: int = Field(default=0, alias="size")

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, v: Any) -> str:
        rid = normalize_record_id(v)
        if rid is None:
            raise ValueError("media record without id")
        return rid

    def as_record(self) -> dict[str, Any]:
        """
        Plain-record view so media rows go through the same search/display code as entries.
        """
        out = dict(self.model_extra or {})
        out.update({"id": self.id, "name": self.name, "url": self.url, "type": self.type, "size": self.size_bytes})
        return out
