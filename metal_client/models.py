# metal_client/models.py
from __future__ import annotations
from typing import Any, Literal
from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def wire(self, **kwargs: Any) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, **kwargs)


# -------- Index --------
class IndexInput(WireModel):
    index_id: str | None = Field(default=None, alias="indexId")
    id: str | None = None
    image_base64: str | None = Field(default=None, alias="imageBase64")
    image_url: str | None = Field(default=None, alias="imageUrl")
    text: str | None = None
    embedding: list[float] | None = None
    metadata: dict[str, Any] | None = None


class IndexPayload(WireModel):
    index: str
    id: str | None = None
    image_base64: str | None = Field(default=None, alias="imageBase64")
    image_url: str | None = Field(default=None, alias="imageUrl")
    text: str | None = None
    embedding: list[float] | None = None
    metadata: dict[str, Any] | None = None


class BulkIndexPayload(WireModel):
    data: list[IndexPayload]


# -------- Search --------
class Filter(WireModel):
    field: str
    value: str | int | float


class SearchInput(WireModel):
    index_id: str | None = Field(default=None, alias="indexId")
    image_base64: str | None = Field(default=None, alias="imageBase64")
    image_url: str | None = Field(default=None, alias="imageUrl")
    text: str | None = None
    embedding: list[float] | None = None
    filters: list[Filter] | None = None
    ids_only: bool = Field(default=False, alias="idsOnly")
    limit: int = 10


class SearchPayload(WireModel):
    index: str
    image_base64: str | None = Field(default=None, alias="imageBase64")
    image_url: str | None = Field(default=None, alias="imageUrl")
    text: str | None = None
    embedding: list[float] | None = None
    filters: list[Filter] | None = None


# -------- Tuning --------
Label = Literal[-1, 0, 1]


class TuningInput(WireModel):
    index_id: str | None = Field(default=None, alias="indexId")
    id_a: str = Field(alias="idA")
    id_b: str = Field(alias="idB")
    label: Label


class TuningPayload(WireModel):
    index: str
    id_a: str = Field(alias="idA")
    id_b: str = Field(alias="idB")
    label: Label


# -------- Files --------
class FilePayload(WireModel):
    file_name: str = Field(alias="fileName")
    file_type: str = Field(alias="fileType")


class ResourceHandle(BaseModel):
    """Signed, single-use destination for the file bytes."""
    model_config = ConfigDict(extra="allow")

    url: str


# -------- Datasources --------
class MetadataField(WireModel):
    name: str
    type: str
    description: str | None = None


class DatasourceInput(WireModel):
    name: str
    source_type: str | None = Field(default=None, alias="sourcetype")
    auto_extract: bool | None = Field(default=None, alias="autoExtract")
    metadata_fields: list[MetadataField] | None = Field(default=None, alias="metadataFields")


# -------- Data entities --------
class DataEntityInput(WireModel):
    datasource: str
    name: str
    source_type: str | None = Field(default=None, alias="sourcetype")
    metadata: dict[str, Any] | None = None


# -------- Apps --------
class AppInput(WireModel):
    name: str
    indexes: list[str]


# -------- Motorhead --------
class MemoryMessage(BaseModel):
    role: Literal["Human", "AI"]
    content: str


class Memory(BaseModel):
    messages: list[MemoryMessage] = Field(default_factory=list)
    context: str | None = None
