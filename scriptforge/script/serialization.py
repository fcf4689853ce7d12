"""
ScriptForge Document Serialization

Wire schema for persisted documents and revision snapshot content.

A document is stored as its ordered line records (id, type, text, meta)
plus settings and title page. Field names on the wire use the camelCase
spelling of existing records (``manualType``, ``dualId``, ``titlePage``);
both spellings are accepted on input. Unknown top-level keys are carried
through untouched so a load/save cycle never drops data.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from scriptforge.core.constants import DEFAULT_TITLE, DualPosition, ElementType, ScriptMode
from scriptforge.core.exceptions import SerializationError
from scriptforge.core.logging_config import get_logger
from scriptforge.script.document import Line, LineMeta, ScriptDocument

logger = get_logger("script.serialization")


class LineMetaPayload(BaseModel):
    """Per-line metadata as stored."""
    model_config = ConfigDict(populate_by_name=True)

    manual_type: bool = Field(default=False, alias="manualType")
    dual_id: Optional[str] = Field(default=None, alias="dualId")
    dual_position: Optional[DualPosition] = Field(default=None, alias="dualPosition")
    revision_color: Optional[str] = Field(default=None, alias="revisionColor")
    revision_timestamp: Optional[datetime] = Field(default=None, alias="revisionTimestamp")

    @classmethod
    def from_meta(cls, meta: LineMeta) -> "LineMetaPayload":
        return cls(
            manual_type=meta.manual_type,
            dual_id=meta.dual_id,
            dual_position=meta.dual_position,
            revision_color=meta.revision_color,
            revision_timestamp=meta.revision_timestamp,
        )

    def to_meta(self) -> LineMeta:
        return LineMeta(
            manual_type=self.manual_type,
            dual_id=self.dual_id,
            dual_position=self.dual_position,
            revision_color=self.revision_color,
            revision_timestamp=self.revision_timestamp,
        )


class LinePayload(BaseModel):
    """A single line record."""
    id: str
    type: ElementType = ElementType.ACTION
    text: str = ""
    meta: LineMetaPayload = Field(default_factory=LineMetaPayload)

    @classmethod
    def from_line(cls, line: Line) -> "LinePayload":
        return cls(id=line.id, type=line.type, text=line.text, meta=LineMetaPayload.from_meta(line.meta))

    def to_line(self) -> Line:
        return Line(id=self.id, type=self.type, text=self.text, meta=self.meta.to_meta())


class DocumentPayload(BaseModel):
    """A whole document as stored in snapshots and persistence records."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = None
    title: str = DEFAULT_TITLE
    mode: ScriptMode = ScriptMode.FILM_TV
    lines: List[LinePayload] = Field(default_factory=list)
    settings: Dict[str, Any] = Field(default_factory=dict)
    title_page: Dict[str, Any] = Field(default_factory=dict, alias="titlePage")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


def document_to_payload(document: ScriptDocument) -> DocumentPayload:
    return DocumentPayload(
        id=document.id,
        title=document.title,
        mode=document.mode,
        lines=[LinePayload.from_line(line) for line in document.lines],
        settings=document.settings,
        title_page=document.title_page,
        updated_at=document.updated_at,
        **document.extra,
    )


def document_from_payload(payload: DocumentPayload) -> ScriptDocument:
    try:
        document = ScriptDocument(
            lines=[line.to_line() for line in payload.lines],
            title=payload.title,
            mode=payload.mode,
            settings=payload.settings,
            title_page=payload.title_page,
            document_id=payload.id,
            extra=dict(payload.model_extra or {}),
        )
    except ValueError as e:
        raise SerializationError(f"Invalid document content: {e}")
    if payload.updated_at is not None:
        document.updated_at = payload.updated_at
    return document


def document_to_dict(document: ScriptDocument) -> Dict[str, Any]:
    """JSON-compatible dict in the stored (camelCase) shape."""
    return document_to_payload(document).model_dump(mode="json", by_alias=True)


def document_from_dict(data: Dict[str, Any]) -> ScriptDocument:
    """
    Rebuild a document from its stored dict.

    Raises:
        SerializationError: If the data doesn't match the schema
    """
    try:
        payload = DocumentPayload.model_validate(data)
    except ValidationError as e:
        raise SerializationError("Document content failed validation", {"errors": e.errors()})
    return document_from_payload(payload)


def serialize_document(document: ScriptDocument) -> str:
    """Serialize a document to the JSON string stored in snapshots."""
    return document_to_payload(document).model_dump_json(by_alias=True)


def deserialize_document(content: str) -> ScriptDocument:
    """
    Load a document from snapshot content.

    Raises:
        SerializationError: If the content isn't valid JSON or doesn't match the schema
    """
    try:
        data = json.loads(content)
    except (TypeError, json.JSONDecodeError) as e:
        raise SerializationError(f"Snapshot content is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise SerializationError("Snapshot content must be a JSON object")
    return document_from_dict(data)


def content_to_plain_text(content: str) -> str:
    """Line texts of serialized content joined by newlines, for diffing and download."""
    return deserialize_document(content).to_plain_text()
