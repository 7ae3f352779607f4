"""Pydantic schemas for the FastAPI endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from receptionist.models import DEFAULT_TENANT, SourceKind


class ChatRequest(BaseModel):
    """Incoming receptionist query."""

    message: str = Field(..., min_length=1, max_length=2000, description="The user's message")
    tenant_id: str = Field(
        DEFAULT_TENANT,
        min_length=1,
        max_length=100,
        description="Tenant whose profile and knowledge ground the answer",
    )


class ChatResponse(BaseModel):
    reply: str = Field(..., description="The receptionist's response")
    tenant_id: str


class SourceCreateRequest(BaseModel):
    kind: SourceKind
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    file_name: str | None = None
    tenant_id: str | None = Field(
        None, description="Owning tenant; omit for an unscoped default-tenant source",
    )


class ImportRequest(BaseModel):
    csv: str = Field(..., min_length=1, description="CSV export with a header row")


class ImportResponse(BaseModel):
    imported: int


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "nexus-receptionist"


class EmailDraftRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=20000, description="The email being replied to")
    tone: str = Field("professional", max_length=50, description="e.g. professional, friendly, formal")


class EmailDraftResponse(BaseModel):
    draft: str


class NotesSummaryRequest(BaseModel):
    notes: str = Field(..., min_length=1, max_length=20000)


class NotesSummaryResponse(BaseModel):
    summary: str
