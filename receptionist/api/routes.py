"""FastAPI route definitions for the receptionist API."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request

from receptionist.agent import Receptionist
from receptionist.api.schemas import (
    ChatRequest,
    ChatResponse,
    EmailDraftRequest,
    EmailDraftResponse,
    HealthResponse,
    ImportRequest,
    ImportResponse,
    NotesSummaryRequest,
    NotesSummaryResponse,
    SourceCreateRequest,
)
from receptionist.models import BusinessProfile, KnowledgeSource
from receptionist.services.customer_import import import_customers_csv

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_receptionist(request: Request) -> Receptionist:
    """Retrieve the receptionist built during the FastAPI lifespan."""
    receptionist = getattr(request.app.state, "receptionist", None)
    if receptionist is None:
        raise HTTPException(
            status_code=503,
            detail="The receptionist is still starting up. Please try again in a moment.",
        )
    return receptionist


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse()


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, http_request: Request):
    """Answer one message for one tenant.

    ``respond`` blocks on the model call, so it runs in the default
    thread-pool to keep the event loop free.  Model failures are already
    turned into an apology by the orchestrator; anything reaching the
    ``except`` here is unexpected.
    """
    receptionist = _get_receptionist(http_request)
    request_id = getattr(http_request.state, "request_id", "?")

    try:
        reply = await asyncio.to_thread(
            receptionist.orchestrator.respond, request.tenant_id, request.message,
        )
        return ChatResponse(reply=reply, tenant_id=request.tenant_id)
    except Exception as e:
        logger.exception("[%s] Error processing chat request", request_id)
        raise HTTPException(
            status_code=500,
            detail="An internal error occurred. Please try again.",
        ) from e


# ── Knowledge administration ─────────────────────────────────────────
#
# Store calls block on backend I/O and collection locks, so every handler
# below runs them in the thread-pool like ``/chat`` does.


@router.get("/knowledge/sources", response_model=list[KnowledgeSource])
async def list_sources(http_request: Request):
    knowledge = _get_receptionist(http_request).knowledge
    return await asyncio.to_thread(knowledge.list_sources)


@router.post("/knowledge/sources", response_model=KnowledgeSource, status_code=201)
async def add_source(request: SourceCreateRequest, http_request: Request):
    knowledge = _get_receptionist(http_request).knowledge
    return await asyncio.to_thread(
        knowledge.add_source,
        request.kind,
        request.title,
        request.content,
        file_name=request.file_name,
        tenant_id=request.tenant_id,
    )


@router.delete("/knowledge/sources/{source_id}", status_code=204)
async def delete_source(source_id: str, http_request: Request):
    knowledge = _get_receptionist(http_request).knowledge
    if not await asyncio.to_thread(knowledge.delete_source, source_id):
        raise HTTPException(status_code=404, detail=f"Source {source_id} not found.")


@router.get("/knowledge/profiles/{tenant_id}", response_model=BusinessProfile)
async def get_profile(tenant_id: str, http_request: Request):
    knowledge = _get_receptionist(http_request).knowledge
    return await asyncio.to_thread(knowledge.get_profile, tenant_id)


@router.put("/knowledge/profiles/{tenant_id}", response_model=BusinessProfile)
async def save_profile(tenant_id: str, profile: BusinessProfile, http_request: Request):
    knowledge = _get_receptionist(http_request).knowledge
    return await asyncio.to_thread(knowledge.save_profile, profile, tenant_id)


# ── CRM ──────────────────────────────────────────────────────────────


@router.post("/customers/import", response_model=ImportResponse)
async def import_customers(request: ImportRequest, http_request: Request):
    receptionist = _get_receptionist(http_request)
    customers = await asyncio.to_thread(import_customers_csv, receptionist.store, request.csv)
    return ImportResponse(imported=len(customers))


@router.post("/customers/summarize-notes", response_model=NotesSummaryResponse)
async def summarize_notes(request: NotesSummaryRequest, http_request: Request):
    assistant = _get_receptionist(http_request).assistant
    summary = await asyncio.to_thread(assistant.summarize_notes, request.notes)
    return NotesSummaryResponse(summary=summary)


@router.post("/emails/draft-reply", response_model=EmailDraftResponse)
async def draft_email_reply(request: EmailDraftRequest, http_request: Request):
    assistant = _get_receptionist(http_request).assistant
    draft = await asyncio.to_thread(assistant.draft_email_reply, request.email, request.tone)
    return EmailDraftResponse(draft=draft)
