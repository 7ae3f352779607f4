"""Grounding-context builder for the receptionist model.

The output is plain text: the tenant's business profile followed by every
ready knowledge source that tenant may see.  Given the same store state the
document is byte-for-byte identical, so it is safe to diff or cache
downstream.
"""

from __future__ import annotations

import logging

from receptionist.knowledge.repository import KnowledgeRepository
from receptionist.models import (
    DEFAULT_TENANT,
    BusinessProfile,
    KnowledgeSource,
    SourceKind,
    SourceStatus,
)

logger = logging.getLogger(__name__)

MAX_SOURCE_CHARS = 2000
TRUNCATION_MARKER = "...(truncated)"
NO_SOURCES_PLACEHOLDER = "(No additional documents provided.)"
WEBSITE_NOTE = (
    "(Note: Only use general, publicly available knowledge about this URL. "
    "Do not invent page contents.)"
)


def is_visible_to(source: KnowledgeSource, tenant_id: str) -> bool:
    """Tenant boundary for grounding data.

    This is the only place the system decides which tenant sees which
    knowledge.  A source is visible when it is ready and either belongs to
    *tenant_id*, or is unscoped and *tenant_id* is the default tenant.
    Unscoped sources are never shared with named tenants.
    """
    if source.status != SourceStatus.READY:
        return False
    if source.tenant_id is None:
        return tenant_id == DEFAULT_TENANT
    return source.tenant_id == tenant_id


def render_profile(profile: BusinessProfile) -> str:
    lines = [
        "--- BUSINESS DETAILS ---",
        f"Name: {profile.company_name}",
        f"Industry: {profile.industry}",
        f"Description: {profile.description}",
        f"Address: {profile.address}",
        f"Contact: {profile.phone} | {profile.email}",
        f"Website: {profile.website}",
        "Operating Hours:",
    ]
    for h in profile.hours:
        lines.append(f"  - {h.day}: {'Closed' if h.closed else f'{h.open} to {h.close}'}")
    return "\n".join(lines) + "\n"


def render_source(index: int, source: KnowledgeSource) -> str:
    header = f"[Source {index}: {source.title} ({source.kind})]"
    if source.kind == SourceKind.WEBSITE:
        return f"{header}\nURL: {source.content}\n{WEBSITE_NOTE}\n"
    content = source.content
    if len(content) > MAX_SOURCE_CHARS:
        content = content[:MAX_SOURCE_CHARS] + TRUNCATION_MARKER
    return f"{header}\n{content}\n"


class ContextAssembler:
    def __init__(self, repository: KnowledgeRepository) -> None:
        self._repository = repository

    def build_context(self, tenant_id: str = DEFAULT_TENANT) -> str:
        """Assemble the grounding document for *tenant_id*."""
        profile = self._repository.get_profile(tenant_id)
        sources = [s for s in self._repository.list_sources() if is_visible_to(s, tenant_id)]
        logger.debug("Context for %s: %d source(s)", tenant_id, len(sources))

        parts = [
            "SYSTEM CONTEXT FOR AI RECEPTIONIST:\n",
            render_profile(profile),
            "--- KNOWLEDGE BASE ---",
        ]
        if not sources:
            parts.append(NO_SOURCES_PLACEHOLDER + "\n")
        else:
            parts.extend(render_source(i, s) for i, s in enumerate(sources, start=1))
        return "\n".join(parts)
