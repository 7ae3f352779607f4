"""One-shot model helpers for the CRM: email reply drafts and note summaries.

Both make a single plain call through the same :class:`ModelCapability` the
receptionist uses, with no tools bound.  A failed or empty call returns a
fixed fallback string instead of raising, so the caller can show it as-is.
"""

from __future__ import annotations

import logging

from receptionist.config import MODEL_NAME
from receptionist.prompts import (
    ASSISTANT_INSTRUCTION,
    EMAIL_REPLY_TEMPLATE,
    NOTES_SUMMARY_TEMPLATE,
)
from receptionist.services.llm_client import ModelCapability

logger = logging.getLogger(__name__)

DEFAULT_TONE = "professional"
EMAIL_DRAFT_FALLBACK = "I'm sorry, a reply draft could not be generated right now."
SUMMARY_FALLBACK = "Summary unavailable."


class CrmAssistant:
    """Drafts email replies and summarises customer notes."""

    def __init__(self, capability: ModelCapability, *, model_id: str = MODEL_NAME) -> None:
        self._capability = capability
        self._model_id = model_id

    def _complete(self, prompt: str, fallback: str, system_instruction: str | None) -> str:
        try:
            reply = self._capability.invoke(
                self._model_id, prompt, system_instruction=system_instruction,
            )
        except Exception:
            logger.exception("Assistant call failed")
            return fallback
        return reply.text.strip() or fallback

    def draft_email_reply(self, email_content: str, tone: str = DEFAULT_TONE) -> str:
        prompt = EMAIL_REPLY_TEMPLATE.format(tone=tone.strip() or DEFAULT_TONE, email=email_content)
        return self._complete(prompt, EMAIL_DRAFT_FALLBACK, ASSISTANT_INSTRUCTION)

    def summarize_notes(self, notes: str) -> str:
        if not notes.strip():
            return SUMMARY_FALLBACK
        prompt = NOTES_SUMMARY_TEMPLATE.format(notes=notes)
        return self._complete(prompt, SUMMARY_FALLBACK, None)
