"""Tests for the CRM email-draft and note-summary helpers."""

from __future__ import annotations

import pytest

from receptionist.prompts import ASSISTANT_INSTRUCTION
from receptionist.services.assistant import (
    EMAIL_DRAFT_FALLBACK,
    SUMMARY_FALLBACK,
    CrmAssistant,
)
from receptionist.services.llm_client import CapabilityError, ModelReply


@pytest.fixture
def assistant(mock_capability):
    return CrmAssistant(mock_capability, model_id="claude-test")


class TestDraftEmailReply:
    def test_prompt_carries_tone_and_email(self, assistant, mock_capability):
        mock_capability.invoke.return_value = ModelReply(text="Dear Jane, thanks for reaching out.")
        draft = assistant.draft_email_reply("Can I move my viewing?", tone="friendly")

        assert draft == "Dear Jane, thanks for reaching out."
        args, kwargs = mock_capability.invoke.call_args
        assert args == ("claude-test", 'Draft a friendly email reply to: "Can I move my viewing?"')
        assert kwargs["system_instruction"] == ASSISTANT_INSTRUCTION
        assert "tool_schema" not in kwargs

    def test_default_tone_is_professional(self, assistant, mock_capability):
        assistant.draft_email_reply("Hello")
        prompt = mock_capability.invoke.call_args.args[1]
        assert prompt.startswith("Draft a professional email reply")

    @pytest.mark.parametrize("error", [CapabilityError("no key"), RuntimeError("boom")])
    def test_failure_returns_fallback(self, assistant, mock_capability, error):
        mock_capability.invoke.side_effect = error
        assert assistant.draft_email_reply("Hello") == EMAIL_DRAFT_FALLBACK

    def test_empty_reply_returns_fallback(self, assistant, mock_capability):
        mock_capability.invoke.return_value = ModelReply(text="  ")
        assert assistant.draft_email_reply("Hello") == EMAIL_DRAFT_FALLBACK


class TestSummarizeNotes:
    def test_summary_returned(self, assistant, mock_capability):
        mock_capability.invoke.return_value = ModelReply(text="Wants a 3-bed in Leeds.")
        assert assistant.summarize_notes("Called twice. Looking for 3-bed, Leeds.") == "Wants a 3-bed in Leeds."
        prompt = mock_capability.invoke.call_args.args[1]
        assert prompt == 'Summarize these notes: "Called twice. Looking for 3-bed, Leeds."'

    def test_failure_returns_fallback(self, assistant, mock_capability):
        mock_capability.invoke.side_effect = TimeoutError()
        assert assistant.summarize_notes("some notes") == SUMMARY_FALLBACK

    def test_blank_notes_skip_the_model(self, assistant, mock_capability):
        assert assistant.summarize_notes("   ") == SUMMARY_FALLBACK
        mock_capability.invoke.assert_not_called()
