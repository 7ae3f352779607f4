"""Tests for the orchestrator graph.

Covers:
  - Grounding: the system instruction carries the date and tenant context
  - Plain-text replies pass through verbatim
  - Tool calls are dispatched (first one only) and confirmed
  - Model failures become the fixed apology
"""

from __future__ import annotations

from datetime import date

import pytest
from langgraph.graph import END

from receptionist.agent import (
    APOLOGY_MESSAGE,
    EMPTY_REPLY_MESSAGE,
    ReceptionistOrchestrator,
    create_receptionist,
)
from receptionist.models import SourceKind
from receptionist.prompts import get_system_prompt
from receptionist.services.llm_client import CapabilityError, ModelReply
from receptionist.storage.store import Collection
from receptionist.tools.registry import ToolInvocation, tool_schema


@pytest.fixture
def receptionist(store, mock_capability):
    r = create_receptionist(store, mock_capability, indexing_delay=3600, model_id="claude-test")
    yield r
    r.shutdown()


def _booking_call(**overrides) -> ToolInvocation:
    args = {"customerName": "Jane Doe", "date": "2025-03-10", "time": "14:30"}
    args.update(overrides)
    return ToolInvocation(name="bookAppointment", args=args, id="call_1")


def _sent_kwargs(mock_capability) -> dict:
    args, kwargs = mock_capability.invoke.call_args
    return {"model_id": args[0], "prompt": args[1], **kwargs}


# ── Grounding ────────────────────────────────────────────────────────


class TestGrounding:
    def test_model_receives_query_tools_and_instruction(self, receptionist, mock_capability):
        receptionist.orchestrator.respond("global", "What are your hours?")
        sent = _sent_kwargs(mock_capability)
        assert sent["model_id"] == "claude-test"
        assert sent["prompt"] == "What are your hours?"
        assert sent["tool_schema"] == tool_schema()
        instruction = sent["system_instruction"]
        assert f"Today is {date.today().isoformat()}" in instruction
        assert "bookAppointment" in instruction
        assert "--- BUSINESS DETAILS ---" in instruction

    def test_instruction_uses_requested_tenant(self, receptionist, mock_capability):
        knowledge = receptionist.knowledge
        mine = knowledge.add_source(SourceKind.TEXT, "Tenant A pricing", "A costs 10", tenant_id="A")
        theirs = knowledge.add_source(SourceKind.TEXT, "Tenant B pricing", "B costs 20", tenant_id="B")
        knowledge.mark_ready(mine.id)
        knowledge.mark_ready(theirs.id)

        receptionist.orchestrator.respond("A", "How much?")
        instruction = _sent_kwargs(mock_capability)["system_instruction"]
        assert "A costs 10" in instruction
        assert "B costs 20" not in instruction

    def test_empty_tenant_falls_back_to_default(self, receptionist, mock_capability):
        source = receptionist.knowledge.add_source(SourceKind.NOTE, "Shared", "shared body")
        receptionist.knowledge.mark_ready(source.id)
        receptionist.orchestrator.respond(None, "hi")
        assert "shared body" in _sent_kwargs(mock_capability)["system_instruction"]

    def test_instruction_text(self):
        assert get_system_prompt("CONTEXT", date(2025, 3, 10)) == (
            "You are an AI Receptionist for a business.\n"
            "Today is 2025-03-10.\n"
            "Use the provided BUSINESS CONTEXT to answer questions.\n"
            "If the user wants to book an appointment, use the 'bookAppointment' tool.\n"
            "\n"
            "CONTEXT"
        )


# ── Replies ──────────────────────────────────────────────────────────


class TestReplies:
    def test_plain_text_returned_verbatim(self, receptionist, mock_capability):
        mock_capability.invoke.return_value = ModelReply(text="We open at 9:00 on weekdays.")
        assert receptionist.orchestrator.respond("global", "Hours?") == "We open at 9:00 on weekdays."

    def test_empty_text_gets_placeholder(self, receptionist, mock_capability):
        mock_capability.invoke.return_value = ModelReply(text="")
        assert receptionist.orchestrator.respond("global", "Hours?") == EMPTY_REPLY_MESSAGE

    def test_booking_end_to_end(self, receptionist, mock_capability, store):
        mock_capability.invoke.return_value = ModelReply(tool_calls=[_booking_call()])
        reply = receptionist.orchestrator.respond("global", "Book Jane Doe on March 10 at 2:30pm")

        assert reply.startswith("[System: Action Performed]")
        assert "2025-03-10" in reply
        assert "14:30" in reply
        (appt,) = store.read(Collection.APPOINTMENTS)
        assert appt.customer_id == "c1"

    def test_only_first_tool_call_is_executed(self, receptionist, mock_capability, store):
        mock_capability.invoke.return_value = ModelReply(
            tool_calls=[_booking_call(time="10:00"), _booking_call(time="11:00")],
        )
        reply = receptionist.orchestrator.respond("global", "Book two slots")
        assert "10:00" in reply
        assert [a.time for a in store.read(Collection.APPOINTMENTS)] == ["10:00"]

    def test_tool_call_wins_over_text(self, receptionist, mock_capability):
        mock_capability.invoke.return_value = ModelReply(
            text="Sure, booking that.", tool_calls=[_booking_call()],
        )
        reply = receptionist.orchestrator.respond("global", "Book it")
        assert reply.startswith("[System: Action Performed]")

    def test_failed_action_is_reported(self, receptionist, mock_capability, store):
        mock_capability.invoke.return_value = ModelReply(tool_calls=[_booking_call(date="soon")])
        reply = receptionist.orchestrator.respond("global", "Book it")
        assert reply.startswith("[System: Action Failed]")
        assert store.read(Collection.APPOINTMENTS) == []

    def test_unknown_tool_is_reported_not_raised(self, receptionist, mock_capability):
        mock_capability.invoke.return_value = ModelReply(
            tool_calls=[ToolInvocation(name="cancelEverything", args={})],
        )
        reply = receptionist.orchestrator.respond("global", "Cancel")
        assert reply.startswith("[System: Action Failed]")

    def test_model_called_once_per_request(self, receptionist, mock_capability):
        mock_capability.invoke.return_value = ModelReply(tool_calls=[_booking_call()])
        receptionist.orchestrator.respond("global", "Book it")
        assert mock_capability.invoke.call_count == 1


# ── Failures ─────────────────────────────────────────────────────────


class TestCapabilityFailures:
    @pytest.mark.parametrize(
        "error",
        [CapabilityError("Missing required configuration: ANTHROPIC_API_KEY"), RuntimeError("boom"), TimeoutError()],
    )
    @pytest.mark.parametrize("query", ["What are your hours?", "Book Jane at 14:30 tomorrow"])
    def test_any_failure_returns_apology(self, receptionist, mock_capability, error, query):
        mock_capability.invoke.side_effect = error
        assert receptionist.orchestrator.respond("global", query) == APOLOGY_MESSAGE

    def test_failure_does_not_touch_store(self, receptionist, mock_capability, store):
        mock_capability.invoke.side_effect = RuntimeError("boom")
        receptionist.orchestrator.respond("global", "Book it")
        assert store.read(Collection.APPOINTMENTS) == []


# ── Routing ──────────────────────────────────────────────────────────


class TestShouldDispatch:
    def test_tool_call_routes_to_dispatch(self):
        state = {"tool_call": _booking_call()}
        assert ReceptionistOrchestrator.should_dispatch(state) == "dispatch"

    def test_no_tool_call_routes_to_end(self):
        assert ReceptionistOrchestrator.should_dispatch({"tool_call": None}) == END
        assert ReceptionistOrchestrator.should_dispatch({}) == END


class TestCreateReceptionist:
    def test_initialises_store(self, backend, mock_capability):
        from receptionist.storage.store import DomainStore

        store = DomainStore(backend)
        r = create_receptionist(store, mock_capability, indexing_delay=3600)
        try:
            assert store.read(Collection.PLANS)
            assert store.read(Collection.CUSTOMERS)
        finally:
            r.shutdown()
