"""LangGraph orchestrator for the Nexus AI Receptionist.

Architecture:
  One request runs through a three-node StateGraph:

    1. **ground**   — builds the tenant's grounding context and the system
                      instruction (role, today's date, tool guidance)
    2. **chatbot**  — one call to the model capability with the user query,
                      the tool schema and the system instruction
    3. **dispatch** — executes the first tool call, if any, and turns the
                      ActionResult into the reply

  Routing:
    ground → chatbot → (tool call?)    → dispatch → END
                     → (plain text?)   → END

  Only the first tool call of a reply is executed; any further calls in the
  same reply are dropped and logged.  The tool result is not sent back to the
  model for a second pass.

  The graph is compiled without a checkpointer, so nothing survives between
  requests.  Any model failure becomes :data:`APOLOGY_MESSAGE`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from langgraph.graph import END, StateGraph
from typing_extensions import TypedDict

from receptionist.config import (
    INDEXING_DELAY_SECONDS,
    MODEL_NAME,
    STORE_BACKEND,
    STORE_PATH,
    STORE_S3_BUCKET,
)
from receptionist.knowledge.context import ContextAssembler
from receptionist.knowledge.repository import KnowledgeRepository
from receptionist.models import DEFAULT_TENANT
from receptionist.prompts import get_system_prompt
from receptionist.services.assistant import CrmAssistant
from receptionist.services.llm_client import AnthropicCapability, ModelCapability
from receptionist.storage.backends import create_backend
from receptionist.storage.store import DomainStore
from receptionist.tools.dispatcher import ToolDispatcher
from receptionist.tools.registry import ActionResult, ToolInvocation, tool_schema

logger = logging.getLogger(__name__)

APOLOGY_MESSAGE = "I apologize, but I'm having trouble accessing my systems right now."
EMPTY_REPLY_MESSAGE = "No response generated."


def format_action_result(result: ActionResult) -> str:
    tag = "Action Performed" if result.success else "Action Failed"
    return f"[System: {tag}] {result.message}"


class ReceptionistState(TypedDict, total=False):
    """Per-request state.  Created from the query, discarded with the reply."""

    tenant_id: str
    query: str
    system_prompt: str
    tool_call: ToolInvocation | None
    response: str


class ReceptionistOrchestrator:
    """Answers one user query for one tenant."""

    def __init__(
        self,
        context: ContextAssembler,
        dispatcher: ToolDispatcher,
        capability: ModelCapability,
        *,
        model_id: str = MODEL_NAME,
    ) -> None:
        self._context = context
        self._dispatcher = dispatcher
        self._capability = capability
        self._model_id = model_id
        self._graph = self._build_graph()

    # ── Nodes ────────────────────────────────────────────────────────

    def _ground(self, state: ReceptionistState) -> dict:
        context = self._context.build_context(state["tenant_id"])
        return {"system_prompt": get_system_prompt(context, date.today())}

    def _chatbot(self, state: ReceptionistState) -> dict:
        try:
            reply = self._capability.invoke(
                self._model_id,
                state["query"],
                tool_schema=tool_schema(),
                system_instruction=state["system_prompt"],
            )
        except Exception:
            logger.exception("Model invocation failed for tenant %s", state["tenant_id"])
            return {"response": APOLOGY_MESSAGE, "tool_call": None}

        if reply.tool_calls:
            if len(reply.tool_calls) > 1:
                logger.warning(
                    "Model issued %d tool calls, executing only %s",
                    len(reply.tool_calls), reply.tool_calls[0].name,
                )
            return {"tool_call": reply.tool_calls[0]}
        return {"response": reply.text or EMPTY_REPLY_MESSAGE, "tool_call": None}

    def _dispatch(self, state: ReceptionistState) -> dict:
        result = self._dispatcher.execute(state["tool_call"])
        return {"response": format_action_result(result)}

    @staticmethod
    def should_dispatch(state: ReceptionistState) -> str:
        if state.get("tool_call") is not None:
            return "dispatch"
        return END

    # ── Graph assembly ───────────────────────────────────────────────

    def _build_graph(self):
        graph = StateGraph(ReceptionistState)
        graph.add_node("ground", self._ground)
        graph.add_node("chatbot", self._chatbot)
        graph.add_node("dispatch", self._dispatch)

        graph.set_entry_point("ground")
        graph.add_edge("ground", "chatbot")
        graph.add_conditional_edges(
            "chatbot", self.should_dispatch, {"dispatch": "dispatch", END: END},
        )
        graph.add_edge("dispatch", END)
        return graph.compile()

    def respond(self, tenant_id: str | None, user_query: str) -> str:
        """Answer *user_query* on behalf of *tenant_id* (default tenant if empty)."""
        tenant_id = tenant_id or DEFAULT_TENANT
        result = self._graph.invoke({"tenant_id": tenant_id, "query": user_query})
        return result["response"]


@dataclass
class Receptionist:
    """Every component of the receptionist, wired to one store."""

    store: DomainStore
    knowledge: KnowledgeRepository
    context: ContextAssembler
    dispatcher: ToolDispatcher
    orchestrator: ReceptionistOrchestrator
    assistant: CrmAssistant

    def shutdown(self) -> None:
        self.knowledge.shutdown()


def create_receptionist(
    store: DomainStore | None = None,
    capability: ModelCapability | None = None,
    *,
    indexing_delay: float = INDEXING_DELAY_SECONDS,
    model_id: str = MODEL_NAME,
) -> Receptionist:
    """Build and initialise the receptionist.

    The store is seeded and migrated here, before anything reads from it.
    """
    if store is None:
        store = DomainStore(create_backend(STORE_BACKEND, path=STORE_PATH, bucket=STORE_S3_BUCKET))
    store.initialize()

    knowledge = KnowledgeRepository(store, indexing_delay=indexing_delay)
    context = ContextAssembler(knowledge)
    dispatcher = ToolDispatcher(store)
    capability = capability or AnthropicCapability()
    orchestrator = ReceptionistOrchestrator(context, dispatcher, capability, model_id=model_id)
    assistant = CrmAssistant(capability, model_id=model_id)
    logger.debug("Receptionist ready — model: %s, backend: %s", model_id, STORE_BACKEND)
    return Receptionist(store, knowledge, context, dispatcher, orchestrator, assistant)
