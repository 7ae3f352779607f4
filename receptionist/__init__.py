"""Nexus AI Receptionist — a grounded, multi-tenant AI receptionist core.

Architecture Overview
=====================

A request flows leaves-first through six components:

1. **Codec** — reversible (non-cryptographic) obfuscation of stored blobs.
2. **Domain Store** — newest-first typed collections (customers,
   appointments, knowledge sources, profiles, ...) over a key/value backend.
3. **Knowledge Repository** — per-tenant business profiles and knowledge
   sources, with a simulated asynchronous indexing step.
4. **Context Assembler** — renders one tenant's profile and ready sources
   into the grounding document.  Its visibility filter is the system's only
   tenant boundary.
5. **Tool Registry & Dispatcher** — declared actions (``bookAppointment``),
   argument validation and execution against the store.
6. **Orchestrator** — a LangGraph StateGraph: ground → chatbot → dispatch.

Key Design Decisions
--------------------
- **LLM**: Claude via ``langchain_anthropic`` behind a small model-capability
  protocol, so tests and other providers plug in without touching the graph.
- **Single round**: the first tool call is executed and confirmed directly;
  there is no second model pass and no conversation memory.
- **Fail soft**: corrupt collections read as empty, tool problems become
  failed action results, model failures become a fixed apology.
- **Dual Interface**: FastAPI server + CLI chat loop.

Package Structure
-----------------
- ``receptionist/agent.py`` — orchestrator graph and component wiring
- ``receptionist/config.py`` — configuration from environment / SSM
- ``receptionist/models.py`` — pydantic entity schemas
- ``receptionist/prompts.py`` — system instruction
- ``receptionist/storage/`` — codec, backends, domain store, seed data
- ``receptionist/knowledge/`` — repository and context assembler
- ``receptionist/tools/`` — registry, booking action, dispatcher
- ``receptionist/services/`` — model client, metrics, CSV import
- ``receptionist/api/`` — FastAPI routes and schemas
- ``receptionist/server.py`` / ``receptionist/main.py`` — entry points
"""
