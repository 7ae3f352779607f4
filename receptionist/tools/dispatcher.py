"""Routes model-issued tool calls to their handlers.

:meth:`ToolDispatcher.execute` never raises.  Unknown tools, missing or
mistyped arguments, and handler crashes all come back as a failed
:class:`ActionResult` the orchestrator can report.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from receptionist.services.metrics import metrics
from receptionist.storage.store import DomainStore
from receptionist.tools.booking import ToolValidationError, book_appointment
from receptionist.tools.registry import (
    TOOL_REGISTRY,
    ActionResult,
    ToolDeclaration,
    ToolInvocation,
)

logger = logging.getLogger(__name__)

Handler = Callable[[DomainStore, dict[str, Any]], ActionResult]

HANDLERS: dict[str, Handler] = {
    "bookAppointment": book_appointment,
}

_PY_TYPES: dict[str, type | tuple[type, ...]] = {
    "string": str,
    "integer": int,
    "number": (int, float),
    "boolean": bool,
}


def validate_args(declaration: ToolDeclaration, args: dict[str, Any]) -> list[str]:
    """Return a list of problems with *args*; empty when they satisfy the schema."""
    problems: list[str] = []
    for param in declaration.parameters:
        value = args.get(param.name)
        if value is None or (isinstance(value, str) and not value.strip()):
            if param.required:
                problems.append(f"missing required argument '{param.name}'")
            continue
        expected = _PY_TYPES[param.type]
        # bool is an int subclass; don't let True pass as a number
        if not isinstance(value, expected) or (
            isinstance(value, bool) and param.type != "boolean"
        ):
            problems.append(f"argument '{param.name}' must be a {param.type}")
    return problems


class ToolDispatcher:
    def __init__(
        self,
        store: DomainStore,
        *,
        registry: dict[str, ToolDeclaration] | None = None,
        handlers: dict[str, Handler] | None = None,
    ) -> None:
        self._store = store
        self._registry = TOOL_REGISTRY if registry is None else registry
        self._handlers = HANDLERS if handlers is None else handlers

    def execute(self, invocation: ToolInvocation) -> ActionResult:
        result = self._execute(invocation)
        metrics.record_tool_execution(invocation.name, result.success)
        return result

    def _execute(self, invocation: ToolInvocation) -> ActionResult:
        declaration = self._registry.get(invocation.name)
        handler = self._handlers.get(invocation.name)
        if declaration is None or handler is None:
            # The model was offered only registered tools, so this means the
            # schema and the registry have drifted.
            logger.warning("Model called unregistered tool %r", invocation.name)
            return ActionResult(success=False, message=f"Function not found: {invocation.name}")

        problems = validate_args(declaration, invocation.args)
        if problems:
            logger.info("Rejected %s call: %s", invocation.name, "; ".join(problems))
            return ActionResult(
                success=False,
                message=f"Invalid arguments for {invocation.name}: {'; '.join(problems)}.",
            )

        logger.debug("Executing %s with %s", invocation.name, invocation.args)
        try:
            return handler(self._store, invocation.args)
        except ToolValidationError as e:
            logger.info("Rejected %s call: %s", invocation.name, e)
            return ActionResult(success=False, message=str(e))
        except Exception as e:
            logger.exception("Tool %s failed", invocation.name)
            return ActionResult(
                success=False,
                message=f"Sorry, {invocation.name} could not be completed ({type(e).__name__}).",
            )
