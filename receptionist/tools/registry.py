"""Declarations of the actions the model may call.

``TOOL_REGISTRY`` is the single source of truth: the schema sent to the model
and the dispatcher's lookup table are both derived from it, so the two cannot
drift apart.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

ParamType = Literal["string", "integer", "number", "boolean"]


class ToolParameter(BaseModel):
    name: str
    type: ParamType = "string"
    description: str
    required: bool = False


class ToolDeclaration(BaseModel):
    name: str
    description: str
    parameters: list[ToolParameter]

    @property
    def required(self) -> list[str]:
        return [p.name for p in self.parameters if p.required]

    def to_schema(self) -> dict[str, Any]:
        """Render in the provider tool format accepted by ``bind_tools``."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": {
                "type": "object",
                "properties": {
                    p.name: {"type": p.type, "description": p.description}
                    for p in self.parameters
                },
                "required": self.required,
            },
        }


class ToolInvocation(BaseModel):
    """A call the model issued in place of a text reply."""

    name: str
    args: dict[str, Any] = Field(default_factory=dict)
    id: str | None = None


class ActionResult(BaseModel):
    success: bool
    message: str


BOOK_APPOINTMENT = ToolDeclaration(
    name="bookAppointment",
    description=(
        "Book a new appointment for a customer. Use this when the user "
        "explicitly requests to schedule a meeting or call."
    ),
    parameters=[
        ToolParameter(
            name="customerName",
            description="Name of the customer booking the appointment.",
            required=True,
        ),
        ToolParameter(
            name="date",
            description="Date of the appointment in YYYY-MM-DD format.",
            required=True,
        ),
        ToolParameter(
            name="time",
            description="Time of the appointment in HH:MM format (24hr).",
            required=True,
        ),
        ToolParameter(
            name="type",
            description='Type of appointment: "Phone", "Video", or "In-Person". Defaults to "Video".',
        ),
        ToolParameter(
            name="notes",
            description="Any specific topic or agenda mentioned.",
        ),
    ],
)

TOOL_REGISTRY: dict[str, ToolDeclaration] = {
    BOOK_APPOINTMENT.name: BOOK_APPOINTMENT,
}


def tool_schema() -> list[dict[str, Any]]:
    """Every registered tool in provider format, in registration order."""
    return [decl.to_schema() for decl in TOOL_REGISTRY.values()]
