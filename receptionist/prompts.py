"""Model instructions and prompt templates."""

from datetime import date

from receptionist.tools.registry import BOOK_APPOINTMENT

SYSTEM_PROMPT_TEMPLATE = """You are an AI Receptionist for a business.
Today is {today}.
Use the provided BUSINESS CONTEXT to answer questions.
If the user wants to book an appointment, use the '{booking_tool}' tool.

{context}"""


def get_system_prompt(context: str, today: date | None = None) -> str:
    """Build the full system instruction with the date and grounding context."""
    today = today or date.today()
    return SYSTEM_PROMPT_TEMPLATE.format(
        today=today.isoformat(),
        booking_tool=BOOK_APPOINTMENT.name,
        context=context,
    )


# ── CRM helpers ──────────────────────────────────────────────────────

ASSISTANT_INSTRUCTION = "You are an AI assistant for a business."

EMAIL_REPLY_TEMPLATE = 'Draft a {tone} email reply to: "{email}"'

NOTES_SUMMARY_TEMPLATE = 'Summarize these notes: "{notes}"'
