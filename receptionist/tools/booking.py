"""The ``bookAppointment`` action.

Writes straight into the appointments collection.  An unknown customer name
does not fail the booking: the appointment is stored against the guest
reference and can be linked up later from the CRM.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any

from receptionist.models import (
    GUEST_CUSTOMER_ID,
    Appointment,
    AppointmentStatus,
    AppointmentType,
    Customer,
)
from receptionist.storage.store import Collection, DomainStore
from receptionist.tools.registry import ActionResult

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 30
AUTOMATED_NOTE = "Booked via AI Receptionist"

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class ToolValidationError(ValueError):
    """An argument is present but unusable (bad date, bad time, bad enum)."""


def _validate_date(value: str) -> str:
    # fromisoformat alone also accepts week dates ("2025-W10-1") and "20250310".
    if not _DATE_RE.fullmatch(value):
        raise ToolValidationError(f'"{value}" is not a valid date. Use YYYY-MM-DD.')
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise ToolValidationError(
            f'"{value}" is not a valid date. Use YYYY-MM-DD.'
        ) from exc
    return value


def _validate_time(value: str) -> str:
    if not _TIME_RE.match(value):
        raise ToolValidationError(f'"{value}" is not a valid time. Use 24-hour HH:MM.')
    return value


def _validate_type(value: str | None) -> AppointmentType:
    if not value:
        return AppointmentType.VIDEO
    try:
        return AppointmentType(value)
    except ValueError as exc:
        allowed = ", ".join(t.value for t in AppointmentType)
        raise ToolValidationError(
            f'"{value}" is not a valid appointment type. Use one of: {allowed}.'
        ) from exc


def find_customer(customers: list[Customer], name: str) -> Customer | None:
    """First customer whose name contains *name*, case-insensitively."""
    needle = name.strip().lower()
    if not needle:
        return None
    return next((c for c in customers if needle in c.name.lower()), None)


def book_appointment(store: DomainStore, args: dict[str, Any]) -> ActionResult:
    customer_name = args["customerName"].strip()
    appt_date = _validate_date(args["date"].strip())
    appt_time = _validate_time(args["time"].strip())
    appt_type = _validate_type(args.get("type"))
    notes = (args.get("notes") or "").strip()

    customer = find_customer(store.read(Collection.CUSTOMERS), customer_name)
    if customer is None:
        logger.info("No customer matches %r, booking as guest", customer_name)

    appointment = Appointment(
        customer_id=customer.id if customer else GUEST_CUSTOMER_ID,
        customer_name=customer_name,
        title=f"Meeting: {notes}" if notes else "Consultation",
        date=appt_date,
        time=appt_time,
        duration=DEFAULT_DURATION_MINUTES,
        type=appt_type,
        status=AppointmentStatus.SCHEDULED,
        notes=notes or AUTOMATED_NOTE,
    )
    store.append(Collection.APPOINTMENTS, appointment)
    logger.info(
        "Booked appointment %s for %s on %s at %s",
        appointment.id, appointment.customer_id, appt_date, appt_time,
    )
    return ActionResult(
        success=True,
        message=f"Appointment confirmed for {appt_date} at {appt_time}.",
    )
