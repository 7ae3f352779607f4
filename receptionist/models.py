"""Pydantic schemas for every entity persisted in the domain store.

Records are decoded from the store and validated against these models, so a
blob that decodes to the wrong shape is treated the same as a corrupt blob.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TENANT = "global"

WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def generate_id() -> str:
    """Return a random record id.

    Unique enough for a single business' dataset; not a security token.
    """
    return uuid.uuid4().hex[:12]


def timestamp() -> str:
    """Human-readable 'last updated' stamp, e.g. ``19 Oct 2026 14:05``."""
    return datetime.now().strftime("%d %b %Y %H:%M")


class Record(BaseModel):
    """Base for stored entities: tolerant of extra keys written by older builds."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=generate_id)


# ── CRM ──────────────────────────────────────────────────────────────


class CustomerStatus(StrEnum):
    LEAD = "Lead"
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class Customer(Record):
    name: str
    email: str = ""
    phone: str = ""
    company: str = ""
    status: CustomerStatus = CustomerStatus.LEAD
    last_contact: str = "Never"
    tags: list[str] = Field(default_factory=list)


class CallLog(Record):
    customer_id: str
    caller_name: str = ""
    date: str = ""
    duration: str = ""
    summary: str = ""
    sentiment: str = "Neutral"


class EmailMessage(Record):
    sender: str
    email: str = ""
    subject: str = ""
    preview: str = ""
    content: str = ""
    date: str = ""
    read: bool = False


class AppointmentStatus(StrEnum):
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class AppointmentType(StrEnum):
    PHONE = "Phone"
    VIDEO = "Video"
    IN_PERSON = "In-Person"


GUEST_CUSTOMER_ID = "guest"


class Appointment(Record):
    customer_id: str = GUEST_CUSTOMER_ID
    customer_name: str
    title: str = "Consultation"
    date: str
    time: str
    duration: int = 30
    type: AppointmentType = AppointmentType.VIDEO
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: str = ""


class Task(Record):
    title: str
    due_date: str = ""
    completed: bool = False
    customer_id: str | None = None


# ── Field operations ─────────────────────────────────────────────────


class Worker(Record):
    name: str
    phone: str = ""
    role: str = ""
    status: Literal["Available", "Busy", "Off Duty"] = "Available"


class Job(Record):
    title: str
    customer_name: str = ""
    address: str = ""
    status: Literal["Pending", "Assigned", "In Progress", "Completed"] = "Pending"
    assigned_worker_id: str | None = None
    scheduled_date: str = ""


# ── SaaS administration ──────────────────────────────────────────────


class Tenant(Record):
    business_name: str
    owner_name: str = ""
    email: str = ""
    plan: str = "Pro Bundle"
    status: Literal["Active", "Suspended", "Cancelled"] = "Active"
    joined_date: str = ""
    mrr: float = 0
    billing_cycle: Literal["weekly", "monthly"] = "weekly"


class PlanFeature(BaseModel):
    text: str
    included: bool


class PlanTier(Record):
    name: str
    price: float
    period: Literal["week", "month"] = "week"
    description: str = ""
    highlight: bool = False
    features: list[PlanFeature] = Field(default_factory=list)


# ── Knowledge ────────────────────────────────────────────────────────


class BusinessHours(BaseModel):
    day: str
    open: str = "09:00"
    close: str = "17:00"
    closed: bool = False


def default_hours() -> list[BusinessHours]:
    """Mon–Fri 09–17, Saturday 10–14, Sunday closed."""
    hours = [BusinessHours(day=day) for day in WEEKDAYS[:5]]
    hours.append(BusinessHours(day="Saturday", open="10:00", close="14:00"))
    hours.append(BusinessHours(day="Sunday", open="00:00", close="00:00", closed=True))
    return hours


class BusinessProfile(BaseModel):
    """Structured identity of a tenant's business.

    ``tenant_id`` keys the record inside the ``profiles`` collection.
    ``hours`` always holds one entry per weekday, in Monday-first order.
    """

    model_config = ConfigDict(extra="ignore")

    tenant_id: str = DEFAULT_TENANT
    company_name: str = "My Business"
    industry: str = "General"
    description: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    hours: list[BusinessHours] = Field(default_factory=default_hours)

    @field_validator("hours")
    @classmethod
    def _one_entry_per_weekday(cls, hours: list[BusinessHours]) -> list[BusinessHours]:
        days = [h.day for h in hours]
        if sorted(days) != sorted(WEEKDAYS):
            raise ValueError("hours must contain exactly one entry per weekday")
        return sorted(hours, key=lambda h: WEEKDAYS.index(h.day))


class SourceKind(StrEnum):
    TEXT = "text"
    NOTE = "note"
    WEBSITE = "website"


class SourceStatus(StrEnum):
    PROCESSING = "processing"
    READY = "ready"


class KnowledgeSource(Record):
    kind: SourceKind
    title: str
    content: str
    file_name: str | None = None
    tenant_id: str | None = None
    status: SourceStatus = SourceStatus.PROCESSING
    last_updated: str = Field(default_factory=timestamp)
