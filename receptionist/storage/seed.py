"""First-run demo data and the default plan catalogue."""

from __future__ import annotations

from receptionist.models import (
    CallLog,
    Customer,
    CustomerStatus,
    EmailMessage,
    Job,
    PlanFeature,
    PlanTier,
    Tenant,
    Worker,
)

# Plan migration keys off this tier: deployments seeded before it existed get
# the whole catalogue rewritten.
SENTINEL_PLAN_ID = "Business Elite"


def _features(*pairs: tuple[str, bool]) -> list[PlanFeature]:
    return [PlanFeature(text=text, included=included) for text, included in pairs]


DEFAULT_PLANS: list[PlanTier] = [
    PlanTier(
        id="Email Only",
        name="Email Only",
        price=100,
        description="Perfect for businesses that just need to automate their inbox.",
        features=_features(
            ("AI Email Drafts", True),
            ("Smart Templates", True),
            ("Email Analytics", True),
            ("CRM Integration", True),
            ("AI Receptionist", False),
            ("Call Recording", False),
        ),
    ),
    PlanTier(
        id="Receptionist Only",
        name="Receptionist Only",
        price=400,
        description="Automate your phone lines with a human-like AI voice agent.",
        features=_features(
            ("AI Voice Receptionist", True),
            ("24/7 Call Handling", True),
            ("Call Recording & Transcripts", True),
            ("Appointment Booking", True),
            ("AI Email Drafts", False),
        ),
    ),
    PlanTier(
        id="Pro Bundle",
        name="Pro Bundle",
        price=500,
        description="The complete package. Automate everything and save time.",
        features=_features(
            ("AI Voice Receptionist", True),
            ("AI Email Automation", True),
            ("Unified CRM Dashboard", True),
            ("Advanced Analytics", True),
            ("Job Allocation", False),
        ),
    ),
    PlanTier(
        id=SENTINEL_PLAN_ID,
        name="Business Elite",
        price=700,
        description="The ultimate power suite. Includes AI Field Operations & Dispatch.",
        highlight=True,
        features=_features(
            ("Everything in Pro Bundle", True),
            ("Job Allocation & Dispatch", True),
            ("Worker Management", True),
            ("SMS Job Alerts", True),
            ("Dedicated Account Manager", True),
        ),
    ),
]

DEMO_CUSTOMERS: list[Customer] = [
    Customer(
        id="c1",
        name="Jane Doe Realty",
        email="jane@doerealty.com",
        phone="555-0101",
        company="Doe Realty",
        status=CustomerStatus.ACTIVE,
        last_contact="2 days ago",
        tags=["VIP"],
    ),
    Customer(
        id="c2",
        name="Marcus Webb",
        email="marcus@webbplumbing.com",
        phone="555-0144",
        company="Webb Plumbing",
        status=CustomerStatus.LEAD,
        tags=["Referral"],
    ),
]

DEMO_CALLS: list[CallLog] = [
    CallLog(
        id="call1",
        customer_id="c1",
        caller_name="Jane Doe",
        date="Today, 09:12",
        duration="3m 40s",
        summary="Asked about weekend availability for a property viewing.",
        sentiment="Positive",
    ),
]

DEMO_EMAILS: list[EmailMessage] = [
    EmailMessage(
        id="e1",
        sender="Marcus Webb",
        email="marcus@webbplumbing.com",
        subject="Quote request",
        preview="Hi, could you send over a quote for...",
        content="Hi, could you send over a quote for the quarterly maintenance plan?",
        date="Yesterday",
    ),
]

DEMO_WORKERS: list[Worker] = [
    Worker(id="w1", name="Sam Ortiz", phone="555-0190", role="Technician"),
]

DEMO_JOBS: list[Job] = [
    Job(
        id="j1",
        title="Boiler inspection",
        customer_name="Marcus Webb",
        address="12 Harbour Rd",
        scheduled_date="2026-10-21",
    ),
]

DEMO_TENANTS: list[Tenant] = [
    Tenant(
        id="t1",
        business_name="Acme Supplies",
        owner_name="John Doe",
        email="john@acme.com",
        plan="Pro Bundle",
        joined_date="Jan 15, 2023",
        mrr=2000,
    ),
]
