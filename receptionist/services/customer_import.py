"""Bulk customer import from CSV exports.

Header names are matched case-insensitively with a few common aliases
(``full name``, ``mobile``, ``organization``).  Rows with neither a name nor
an email are skipped.  Every imported customer is a ``Lead`` tagged
``Imported`` so its provenance stays visible in the CRM.
"""

from __future__ import annotations

import csv
import io
import logging

from receptionist.models import Customer, CustomerStatus
from receptionist.storage.store import Collection, DomainStore

logger = logging.getLogger(__name__)

IMPORTED_TAG = "Imported"


def _first(row: dict[str, str], *names: str) -> str:
    for name in names:
        value = (row.get(name) or "").strip()
        if value:
            return value
    return ""


def parse_customers_csv(text: str) -> list[Customer]:
    """Parse CSV *text* into unsaved customer records."""
    reader = csv.DictReader(io.StringIO(text.strip()))
    if reader.fieldnames is None:
        return []
    reader.fieldnames = [h.strip().lower() for h in reader.fieldnames]

    customers: list[Customer] = []
    for row in reader:
        name = _first(row, "name", "full name")
        email = _first(row, "email")
        if not name and not email:
            continue
        customers.append(
            Customer(
                name=name or "Unknown",
                email=email,
                phone=_first(row, "phone", "mobile"),
                company=_first(row, "company", "organization"),
                status=CustomerStatus.LEAD,
                last_contact="Never",
                tags=[IMPORTED_TAG],
            )
        )
    return customers


def import_customers_csv(store: DomainStore, text: str) -> list[Customer]:
    """Parse *text* and prepend the customers to the store.  Returns the new records."""
    customers = parse_customers_csv(text)
    if customers:
        store.extend(Collection.CUSTOMERS, customers)
    logger.info("Imported %d customer(s) from CSV", len(customers))
    return customers
