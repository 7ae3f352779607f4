"""Domain store: named, newest-first collections of typed records.

Every collection lives under one backend key as a single encoded blob, so a
write always replaces the whole collection.

**Consistency contract**

* Inside one :class:`DomainStore` instance, writes to a collection are
  serialized by a per-collection re-entrant lock.  Read-modify-write helpers
  (``append``, ``update_where``, ``delete_where``) hold it for their whole
  sequence, and callers composing their own sequence use
  :meth:`DomainStore.locked`.
* Separate instances or processes sharing one backend are last-writer-wins.
  There is no optimistic concurrency control.

A blob that fails to decode, or decodes to records that fail schema
validation, reads as an empty collection.  Callers cannot tell "corrupt" from
"absent", and are not meant to.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from enum import StrEnum

from pydantic import BaseModel, TypeAdapter, ValidationError

from receptionist.config import STORE_KEY_PREFIX
from receptionist.models import (
    Appointment,
    BusinessProfile,
    CallLog,
    Customer,
    EmailMessage,
    Job,
    KnowledgeSource,
    PlanTier,
    Task,
    Tenant,
    Worker,
)
from receptionist.services.metrics import metrics
from receptionist.storage import seed
from receptionist.storage.backends import BlobBackend
from receptionist.storage.codec import Codec, DecodeError

logger = logging.getLogger(__name__)


class Collection(StrEnum):
    CUSTOMERS = "customers"
    CALLS = "calls"
    EMAILS = "emails"
    APPOINTMENTS = "appointments"
    TASKS = "tasks"
    JOBS = "jobs"
    WORKERS = "workers"
    TENANTS = "tenants"
    PLANS = "plans"
    KNOWLEDGE_SOURCES = "knowledge_sources"
    PROFILES = "profiles"


RECORD_TYPES: dict[Collection, type[BaseModel]] = {
    Collection.CUSTOMERS: Customer,
    Collection.CALLS: CallLog,
    Collection.EMAILS: EmailMessage,
    Collection.APPOINTMENTS: Appointment,
    Collection.TASKS: Task,
    Collection.JOBS: Job,
    Collection.WORKERS: Worker,
    Collection.TENANTS: Tenant,
    Collection.PLANS: PlanTier,
    Collection.KNOWLEDGE_SOURCES: KnowledgeSource,
    Collection.PROFILES: BusinessProfile,
}

# Collections not listed here are seeded empty.
SEED_DATA: dict[Collection, Sequence[BaseModel]] = {
    Collection.CUSTOMERS: seed.DEMO_CUSTOMERS,
    Collection.CALLS: seed.DEMO_CALLS,
    Collection.EMAILS: seed.DEMO_EMAILS,
    Collection.JOBS: seed.DEMO_JOBS,
    Collection.WORKERS: seed.DEMO_WORKERS,
    Collection.TENANTS: seed.DEMO_TENANTS,
    Collection.PLANS: seed.DEFAULT_PLANS,
}


def by_id(record_id: str) -> Callable[[BaseModel], bool]:
    """Predicate matching the record whose ``id`` is *record_id*."""
    return lambda record: getattr(record, "id", None) == record_id


class DomainStore:
    """Typed collection access over a key/value blob backend."""

    def __init__(
        self,
        backend: BlobBackend,
        *,
        codec: Codec | None = None,
        key_prefix: str = STORE_KEY_PREFIX,
    ) -> None:
        self._backend = backend
        self._codec = codec or Codec()
        self._key_prefix = key_prefix
        self._locks = {name: threading.RLock() for name in Collection}
        self._adapters = {
            name: TypeAdapter(list[model]) for name, model in RECORD_TYPES.items()
        }

    def _key(self, collection: Collection) -> str:
        return f"{self._key_prefix}{collection.value}"

    @contextmanager
    def locked(self, collection: Collection) -> Iterator[None]:
        """Hold the write lock of *collection* for a read-modify-write."""
        with self._locks[collection]:
            yield

    # ── Core operations ──────────────────────────────────────────────

    def read(self, collection: Collection) -> list:
        """Return the decoded records of *collection* (empty if absent/corrupt)."""
        blob = self._backend.get(self._key(collection))
        if blob is None:
            return []
        try:
            return self._decode(collection, blob)
        except DecodeError as exc:
            logger.warning("Store: %s unreadable, treating as empty (%s)", collection, exc)
            metrics.record_decode_failure(collection.value)
            return []

    def write_all(self, collection: Collection, records: Sequence[BaseModel]) -> None:
        """Atomically replace the contents of *collection*."""
        payload = [record.model_dump(mode="json") for record in records]
        blob = self._codec.encode(payload)
        with self._locks[collection]:
            self._backend.set(self._key(collection), blob)
        logger.debug("Store: wrote %d record(s) to %s", len(payload), collection)

    def append(self, collection: Collection, record: BaseModel) -> list:
        """Prepend *record* (newest first) and return the new collection."""
        return self.extend(collection, [record])

    def extend(self, collection: Collection, records: Sequence[BaseModel]) -> list:
        """Prepend *records*, keeping their order, ahead of existing ones."""
        with self._locks[collection]:
            updated = list(records) + self.read(collection)
            self.write_all(collection, updated)
        return updated

    def update_where(
        self,
        collection: Collection,
        predicate: Callable[[BaseModel], bool],
        new_record: BaseModel,
    ) -> bool:
        """Replace every record matching *predicate*.  Returns ``True`` on a hit."""
        with self._locks[collection]:
            current = self.read(collection)
            updated = [new_record if predicate(r) else r for r in current]
            hit = any(predicate(r) for r in current)
            if hit:
                self.write_all(collection, updated)
        return hit

    def delete_where(
        self,
        collection: Collection,
        predicate: Callable[[BaseModel], bool],
    ) -> int:
        """Remove every record matching *predicate*.  Returns count removed."""
        with self._locks[collection]:
            current = self.read(collection)
            kept = [r for r in current if not predicate(r)]
            removed = len(current) - len(kept)
            if removed:
                self.write_all(collection, kept)
        return removed

    # ── First-run initialisation ─────────────────────────────────────

    def initialize(self) -> None:
        """Seed absent collections, then migrate the plan catalogue.

        Seeding only touches keys that are entirely missing, so calling this
        repeatedly is harmless.
        """
        for collection in Collection:
            with self._locks[collection]:
                if self._backend.get(self._key(collection)) is None:
                    self.write_all(collection, SEED_DATA.get(collection, []))
                    logger.info("Store: seeded %s", collection)
        self._migrate_plans()

    def _migrate_plans(self) -> None:
        with self._locks[Collection.PLANS]:
            plans = self.read(Collection.PLANS)
            if not any(p.id == seed.SENTINEL_PLAN_ID for p in plans):
                logger.info("Migrating plans: adding %s", seed.SENTINEL_PLAN_ID)
                self.write_all(Collection.PLANS, seed.DEFAULT_PLANS)

    # ── Internal ─────────────────────────────────────────────────────

    def _decode(self, collection: Collection, blob: str | bytes) -> list:
        value = self._codec.decode(blob)
        try:
            return self._adapters[collection].validate_python(value)
        except ValidationError as exc:
            raise DecodeError(
                f"{collection} failed schema validation ({exc.error_count()} error(s))"
            ) from exc
