"""Per-tenant business profiles and knowledge sources.

New sources start in ``processing`` and flip to ``ready`` once a simulated
indexing delay has elapsed.  The flip runs on a :class:`threading.Timer`
keyed by source id:

* ``delete_source`` cancels the pending timer;
* if the timer fires anyway (cancel raced with expiry), :meth:`mark_ready`
  re-checks existence under the collection lock and does nothing for a
  source that is gone.

So a deleted source is never resurrected and the transition is applied at
most once.
"""

from __future__ import annotations

import logging
import threading

from receptionist.config import INDEXING_DELAY_SECONDS
from receptionist.models import (
    DEFAULT_TENANT,
    BusinessProfile,
    KnowledgeSource,
    SourceKind,
    SourceStatus,
    timestamp,
)
from receptionist.storage.store import Collection, DomainStore, by_id

logger = logging.getLogger(__name__)


class KnowledgeRepository:
    """Grounding data administration on top of the domain store."""

    def __init__(
        self,
        store: DomainStore,
        *,
        indexing_delay: float = INDEXING_DELAY_SECONDS,
    ) -> None:
        self._store = store
        self._indexing_delay = indexing_delay
        self._pending: dict[str, threading.Timer] = {}
        self._pending_lock = threading.Lock()

    # ── Profiles ─────────────────────────────────────────────────────

    def get_profile(self, tenant_id: str = DEFAULT_TENANT) -> BusinessProfile:
        """Return the tenant's profile, or the default template if none is stored."""
        for profile in self._store.read(Collection.PROFILES):
            if profile.tenant_id == tenant_id:
                return profile
        return BusinessProfile(tenant_id=tenant_id)

    def save_profile(
        self, profile: BusinessProfile, tenant_id: str = DEFAULT_TENANT,
    ) -> BusinessProfile:
        """Insert or replace the profile stored for *tenant_id*."""
        profile = profile.model_copy(update={"tenant_id": tenant_id})
        with self._store.locked(Collection.PROFILES):
            replaced = self._store.update_where(
                Collection.PROFILES, lambda p: p.tenant_id == tenant_id, profile,
            )
            if not replaced:
                self._store.append(Collection.PROFILES, profile)
        logger.info("Saved business profile for tenant %s", tenant_id)
        return profile

    # ── Sources ──────────────────────────────────────────────────────

    def list_sources(self) -> list[KnowledgeSource]:
        """All sources across tenants, newest first."""
        return self._store.read(Collection.KNOWLEDGE_SOURCES)

    def add_source(
        self,
        kind: SourceKind | str,
        title: str,
        content: str,
        file_name: str | None = None,
        tenant_id: str | None = None,
    ) -> KnowledgeSource:
        """Store a new source in ``processing`` and schedule its indexing."""
        source = KnowledgeSource(
            kind=SourceKind(kind),
            title=title,
            content=content,
            file_name=file_name,
            tenant_id=tenant_id,
        )
        self._store.append(Collection.KNOWLEDGE_SOURCES, source)
        self._schedule_indexing(source.id)
        logger.info(
            "Added %s source %s (%r) for tenant %s",
            source.kind, source.id, title, tenant_id or "<unscoped>",
        )
        return source

    def delete_source(self, source_id: str) -> bool:
        """Remove a source and cancel its pending indexing.  ``True`` if it existed."""
        with self._pending_lock:
            timer = self._pending.pop(source_id, None)
        if timer is not None:
            timer.cancel()
        removed = self._store.delete_where(Collection.KNOWLEDGE_SOURCES, by_id(source_id))
        return removed > 0

    def mark_ready(self, source_id: str) -> bool:
        """Apply the ``processing`` → ``ready`` transition.

        Returns ``False`` (and changes nothing) when the source no longer
        exists or was already ready.
        """
        with self._pending_lock:
            self._pending.pop(source_id, None)
        with self._store.locked(Collection.KNOWLEDGE_SOURCES):
            current = next(
                (s for s in self.list_sources() if s.id == source_id), None,
            )
            if current is None:
                logger.debug("Indexing finished for deleted source %s, ignoring", source_id)
                return False
            if current.status == SourceStatus.READY:
                return False
            ready = current.model_copy(
                update={"status": SourceStatus.READY, "last_updated": timestamp()},
            )
            self._store.update_where(Collection.KNOWLEDGE_SOURCES, by_id(source_id), ready)
        logger.info("Source %s is ready", source_id)
        return True

    def pending_ids(self) -> set[str]:
        with self._pending_lock:
            return set(self._pending)

    def shutdown(self) -> None:
        """Cancel every pending indexing timer."""
        with self._pending_lock:
            timers = list(self._pending.values())
            self._pending.clear()
        for timer in timers:
            timer.cancel()

    # ── Internal ─────────────────────────────────────────────────────

    def _schedule_indexing(self, source_id: str) -> None:
        timer = threading.Timer(self._indexing_delay, self._run_indexing, args=(source_id,))
        timer.daemon = True
        with self._pending_lock:
            self._pending[source_id] = timer
        timer.start()

    def _run_indexing(self, source_id: str) -> None:
        try:
            self.mark_ready(source_id)
        except Exception:
            logger.exception("Indexing transition failed for source %s", source_id)
