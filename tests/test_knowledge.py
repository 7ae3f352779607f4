"""Tests for the knowledge repository: profiles and source lifecycle."""

from __future__ import annotations

import time

import pytest
from pydantic import ValidationError

from receptionist.knowledge.repository import KnowledgeRepository
from receptionist.models import (
    WEEKDAYS,
    BusinessHours,
    BusinessProfile,
    SourceKind,
    SourceStatus,
)


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


# ── Profiles ─────────────────────────────────────────────────────────


class TestProfiles:
    def test_default_profile_when_none_stored(self, repository):
        profile = repository.get_profile()
        assert profile.company_name == "My Business"
        assert profile.industry == "General"
        assert [h.day for h in profile.hours] == list(WEEKDAYS)
        sunday = profile.hours[-1]
        assert sunday.closed is True
        saturday = profile.hours[5]
        assert (saturday.open, saturday.close, saturday.closed) == ("10:00", "14:00", False)

    def test_save_and_get_round_trip(self, repository):
        repository.save_profile(BusinessProfile(company_name="Doe Realty"), "t1")
        assert repository.get_profile("t1").company_name == "Doe Realty"

    def test_profiles_are_per_tenant(self, repository):
        repository.save_profile(BusinessProfile(company_name="A Corp"), "a")
        repository.save_profile(BusinessProfile(company_name="B Corp"), "b")
        assert repository.get_profile("a").company_name == "A Corp"
        assert repository.get_profile("b").company_name == "B Corp"
        assert repository.get_profile().company_name == "My Business"

    def test_save_replaces_existing_profile(self, repository, store):
        repository.save_profile(BusinessProfile(company_name="Old"), "t1")
        repository.save_profile(BusinessProfile(company_name="New"), "t1")
        assert repository.get_profile("t1").company_name == "New"
        from receptionist.storage.store import Collection

        assert len(store.read(Collection.PROFILES)) == 1

    def test_save_stamps_tenant_id(self, repository):
        saved = repository.save_profile(BusinessProfile(tenant_id="wrong"), "right")
        assert saved.tenant_id == "right"

    def test_hours_reject_duplicate_weekday(self):
        hours = [BusinessHours(day=d) for d in WEEKDAYS[:6]] + [BusinessHours(day="Monday")]
        with pytest.raises(ValidationError):
            BusinessProfile(hours=hours)

    def test_hours_reject_missing_weekday(self):
        with pytest.raises(ValidationError):
            BusinessProfile(hours=[BusinessHours(day=d) for d in WEEKDAYS[:6]])

    def test_hours_are_normalised_to_monday_first(self):
        hours = [BusinessHours(day=d) for d in reversed(WEEKDAYS)]
        assert [h.day for h in BusinessProfile(hours=hours).hours] == list(WEEKDAYS)


# ── Sources ──────────────────────────────────────────────────────────


class TestSources:
    def test_add_source_starts_processing(self, repository):
        source = repository.add_source(SourceKind.TEXT, "Pricing", "Checkups are $60")
        assert source.status == SourceStatus.PROCESSING
        assert repository.list_sources()[0].id == source.id
        assert source.id in repository.pending_ids()

    def test_add_source_keeps_optional_fields(self, repository):
        source = repository.add_source("note", "FAQ", "body", file_name="faq.txt", tenant_id="t1")
        stored = repository.list_sources()[0]
        assert stored.file_name == "faq.txt"
        assert stored.tenant_id == "t1"
        assert stored.kind == SourceKind.NOTE
        assert stored.id == source.id

    def test_sources_are_newest_first(self, repository):
        first = repository.add_source(SourceKind.TEXT, "One", "1")
        second = repository.add_source(SourceKind.TEXT, "Two", "2")
        assert [s.id for s in repository.list_sources()] == [second.id, first.id]

    def test_unknown_kind_rejected(self, repository):
        with pytest.raises(ValueError):
            repository.add_source("pdf-blob", "X", "y")

    def test_mark_ready_transitions_once(self, repository):
        source = repository.add_source(SourceKind.TEXT, "Pricing", "...")
        assert repository.mark_ready(source.id) is True
        assert repository.list_sources()[0].status == SourceStatus.READY
        assert repository.mark_ready(source.id) is False
        assert source.id not in repository.pending_ids()

    def test_delete_source(self, repository):
        source = repository.add_source(SourceKind.TEXT, "Pricing", "...")
        assert repository.delete_source(source.id) is True
        assert repository.list_sources() == []
        assert source.id not in repository.pending_ids()

    def test_delete_unknown_source_returns_false(self, repository):
        assert repository.delete_source("missing") is False

    def test_late_transition_after_delete_is_noop(self, repository):
        source = repository.add_source(SourceKind.TEXT, "Pricing", "...")
        repository.delete_source(source.id)
        assert repository.mark_ready(source.id) is False
        assert repository.list_sources() == []

    def test_late_transition_does_not_touch_other_sources(self, repository):
        doomed = repository.add_source(SourceKind.TEXT, "Doomed", "...")
        kept = repository.add_source(SourceKind.TEXT, "Kept", "...")
        repository.delete_source(doomed.id)
        repository.mark_ready(doomed.id)
        (only,) = repository.list_sources()
        assert only.id == kept.id
        assert only.status == SourceStatus.PROCESSING


class TestIndexingTimer:
    """Real timers with a short delay."""

    def test_source_becomes_ready_after_delay(self, store):
        repo = KnowledgeRepository(store, indexing_delay=0.05)
        try:
            source = repo.add_source(SourceKind.TEXT, "Hours", "Open late Fridays")
            assert _wait_for(lambda: repo.list_sources()[0].status == SourceStatus.READY)
            assert repo.list_sources()[0].id == source.id
            assert repo.pending_ids() == set()
        finally:
            repo.shutdown()

    def test_deleted_source_never_reappears(self, store):
        repo = KnowledgeRepository(store, indexing_delay=0.05)
        try:
            source = repo.add_source(SourceKind.TEXT, "Hours", "Open late Fridays")
            repo.delete_source(source.id)
            time.sleep(0.2)
            assert repo.list_sources() == []
        finally:
            repo.shutdown()

    def test_shutdown_cancels_pending(self, store):
        repo = KnowledgeRepository(store, indexing_delay=0.05)
        repo.add_source(SourceKind.TEXT, "Hours", "...")
        repo.shutdown()
        time.sleep(0.2)
        assert repo.list_sources()[0].status == SourceStatus.PROCESSING
