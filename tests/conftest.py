"""Shared test fixtures for the receptionist test suite."""

from __future__ import annotations

import os
from unittest.mock import MagicMock

import pytest


def pytest_configure(config):
    """Set test environment variables BEFORE collection starts."""
    os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key-123")
    os.environ["METRICS_ENABLED"] = "false"
    os.environ["STORE_BACKEND"] = "memory"


@pytest.fixture
def backend():
    from receptionist.storage.backends import InMemoryBackend

    return InMemoryBackend()


@pytest.fixture
def store(backend):
    """An initialised store with the demo seed data."""
    from receptionist.storage.store import DomainStore

    s = DomainStore(backend)
    s.initialize()
    return s


@pytest.fixture
def repository(store):
    """Repository whose indexing timers never fire on their own during a test."""
    from receptionist.knowledge.repository import KnowledgeRepository

    repo = KnowledgeRepository(store, indexing_delay=3600)
    yield repo
    repo.shutdown()


@pytest.fixture
def mock_capability():
    """Model capability double; set ``.invoke.return_value`` per test."""
    from receptionist.services.llm_client import ModelReply

    capability = MagicMock()
    capability.invoke.return_value = ModelReply(text="Hello! How can I help?")
    return capability
