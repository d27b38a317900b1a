"""
Shared fixtures: a migrated SQLite database per test.
"""
import logging

import pytest
from fastapi.testclient import TestClient

from message_store.core.config import Settings
from message_store.core.logging import ROOT_LOGGER
from message_store.service import MessageStoreService
from message_store.store import MessageStore


@pytest.fixture
def make_settings(tmp_path):
    """Factory for settings pointing at a throwaway SQLite file."""
    def _make(**overrides) -> Settings:
        values = {
            "database_url": f"sqlite:///{tmp_path / 'test_messages.db'}",
            "log_level": "DEBUG",
            "log_format": "text",
        }
        values.update(overrides)
        return Settings(**values)
    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def service(settings):
    """Service with the schema migrated to head."""
    service = MessageStoreService(settings)
    assert service.migrate() is True
    yield service
    service.close()


@pytest.fixture
def client(service):
    """Create a test client."""
    return TestClient(service.app)


@pytest.fixture
def store(service):
    """Store bound to its own session."""
    with service.database.session() as db:
        yield MessageStore(db)


@pytest.fixture
def app_logs(service, caplog):
    """Capture records from the application logger, which does not propagate."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.addHandler(caplog.handler)
    yield caplog
    logger.removeHandler(caplog.handler)
