"""Shared fixtures for the user sync test suite."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from helpers import TEST_SECRET, InMemoryUserStore

from user_sync.app import create_app
from user_sync.config import Settings


@pytest.fixture()
def settings() -> Settings:
    return Settings(webhook_secret=TEST_SECRET, init_schema=False)


@pytest.fixture()
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture()
def client(settings: Settings, store: InMemoryUserStore):
    """TestClient bound to an app backed by the in-memory store."""
    app = create_app(settings, store=store)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
