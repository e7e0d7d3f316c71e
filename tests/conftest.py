"""
Shared fixtures.

Service tests run against the in-memory repositories from tests/fakes.py.
Tests marked `requires_db` talk to a real PostgreSQL at TEST_DATABASE_URL
and are skipped when it is not set.
"""

import os

import pytest

import config
from tests.fakes import MemoryDB, install

USER_ID = 1001
OTHER_USER_ID = 2002


@pytest.fixture
def db(monkeypatch):
    memory = MemoryDB()
    install(monkeypatch, memory)
    monkeypatch.setattr(config, "AUTO_EVALUATE_BADGES", False)
    return memory


@pytest.fixture
def hunter(db):
    """A fresh level-1 hunter with 50 HP."""
    return db.add_profile(USER_ID, name="Jin", hp=50)


@pytest.fixture
def auto_badges(monkeypatch):
    monkeypatch.setattr(config, "AUTO_EVALUATE_BADGES", True)


def pytest_collection_modifyitems(config, items):
    if os.getenv("TEST_DATABASE_URL"):
        return
    skip_db = pytest.mark.skip(reason="TEST_DATABASE_URL is not set")
    for item in items:
        if "requires_db" in item.keywords:
            item.add_marker(skip_db)
