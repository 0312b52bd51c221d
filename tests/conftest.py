from datetime import datetime, timezone

import pytest

from lifeos.config import Config
from lifeos.db import StateRepository
from lifeos.session import Session

FIXED_NOW = datetime(2024, 1, 1, 6, 30, tzinfo=timezone.utc)


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_lifeos.db")
    return db_path


@pytest.fixture
def config(tmp_db):
    return Config(db_path=tmp_db, owner_id="test-owner")


@pytest.fixture
def session(config):
    """A session on an empty database with the clock pinned to FIXED_NOW."""
    repo = StateRepository(config.db_path, config.owner_id)
    return Session.open(config, repo, clock=lambda: FIXED_NOW)
