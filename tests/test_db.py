"""Tests for database initialization and the state repository."""
import sqlite3

from lifeos.db import StateRepository, get_connection, init_db


def test_init_db_creates_tables(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    tables = {row[0] for row in cursor.fetchall()}
    assert "app_states" in tables
    conn.close()


def test_init_db_is_idempotent(tmp_db):
    init_db(tmp_db)
    init_db(tmp_db)  # should not raise


def test_load_missing_returns_none(tmp_db):
    assert StateRepository(tmp_db, "owner").load() is None


def test_save_then_load(tmp_db):
    repo = StateRepository(tmp_db, "owner")
    assert repo.save({"tasks": [], "userSettings": {"name": "Ada"}}) is True
    assert repo.load() == {"tasks": [], "userSettings": {"name": "Ada"}}


def test_save_is_idempotent_upsert(tmp_db):
    repo = StateRepository(tmp_db, "owner")
    repo.save({"n": 1})
    repo.save({"n": 1})
    repo.save({"n": 2})
    conn = get_connection(tmp_db)
    rows = conn.execute("SELECT * FROM app_states").fetchall()
    conn.close()
    assert len(rows) == 1
    assert repo.load() == {"n": 2}


def test_owners_are_isolated(tmp_db):
    StateRepository(tmp_db, "a").save({"who": "a"})
    StateRepository(tmp_db, "b").save({"who": "b"})
    assert StateRepository(tmp_db, "a").load() == {"who": "a"}
    assert StateRepository(tmp_db, "b").load() == {"who": "b"}


def test_clear_removes_only_owner(tmp_db):
    StateRepository(tmp_db, "a").save({"who": "a"})
    StateRepository(tmp_db, "b").save({"who": "b"})
    assert StateRepository(tmp_db, "a").clear() is True
    assert StateRepository(tmp_db, "a").load() is None
    assert StateRepository(tmp_db, "b").load() == {"who": "b"}


def test_save_failure_is_logged_not_raised(tmp_path, caplog):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    repo = StateRepository(str(blocker / "db.sqlite"), "owner")
    assert repo.save({"n": 1}) is False
    assert "Database save error" in caplog.text


def test_save_unserializable_state_returns_false(tmp_db):
    assert StateRepository(tmp_db, "owner").save({"bad": object()}) is False


def test_corrupt_snapshot_loads_as_none(tmp_db, caplog):
    init_db(tmp_db)
    conn = sqlite3.connect(tmp_db)
    conn.execute("INSERT INTO app_states (owner_id, state) VALUES ('owner', '{not json')")
    conn.commit()
    conn.close()
    assert StateRepository(tmp_db, "owner").load() is None
    assert "not valid JSON" in caplog.text
