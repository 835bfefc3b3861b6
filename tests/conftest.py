"""Shared pytest fixtures for family portfolio tests."""

import pytest

import family_portfolio.core.config as configmod
import family_portfolio.data.database as dbmod
from family_portfolio.data.database import get_db, set_db_path


@pytest.fixture(autouse=True)
def isolated_db(tmp_path):
    """Each test gets a fresh temp DB. Resets the global singleton after."""
    db_path = tmp_path / "test.db"
    set_db_path(str(db_path))
    db = get_db()
    yield db
    db.conn.close()
    dbmod._db = None


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config.json at the temp dir so a developer's real config never leaks in."""
    monkeypatch.setattr(configmod, "_config_path", lambda: tmp_path / "config.json")
    configmod.reset_config_cache()
    yield tmp_path / "config.json"
    configmod.reset_config_cache()
