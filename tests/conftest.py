import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from inventory.config import refresh_config_cache
from inventory.db import database, models
from inventory.utils.feature_flags import refresh_feature_flag_cache

_ENV_VARS = (
    "DATABASE_URL",
    "WEB_UI_ENABLED",
    "FEATURE_ITEM_DELETE_ENABLED",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep user config files and flag overrides out of every test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("INVENTORY_CONFIG", str(tmp_path / "no-such-config.json"))
    monkeypatch.chdir(tmp_path)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    refresh_config_cache()
    refresh_feature_flag_cache()
    yield
    refresh_config_cache()
    refresh_feature_flag_cache()


@pytest.fixture(autouse=True)
def _fresh_schema():
    """Each test starts from an empty in-memory inventory table."""
    models.Base.metadata.drop_all(bind=database.engine)
    models.Base.metadata.create_all(bind=database.engine)
    database.reset_schema_state()
    yield


@pytest.fixture
def db_session():
    session = database.open_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    from inventory.api.main import app

    return TestClient(app)


@pytest.fixture
def failing_session(monkeypatch):
    """A session whose every statement fails as if the database file were unreadable."""
    session = database.SessionLocal()

    def _execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "execute", _execute)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def broken_storage(client, failing_session):
    """Route the app's ``get_db`` dependency to ``failing_session``."""
    client.app.dependency_overrides[database.get_db] = lambda: failing_session
    yield client
    client.app.dependency_overrides.pop(database.get_db, None)
