"""
Database engine and session management.

Builds the SQLAlchemy engine from the configured URL with a test fallback
(SQLite in-memory) and exposes FastAPI dependencies.
"""
import logging
import os
import sys
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from inventory.config import database_url

logger = logging.getLogger(__name__)


def _is_pytest_runtime() -> bool:
    """Best-effort detection that we're executing under pytest.

    ``PYTEST_CURRENT_TEST`` is only set while an individual test is running,
    so module import time may not see it yet. Presence of the pytest package
    in ``sys.modules`` covers collection. ``PYTEST_RUNNING=1`` forces it.
    """
    if os.getenv("PYTEST_RUNNING") == "1":
        return True
    if "PYTEST_CURRENT_TEST" in os.environ:
        return True
    if "pytest" in sys.modules:
        return True
    return False


explicit_test_db = os.getenv("INVENTORY_TEST_DB")

if explicit_test_db:
    DATABASE_URL = explicit_test_db
elif _is_pytest_runtime():
    # In-memory SQLite with StaticPool so the schema persists across connections
    DATABASE_URL = "sqlite+pysqlite:///:memory:"
else:
    DATABASE_URL = database_url()

if DATABASE_URL.startswith("sqlite") and ":memory:" in DATABASE_URL:
    _engine_kwargs = {
        "connect_args": {"check_same_thread": False},
        "poolclass": StaticPool,
    }
elif DATABASE_URL.startswith("sqlite"):
    _engine_kwargs = {"connect_args": {"check_same_thread": False}}
else:
    _engine_kwargs = {"pool_pre_ping": True}

engine = create_engine(DATABASE_URL, **_engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# SQLite databases (the default local file and the test database) get their
# schema on first use; server databases are migrated with Alembic.
_SCHEMA_INIT_DONE = False


def ensure_sqlite_schema():
    global _SCHEMA_INIT_DONE
    if _SCHEMA_INIT_DONE:
        return
    if str(engine.url).startswith("sqlite"):
        from inventory.db import models
        models.Base.metadata.create_all(bind=engine)
        add_missing_sqlite_columns()
    _SCHEMA_INIT_DONE = True


def add_missing_sqlite_columns(bind=None):
    """Add model columns an older SQLite table lacks (e.g. files without ModelNumber).

    ``create_all`` leaves existing tables untouched, so databases written
    before a column existed are brought up to date here. Added columns are
    nullable with no default.
    """
    from inventory.db import models

    bind = bind or engine
    table = models.InventoryItem.__table__
    existing = {col["name"] for col in inspect(bind).get_columns(table.name)}
    missing = [col for col in table.columns if col.name not in existing]
    if not missing:
        return []
    with bind.begin() as conn:
        for col in missing:
            col_type = col.type.compile(dialect=conn.dialect)
            conn.execute(text(f'ALTER TABLE {table.name} ADD COLUMN "{col.name}" {col_type}'))
            logger.warning("Added missing column %s.%s to existing database", table.name, col.name)
    return [col.name for col in missing]


def reset_schema_state():
    """Forget the lazy schema guard so the next session recreates tables."""
    global _SCHEMA_INIT_DONE
    _SCHEMA_INIT_DONE = False


def get_db():
    """Dependency to get a database session."""
    ensure_sqlite_schema()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def open_session():
    """Return a standalone session for scripts and the CLI; caller closes it."""
    ensure_sqlite_schema()
    return SessionLocal()
