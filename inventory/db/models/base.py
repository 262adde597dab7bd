"""
Shared SQLAlchemy base and helpers.
"""
import uuid
from datetime import date
from sqlalchemy.orm import declarative_base


def new_item_id() -> str:
    """Item ids are random UUIDs stored as text."""
    return str(uuid.uuid4())


def today_iso() -> str:
    """Local calendar date in YYYY-MM-DD, the stored acquisition date format."""
    return date.today().isoformat()


Base = declarative_base()
