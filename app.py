"""
App assembly entry point.

Re-exports the FastAPI `app` from `inventory.api.main` so servers can be
pointed at `app:app`.
"""

from inventory.api.main import app  # noqa: F401
