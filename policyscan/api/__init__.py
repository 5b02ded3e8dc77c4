"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from policyscan.api import app

    uvicorn policyscan.api:app --port 8080
"""

from policyscan.api.app import app

__all__ = ["app"]
