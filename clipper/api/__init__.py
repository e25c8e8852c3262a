"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from clipper.api import app

    uvicorn clipper.api:app --reload
"""

from clipper.api.app import app

__all__ = ["app"]
