"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from cms.api import create_app

    uvicorn cms.api:app --reload
"""

from cms.api.app import app, create_app

__all__ = ["app", "create_app"]
