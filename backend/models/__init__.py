"""SQLAlchemy ORM models for the Daywise database."""

from backend.models.base import Base
from backend.models.stored_collection import StoredCollection

__all__ = ["Base", "StoredCollection"]
