"""Key-value rows backing the persisted collections (review items, achievements, rewards)."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from backend.models.base import Base, TimestampMixin


class StoredCollection(Base, TimestampMixin):
    __tablename__ = "stored_collections"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)  # JSON document
