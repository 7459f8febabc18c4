"""
Base Models

Declarative base and shared columns for hotel-api tables.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

# Global SQLAlchemy base; its metadata is the provisioned table layout.
Base = declarative_base()


class BaseRecordModel(Base):
    """Relational resource row keyed by a client-supplied text id."""

    __abstract__ = True

    id: Mapped[str] = mapped_column(String, primary_key=True, sort_order=-1)


__all__ = ["Base", "BaseRecordModel"]
