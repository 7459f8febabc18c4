"""Settings document row."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

SETTINGS_ROW_ID = 1


class SettingsRow(Base):
    """Singleton row holding the settings document as serialized JSON text."""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    data: Mapped[Optional[str]] = mapped_column(Text)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<SettingsRow(id={self.id})>"


__all__ = ["SETTINGS_ROW_ID", "SettingsRow"]
