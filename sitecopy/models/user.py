from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from sitecopy.db.base import Base
from sitecopy.models.content import utcnow


class User(Base):
    """
    Proyección mínima del usuario que expone el colaborador de autenticación:
    rol para el control de escritura y nombre visible para el historial.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(160), unique=True, index=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(80), default=None)
    last_name: Mapped[Optional[str]] = mapped_column(String(80), default=None)
    role: Mapped[str] = mapped_column(String(32), default="client")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    @property
    def display_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or self.email
