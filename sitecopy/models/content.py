# sitecopy/models/content.py
# ContentEntry: valor vigente + metadatos de ciclo de vida + historial embebido (JSON/JSONB)
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON, Boolean, DateTime, Enum, Index, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from sitecopy.db.base import Base

STATUSES = ("draft", "published", "archived")
CHANGE_TYPES = ("created", "updated", "status_changed", "published", "archived")

EntryStatus = Enum(
    *STATUSES,
    name="content_entry_status",
    create_constraint=True,
    validate_strings=True,
    native_enum=False,
)

# JSONB en PostgreSQL, JSON genérico en el resto (tests con SQLite)
HistoryType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContentEntry(Base):
    __tablename__ = "content_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    key: Mapped[str] = mapped_column(String(160))       # p.ej. "home.hero.title"
    locale: Mapped[str] = mapped_column(String(16))     # p.ej. "fr-FR"
    value: Mapped[str] = mapped_column(Text)

    description: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    page: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    section: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    status: Mapped[str] = mapped_column(EntryStatus, default="draft")
    version: Mapped[int] = mapped_column(Integer, default=1)

    # identidad opaca del último autor (id de usuario del colaborador de auth)
    updated_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # snapshots previos a cada mutación, el más antiguo primero
    change_history: Mapped[List[Dict[str, Any]]] = mapped_column(HistoryType, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("key", "locale", "version", name="uq_content_entry_key_locale_version"),
        Index("ix_content_entries_key_locale_active", "key", "locale", "is_active"),
        Index("ix_content_entries_page_section", "page", "section"),
        Index("ix_content_entries_updated_at", "updated_at"),
        Index("ix_content_entries_status", "status"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<ContentEntry id={self.id} {self.locale}::{self.key} v{self.version} {self.status}>"
