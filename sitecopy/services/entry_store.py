# sitecopy/services/entry_store.py
# Persistencia de ContentEntry: búsquedas por (key, locale), listados filtrados y escrituras atómicas
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sitecopy.core.errors import StorageError
from sitecopy.models.content import ContentEntry
from sitecopy.schemas.content import ContentFilter

log = logging.getLogger(__name__)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _current_stmt(key: str, locale: str):
    return (
        select(ContentEntry)
        .where(ContentEntry.key == key, ContentEntry.locale == locale)
        .order_by(ContentEntry.version.desc())
        .limit(1)
    )


def _read(db: Session, fn):
    try:
        return fn()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("content store unavailable") from e


# -------- Lecturas --------
def get_entry(db: Session, entry_id: int) -> Optional[ContentEntry]:
    return _read(db, lambda: db.get(ContentEntry, entry_id))


def find_entry(db: Session, *, key: str, locale: str) -> Optional[ContentEntry]:
    """Registro vigente (mayor versión) de la familia (key, locale)."""
    return _read(db, lambda: db.scalar(_current_stmt(key, locale)))


def find_published(db: Session, *, key: str, locale: str) -> Optional[ContentEntry]:
    """
    Registro vigente solo si está publicado y activo. Un borrador o archivado
    más reciente oculta cualquier versión publicada anterior.
    """
    entry = find_entry(db, key=key, locale=locale)
    if entry is None or entry.status != "published" or not entry.is_active:
        return None
    return entry


def next_version(db: Session, *, key: str, locale: str) -> int:
    last = _read(
        db,
        lambda: db.scalar(
            select(func.max(ContentEntry.version)).where(
                ContentEntry.key == key,
                ContentEntry.locale == locale,
            )
        ),
    )
    return 1 if last is None else int(last) + 1


def _apply_filter(stmt, flt: ContentFilter):
    if flt.locale:
        stmt = stmt.where(ContentEntry.locale == flt.locale)
    if flt.page:
        stmt = stmt.where(ContentEntry.page == flt.page)
    if flt.section:
        stmt = stmt.where(ContentEntry.section == flt.section)
    if flt.search:
        pattern = f"%{_escape_like(flt.search)}%"
        stmt = stmt.where(
            or_(
                ContentEntry.key.ilike(pattern, escape="\\"),
                ContentEntry.value.ilike(pattern, escape="\\"),
                ContentEntry.description.ilike(pattern, escape="\\"),
            )
        )
    return stmt


def list_entries(db: Session, flt: ContentFilter) -> Tuple[List[ContentEntry], int]:
    """Listado admin: más recientes primero, con total previo a la paginación."""
    base = _apply_filter(select(ContentEntry), flt)
    count_stmt = select(func.count()).select_from(base.subquery())
    stmt = (
        base.order_by(ContentEntry.updated_at.desc(), ContentEntry.id.desc())
        .offset(flt.skip)
        .limit(flt.limit)
    )

    def _run() -> Tuple[Sequence[ContentEntry], int]:
        total = db.scalar(count_stmt) or 0
        return db.scalars(stmt).all(), int(total)

    rows, total = _read(db, _run)
    return list(rows), total


# -------- Escrituras --------
def _persist(db: Session, entry: ContentEntry, op: str) -> ContentEntry:
    """
    Un commit por registro: campos vigentes + historial viajan en la misma
    sentencia. Ante cualquier fallo se revierte y no queda nada aplicado.
    """
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        log.exception("%s failed for %s::%s", op, entry.locale, entry.key)
        raise StorageError(f"could not {op} content entry", details={"key": entry.key, "locale": entry.locale}) from e
    db.refresh(entry)
    return entry


def insert_entry(db: Session, entry: ContentEntry) -> ContentEntry:
    return _persist(db, entry, "insert")


def update_entry(db: Session, entry: ContentEntry) -> ContentEntry:
    return _persist(db, entry, "update")
