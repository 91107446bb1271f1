# sitecopy/services/versioning_service.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from sitecopy.core.errors import ConflictError, NotFoundError, ValidationError
from sitecopy.core.settings import settings
from sitecopy.models.content import CHANGE_TYPES, STATUSES, ContentEntry, utcnow
from sitecopy.services import entry_store
from sitecopy.services.content_cache import content_cache

log = logging.getLogger(__name__)

# campos que applyUpdate acepta del caller
MUTABLE_FIELDS = ("value", "description", "page", "section", "is_active", "status")


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


def build_snapshot(entry: ContentEntry, change_type: str) -> Dict[str, Any]:
    """
    Foto del estado del Entry en este instante. Se guarda como dict plano
    (JSON) dentro de change_history.
    """
    if change_type not in CHANGE_TYPES:
        raise ValueError(f"unknown change type {change_type!r}")
    return {
        "version": entry.version,
        "value": entry.value,
        "description": entry.description,
        "status": entry.status,
        "updated_by": entry.updated_by,
        "updated_at": _iso(entry.updated_at),
        "change_type": change_type,
    }


def resolve_locale(locale: Optional[str]) -> str:
    loc = (locale or "").strip() or settings.DEFAULT_LOCALE
    allowed = settings.SUPPORTED_LOCALES
    if allowed and loc not in allowed:
        raise ValidationError.for_field("locale", f"unsupported locale {loc!r}")
    return loc


def _require_text(field: str, value: Optional[str]) -> str:
    if value is None or not str(value).strip():
        raise ValidationError.for_field(field, f"{field} is required")
    return str(value).strip()


def create_entry(
    db: Session,
    *,
    key: str,
    value: str,
    locale: Optional[str] = None,
    page: Optional[str] = None,
    section: Optional[str] = None,
    description: Optional[str] = None,
    actor_id: Optional[int] = None,
) -> ContentEntry:
    """
    Nuevo miembro de la familia (key, locale) en estado draft.

    Si la familia ya existe, la versión continúa desde la última
    (override editorial: un borrador nuevo oculta la publicación anterior).
    """
    errors: List[Dict[str, str]] = []
    for field, raw in (("key", key), ("value", value)):
        if raw is None or not str(raw).strip():
            errors.append({"field": field, "message": f"{field} is required"})
    if errors:
        raise ValidationError(errors)

    key = key.strip()
    loc = resolve_locale(locale)
    version = entry_store.next_version(db, key=key, locale=loc)
    now = utcnow()

    entry = ContentEntry(
        key=key,
        locale=loc,
        value=value.strip(),
        page=page,
        section=section,
        description=description,
        is_active=True,
        status="draft",
        version=version,
        updated_by=actor_id,
        created_at=now,
        updated_at=now,
    )
    entry.change_history = [build_snapshot(entry, "created")]

    entry = entry_store.insert_entry(db, entry)
    # solo tras confirmar la escritura
    content_cache.invalidate(loc, key)
    log.info("content created id=%s %s::%s v%s", entry.id, loc, key, version)
    return entry


def apply_update(
    db: Session,
    entry_id: int,
    *,
    actor_id: Optional[int] = None,
    change_type: str = "updated",
    expected_version: Optional[int] = None,
    **changes: Any,
) -> ContentEntry:
    """
    Aplica una mutación conservando la auditoría:

    1. snapshot del estado previo (etiquetado ``change_type``) al final del historial
    2. aplica solo los campos recibidos en ``changes``
    3. avanza la versión (siguiente de la familia), fija updated_by/updated_at
    4. persiste y después invalida la caché de (key, locale)

    Sin ``expected_version`` gana la última escritura: el snapshot refleja lo
    que hubiera en la base en el momento de leer.
    """
    unknown = set(changes) - set(MUTABLE_FIELDS)
    if unknown:
        raise TypeError(f"unexpected fields: {sorted(unknown)}")

    entry = entry_store.get_entry(db, entry_id)
    if entry is None:
        raise NotFoundError("content entry not found", details={"id": entry_id})

    if expected_version is not None and expected_version != entry.version:
        raise ConflictError(
            "content entry was modified by someone else",
            details={"expectedVersion": expected_version, "currentVersion": entry.version},
        )

    if "value" in changes:
        changes["value"] = _require_text("value", changes["value"])
    status = changes.get("status", entry.status)
    if status not in STATUSES:
        raise ValidationError.for_field("status", f"invalid status {status!r}")
    is_active = changes.get("is_active")
    if is_active is None:
        is_active = entry.is_active
        changes.pop("is_active", None)
    if status == "published" and not is_active:
        raise ValidationError.for_field("isActive", "published content must be active")

    snapshot = build_snapshot(entry, change_type)
    key, locale = entry.key, entry.locale
    # la versión sigue siendo única dentro de la familia aunque no sea el registro vigente
    new_version = max(entry.version + 1, entry_store.next_version(db, key=key, locale=locale))

    for field, val in changes.items():
        setattr(entry, field, val)
    entry.version = new_version
    entry.updated_by = actor_id
    entry.updated_at = utcnow()
    # lista nueva: el ORM detecta el cambio de la columna JSON
    entry.change_history = [*(entry.change_history or []), snapshot]

    entry = entry_store.update_entry(db, entry)
    content_cache.invalidate(locale, key)
    log.info(
        "content %s id=%s %s::%s v%s status=%s",
        change_type, entry.id, locale, key, entry.version, entry.status,
    )
    return entry
