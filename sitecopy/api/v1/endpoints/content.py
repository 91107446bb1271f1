# =============================================================================
# Content Endpoints (public lookup, admin CRUD, lifecycle, history, cache)
# sitecopy/api/v1/endpoints/content.py
# =============================================================================
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from sitecopy.core.errors import NotFoundError
from sitecopy.core.settings import settings
from sitecopy.db.session import get_db
from sitecopy.deps.auth import require_admin
from sitecopy.models.user import User
from sitecopy.schemas.content import (
    CacheFlushOut,
    ContentCreate,
    ContentEntryOut,
    ContentFilter,
    ContentHistoryOut,
    ContentListOut,
    ContentUpdate,
    ContentValueOut,
)
from sitecopy.services import entry_store
from sitecopy.services.content_cache import content_cache
from sitecopy.services.delivery_service import lookup_value
from sitecopy.services.history_service import get_history
from sitecopy.services.publish_service import (
    archive_entry,
    publish_entry,
    unpublish_entry,
    update_entry,
)
from sitecopy.services.versioning_service import create_entry
from sitecopy.utils.payload_guard import enforce_value_size

router = APIRouter()


# ============================================================================ #
# Público
# ============================================================================ #
@router.get(
    "/value",
    response_model=ContentValueOut,
    responses={404: {"description": "Key not found or not published"}},
    summary="Valor publicado de una clave (público)",
)
def get_content_value(
    key: str = Query(..., min_length=1),
    locale: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    out = lookup_value(db, key=key, locale=locale)
    if out is None:
        return JSONResponse(
            status_code=404,
            content={"message": "key not found", "key": key, "locale": locale or settings.DEFAULT_LOCALE},
        )
    return out


# ============================================================================ #
# Admin: listado / alta
# ============================================================================ #
@router.get("", response_model=ContentListOut, dependencies=[Depends(require_admin)])
def list_content(
    page: Optional[str] = Query(None),
    section: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    locale: Optional[str] = Query(None),
    limit: int = Query(settings.LIST_DEFAULT_LIMIT, ge=1, le=settings.LIST_MAX_LIMIT),
    skip: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    flt = ContentFilter(
        page=page or None,
        section=section or None,
        locale=locale or None,
        search=(search or "").strip() or None,
        limit=limit,
        skip=skip,
    )
    entries, total = entry_store.list_entries(db, flt)
    return ContentListOut(
        total=total,
        limit=limit,
        skip=skip,
        entries=[ContentEntryOut.model_validate(e) for e in entries],
    )


@router.post("", response_model=ContentEntryOut, status_code=201)
def create_content(
    payload: ContentCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    enforce_value_size(payload.value)
    return create_entry(
        db,
        key=payload.key,
        value=payload.value,
        locale=payload.locale,
        page=payload.page,
        section=payload.section,
        description=payload.description,
        actor_id=admin.id,
    )


@router.delete("/cache", response_model=CacheFlushOut)
def flush_content_cache(
    key: str = Query(..., min_length=1),
    locale: Optional[str] = Query(None),
    _: User = Depends(require_admin),
):
    """Sin locale se vacían todas las locales de la clave."""
    if locale:
        evicted = content_cache.invalidate(locale, key)
    else:
        evicted = content_cache.invalidate_all_locales(key)
    return CacheFlushOut(key=key, locale=locale, evicted=evicted)


# ============================================================================ #
# Admin: por id
# ============================================================================ #
@router.get("/{entry_id}", response_model=ContentEntryOut, dependencies=[Depends(require_admin)])
def get_content(entry_id: int, db: Session = Depends(get_db)):
    entry = entry_store.get_entry(db, entry_id)
    if entry is None:
        raise NotFoundError("content entry not found", details={"id": entry_id})
    return entry


@router.put("/{entry_id}", response_model=ContentEntryOut)
def update_content(
    entry_id: int,
    patch: ContentUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    enforce_value_size(patch.value)
    changes = patch.model_dump(exclude_unset=True, exclude={"expected_version"})
    return update_entry(
        db,
        entry_id,
        actor_id=admin.id,
        expected_version=patch.expected_version,
        **changes,
    )


@router.patch("/{entry_id}/publish", response_model=ContentEntryOut)
def publish_content(entry_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return publish_entry(db, entry_id, actor_id=admin.id)


@router.patch("/{entry_id}/unpublish", response_model=ContentEntryOut)
def unpublish_content(entry_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return unpublish_entry(db, entry_id, actor_id=admin.id)


@router.delete("/{entry_id}", response_model=ContentEntryOut)
def archive_content(entry_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Archivar: no hay borrado físico, el historial se conserva."""
    return archive_entry(db, entry_id, actor_id=admin.id)


@router.get("/{entry_id}/history", response_model=ContentHistoryOut, dependencies=[Depends(require_admin)])
def content_history(
    entry_id: int,
    resolve_users: bool = Query(True, alias="resolveUsers"),
    db: Session = Depends(get_db),
):
    return get_history(db, entry_id, resolve_users=resolve_users)
