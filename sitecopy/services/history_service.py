from __future__ import annotations

from typing import Dict, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from sitecopy.core.errors import NotFoundError
from sitecopy.models.user import User
from sitecopy.schemas.content import ActorOut, ContentHistoryOut, HistorySnapshotOut
from sitecopy.services import entry_store


def resolve_actors(db: Session, user_ids: Iterable[int]) -> Dict[int, ActorOut]:
    """Una sola consulta para todos los autores del historial."""
    ids = {int(u) for u in user_ids if u is not None}
    if not ids:
        return {}
    users = db.scalars(select(User).where(User.id.in_(ids))).all()
    return {u.id: ActorOut.model_validate(u) for u in users}


def get_history(db: Session, entry_id: int, *, resolve_users: bool = True) -> ContentHistoryOut:
    entry = entry_store.get_entry(db, entry_id)
    if entry is None:
        raise NotFoundError("content entry not found", details={"id": entry_id})

    snapshots = [HistorySnapshotOut.model_validate(s) for s in (entry.change_history or [])]
    if resolve_users:
        actors = resolve_actors(db, (s.updated_by for s in snapshots))
        for s in snapshots:
            if s.updated_by is not None:
                s.updated_by_user = actors.get(s.updated_by)

    return ContentHistoryOut(id=entry.id, key=entry.key, locale=entry.locale, history=snapshots)
