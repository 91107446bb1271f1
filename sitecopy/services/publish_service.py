# sitecopy/services/publish_service.py
# ⟶ Ciclo de vida draft / published / archived sobre applyUpdate
from __future__ import annotations

from typing import Any, Dict, Literal, Optional, Tuple

from sqlalchemy.orm import Session

from sitecopy.core.errors import InvalidTransitionError, NotFoundError
from sitecopy.models.content import ContentEntry
from sitecopy.services import entry_store
from sitecopy.services.versioning_service import apply_update

Status = Literal["draft", "published", "archived"]
Action = Literal["publish", "unpublish", "archive"]

# acción -> (estados de origen, destino, etiqueta del snapshot)
TRANSITIONS: Dict[str, Tuple[Tuple[str, ...], str, str]] = {
    "publish": (("draft",), "published", "published"),
    "unpublish": (("published",), "draft", "status_changed"),
    "archive": (("draft", "published"), "archived", "archived"),
}


# -----------------------------
# Reglas
# -----------------------------
def can_transition(action: Action, src: Status) -> bool:
    sources, _, _ = TRANSITIONS[action]
    return src in sources


def change_type_for(src: Status, dst: Optional[Status]) -> str:
    """Etiqueta del snapshot para una edición libre (PUT)."""
    if dst is None or dst == src:
        return "updated"
    if dst == "published":
        return "published"
    if dst == "archived":
        return "archived"
    return "status_changed"


def _load(db: Session, entry_id: int) -> ContentEntry:
    entry = entry_store.get_entry(db, entry_id)
    if entry is None:
        raise NotFoundError("content entry not found", details={"id": entry_id})
    return entry


def _side_effects(dst: str, changes: Dict[str, Any]) -> None:
    # publish fuerza isActive=true (salvo un false explícito, que valida applyUpdate);
    # archive siempre lo apaga
    if dst == "published" and changes.get("is_active") is None:
        changes["is_active"] = True
    elif dst == "archived":
        changes["is_active"] = False


# -----------------------------
# Transiciones con nombre
# -----------------------------
def transition(db: Session, entry_id: int, action: Action, *, actor_id: Optional[int] = None) -> ContentEntry:
    entry = _load(db, entry_id)
    src = entry.status
    if not can_transition(action, src):
        raise InvalidTransitionError(
            f"cannot {action} an entry in status {src}",
            details={"id": entry_id, "status": src, "action": action},
        )
    _, dst, change_type = TRANSITIONS[action]
    changes: Dict[str, Any] = {"status": dst}
    _side_effects(dst, changes)
    return apply_update(db, entry_id, actor_id=actor_id, change_type=change_type, **changes)


def publish_entry(db: Session, entry_id: int, *, actor_id: Optional[int] = None) -> ContentEntry:
    return transition(db, entry_id, "publish", actor_id=actor_id)


def unpublish_entry(db: Session, entry_id: int, *, actor_id: Optional[int] = None) -> ContentEntry:
    return transition(db, entry_id, "unpublish", actor_id=actor_id)


def archive_entry(db: Session, entry_id: int, *, actor_id: Optional[int] = None) -> ContentEntry:
    return transition(db, entry_id, "archive", actor_id=actor_id)


# -----------------------------
# Edición libre
# -----------------------------
def update_entry(
    db: Session,
    entry_id: int,
    *,
    actor_id: Optional[int] = None,
    expected_version: Optional[int] = None,
    **changes: Any,
) -> ContentEntry:
    """
    Edición de valor/metadatos. Un ``status`` explícito distinto del actual
    re-etiqueta el snapshot y aplica los efectos de la transición destino;
    aquí no se restringe el origen (así se reactiva contenido archivado).
    """
    entry = _load(db, entry_id)
    dst = changes.get("status")
    if dst is None:
        changes.pop("status", None)
    change_type = change_type_for(entry.status, dst)
    if dst is not None and dst != entry.status:
        _side_effects(dst, changes)
    return apply_update(
        db,
        entry_id,
        actor_id=actor_id,
        change_type=change_type,
        expected_version=expected_version,
        **changes,
    )
