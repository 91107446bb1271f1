# sitecopy/seeds/content_loader.py
from __future__ import annotations

import json
import logging
import pathlib
from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from sitecopy.services import entry_store
from sitecopy.services.publish_service import publish_entry, update_entry
from sitecopy.services.versioning_service import create_entry, resolve_locale

log = logging.getLogger(__name__)

DEFAULT_KEYS_PATH = pathlib.Path("content/default_keys.json")


@dataclass(frozen=True)
class SeedKey:
    key: str
    value: str
    page: Optional[str] = None
    section: Optional[str] = None
    description: Optional[str] = None
    locale: Optional[str] = None


@dataclass
class SeedReport:
    created: int = 0
    updated: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.created + self.updated + self.skipped


def load_seed_file(path: pathlib.Path = DEFAULT_KEYS_PATH) -> List[SeedKey]:
    if not path.exists():
        raise FileNotFoundError(f"Seed file not found: {path.as_posix()}")
    data = json.loads(path.read_bytes().decode("utf-8-sig"))  # tolera BOM
    if not isinstance(data, dict) or not isinstance(data.get("keys"), list):
        raise ValueError(f"{path.name} must be an object with a 'keys' list")
    default_locale = data.get("locale")
    return [
        SeedKey(
            key=item["key"],
            value=item["value"],
            page=item.get("page"),
            section=item.get("section"),
            description=item.get("description"),
            locale=item.get("locale") or default_locale,
        )
        for item in data["keys"]
    ]


def seed_default_keys(
    db: Session,
    items: Iterable[SeedKey],
    *,
    actor_id: Optional[int] = None,
    overwrite: bool = False,
) -> SeedReport:
    """
    Deja publicadas las claves por defecto pasando por el ciclo de vida normal
    (versiones e historial incluidos):

    - no existe           → create + publish                 (created)
    - existe sin publicar → valor del seed + status=published (updated)
    - publicada           → se respeta                        (skipped)
      salvo ``overwrite`` con valor distinto → se reescribe   (updated)
    """
    report = SeedReport()
    for item in items:
        locale = resolve_locale(item.locale)
        current = entry_store.find_entry(db, key=item.key, locale=locale)
        meta = {"page": item.page, "section": item.section, "description": item.description}

        if current is None:
            entry = create_entry(db, key=item.key, value=item.value, locale=locale, actor_id=actor_id, **meta)
            publish_entry(db, entry.id, actor_id=actor_id)
            report.created += 1
            log.info("seed created %s::%s", locale, item.key)
            continue

        if current.status != "published":
            update_entry(
                db, current.id, actor_id=actor_id, value=item.value,
                status="published", is_active=True, **meta,
            )
            report.updated += 1
            log.info("seed republished %s::%s", locale, item.key)
            continue

        if overwrite and current.value != item.value:
            update_entry(db, current.id, actor_id=actor_id, value=item.value, **meta)
            report.updated += 1
            log.info("seed overwrote %s::%s", locale, item.key)
            continue

        report.skipped += 1
    return report
