from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from sitecopy.core.settings import settings
from sitecopy.schemas.content import ContentValueOut
from sitecopy.services import entry_store
from sitecopy.services.content_cache import ContentCache, content_cache

log = logging.getLogger(__name__)


def lookup_value(
    db: Session,
    *,
    key: str,
    locale: Optional[str] = None,
    cache: ContentCache = content_cache,
) -> Optional[ContentValueOut]:
    """
    Lectura pública read-through:
    - hit  → valor cacheado (from_cache=True), sin tocar la base
    - miss → findPublished; si existe se cachea y se devuelve
    - nada publicado → None (los negativos no se cachean)
    """
    loc = (locale or "").strip() or settings.DEFAULT_LOCALE
    if settings.SUPPORTED_LOCALES and loc not in settings.SUPPORTED_LOCALES:
        log.debug("content miss %s::%s (unsupported locale)", loc, key)
        return None

    cached = cache.get(loc, key)
    if cached is not None:
        return ContentValueOut(key=key, locale=loc, value=cached, from_cache=True)

    # generación antes de leer: una invalidación posterior descarta el put
    generation = cache.generation(loc, key)
    entry = entry_store.find_published(db, key=key, locale=loc)
    if entry is None:
        log.debug("content miss %s::%s", loc, key)
        return None

    if not cache.put_if_current(loc, key, entry.value, generation):
        log.debug("content %s::%s changed during lookup, not cached", loc, key)
    return ContentValueOut(key=key, locale=loc, value=entry.value, from_cache=False)
