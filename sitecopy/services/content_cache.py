from __future__ import annotations

import itertools
import threading
from typing import Dict, Optional

from sitecopy.core.settings import settings

SEPARATOR = "::"


def make_cache_key(key: str, locale: Optional[str] = None) -> str:
    return f"{locale or settings.DEFAULT_LOCALE}{SEPARATOR}{key}"


class ContentCache:
    """
    Caché en memoria de valores publicados, clave "<locale>::<key>".

    Sin expiración ni límite de tamaño: una entrada solo desaparece por una
    invalidación ligada a una escritura. Todas las operaciones toman el lock.

    Cada invalidación avanza la generación de la clave. El camino público
    lee la generación antes de ir a la base y guarda con ``put_if_current``:
    si una escritura invalidó entre medias, el valor leído no se cachea.
    """

    def __init__(self) -> None:
        self._store: Dict[str, str] = {}
        # generación por key (todas las locales comparten contador)
        self._generations: Dict[str, int] = {}
        self._ticks = itertools.count(1)
        self._cleared_at = 0
        self._lock = threading.Lock()

    def _bump(self, key: str) -> None:
        self._generations[key] = next(self._ticks)

    def generation(self, locale: str, key: str) -> int:
        with self._lock:
            return max(self._generations.get(key, 0), self._cleared_at)

    def get(self, locale: str, key: str) -> Optional[str]:
        with self._lock:
            return self._store.get(make_cache_key(key, locale))

    def put(self, locale: str, key: str, value: str) -> None:
        with self._lock:
            self._store[make_cache_key(key, locale)] = value

    def put_if_current(self, locale: str, key: str, value: str, generation: int) -> bool:
        with self._lock:
            if max(self._generations.get(key, 0), self._cleared_at) != generation:
                return False
            self._store[make_cache_key(key, locale)] = value
            return True

    def invalidate(self, locale: str, key: str) -> int:
        with self._lock:
            self._bump(key)
            return 1 if self._store.pop(make_cache_key(key, locale), None) is not None else 0

    def invalidate_all_locales(self, key: str) -> int:
        with self._lock:
            self._bump(key)
            doomed = [k for k in self._store if k.split(SEPARATOR, 1)[-1] == key]
            for k in doomed:
                del self._store[k]
            return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._generations.clear()
            self._cleared_at = next(self._ticks)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


content_cache = ContentCache()
