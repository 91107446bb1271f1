# tests/test_content_cache.py
from __future__ import annotations

import threading

from sitecopy.services.content_cache import ContentCache, make_cache_key


def test_cache_key_is_locale_scoped():
    assert make_cache_key("home.title", "fr-FR") == "fr-FR::home.title"
    assert make_cache_key("home.title", "fr-FR") != make_cache_key("home.title", "en-GB")


def test_get_put_invalidate():
    c = ContentCache()
    assert c.get("fr-FR", "home.title") is None

    c.put("fr-FR", "home.title", "Bonjour")
    c.put("en-GB", "home.title", "Hello")
    assert c.get("fr-FR", "home.title") == "Bonjour"
    assert len(c) == 2

    assert c.invalidate("fr-FR", "home.title") == 1
    assert c.get("fr-FR", "home.title") is None
    assert c.get("en-GB", "home.title") == "Hello"
    # invalidar una clave ausente no falla
    assert c.invalidate("fr-FR", "home.title") == 0


def test_invalidate_all_locales_only_touches_that_key():
    c = ContentCache()
    c.put("fr-FR", "home.title", "Bonjour")
    c.put("en-GB", "home.title", "Hello")
    c.put("fr-FR", "home.title_highlight", "de confiance")

    assert c.invalidate_all_locales("home.title") == 2
    assert c.get("fr-FR", "home.title") is None
    assert c.get("en-GB", "home.title") is None
    assert c.get("fr-FR", "home.title_highlight") == "de confiance"


def test_clear():
    c = ContentCache()
    c.put("fr-FR", "a", "1")
    c.put("fr-FR", "b", "2")
    c.clear()
    assert len(c) == 0


def test_concurrent_writers_keep_the_map_consistent():
    c = ContentCache()

    def worker(n: int):
        for i in range(200):
            c.put("fr-FR", f"k{n}.{i}", str(i))
            if i % 2:
                c.invalidate("fr-FR", f"k{n}.{i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(c) == 8 * 100


def test_put_if_current_skips_after_invalidation():
    c = ContentCache()
    gen = c.generation("fr-FR", "home.title")
    c.invalidate("fr-FR", "home.title")  # escritura entre la lectura y el put
    assert c.put_if_current("fr-FR", "home.title", "viejo", gen) is False
    assert c.get("fr-FR", "home.title") is None

    gen = c.generation("fr-FR", "home.title")
    assert c.put_if_current("fr-FR", "home.title", "nuevo", gen) is True
    assert c.get("fr-FR", "home.title") == "nuevo"


def test_invalidate_all_locales_moves_every_locale_generation():
    c = ContentCache()
    gen_en = c.generation("en-GB", "home.title")
    c.invalidate_all_locales("home.title")
    assert c.put_if_current("en-GB", "home.title", "Hello", gen_en) is False


def test_clear_moves_generations():
    c = ContentCache()
    gen = c.generation("fr-FR", "a")
    c.clear()
    assert c.put_if_current("fr-FR", "a", "1", gen) is False


def test_other_keys_are_not_affected_by_invalidation():
    c = ContentCache()
    gen = c.generation("fr-FR", "a")
    c.invalidate("fr-FR", "b")
    assert c.put_if_current("fr-FR", "a", "1", gen) is True
