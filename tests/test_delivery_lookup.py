# tests/test_delivery_lookup.py
from __future__ import annotations

from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from sitecopy.core.errors import StorageError
from sitecopy.core.settings import settings
from sitecopy.services import entry_store
from sitecopy.services.content_cache import ContentCache, content_cache
from sitecopy.services.delivery_service import lookup_value
from sitecopy.services.publish_service import (
    archive_entry,
    publish_entry,
    unpublish_entry,
    update_entry,
)
from sitecopy.services.versioning_service import create_entry

KEY = "home.hero.subtitle"
LOC = settings.DEFAULT_LOCALE


@pytest.fixture
def published(db: Session):
    e = create_entry(db, key=KEY, value="Spécialisés en droit des étrangers")
    return publish_entry(db, e.id)


def test_draft_is_not_served(db: Session):
    create_entry(db, key=KEY, value="brouillon")
    assert lookup_value(db, key=KEY) is None
    # los negativos no se cachean
    assert content_cache.get(LOC, KEY) is None


def test_published_is_served_then_cached(db: Session, published):
    first = lookup_value(db, key=KEY)
    assert first.value == published.value
    assert first.locale == LOC
    assert first.from_cache is False

    second = lookup_value(db, key=KEY)
    assert second.value == published.value
    assert second.from_cache is True


def test_inactive_published_is_hidden(db: Session, published):
    # forzado a nivel de fila: el servicio no permite published + inactive
    published.is_active = False
    db.commit()
    assert entry_store.find_published(db, key=KEY, locale=LOC) is None
    assert lookup_value(db, key=KEY) is None


@pytest.mark.parametrize("mutate", ["update", "unpublish", "archive"])
def test_mutations_evict_the_cached_value(db: Session, published, mutate):
    lookup_value(db, key=KEY)
    assert content_cache.get(LOC, KEY) is not None

    if mutate == "update":
        update_entry(db, published.id, value="Nouveau sous-titre")
        out = lookup_value(db, key=KEY)
        assert out.value == "Nouveau sous-titre"
        assert out.from_cache is False
    elif mutate == "unpublish":
        unpublish_entry(db, published.id)
        assert lookup_value(db, key=KEY) is None
    else:
        archive_entry(db, published.id)
        assert lookup_value(db, key=KEY) is None


def test_newer_draft_hides_older_publication(db: Session, published):
    archive_entry(db, published.id)
    create_entry(db, key=KEY, value="réécriture")
    assert lookup_value(db, key=KEY) is None


def test_locales_are_separate(db: Session, published):
    assert lookup_value(db, key=KEY, locale="en-GB") is None
    en = create_entry(db, key=KEY, value="Specialists in immigration law", locale="en-GB")
    publish_entry(db, en.id)
    assert lookup_value(db, key=KEY, locale="en-GB").value == "Specialists in immigration law"
    assert lookup_value(db, key=KEY).value == published.value


def test_unsupported_locale_is_a_plain_miss(db: Session, published, monkeypatch):
    monkeypatch.setattr(settings, "SUPPORTED_LOCALES", ["fr-FR"])
    assert lookup_value(db, key=KEY, locale="de-DE") is None


def test_store_failure_on_lookup_propagates(db: Session, monkeypatch):
    def boom(*a, **kw):
        raise StorageError("content store unavailable")

    monkeypatch.setattr(entry_store, "find_published", boom)
    with pytest.raises(StorageError):
        lookup_value(db, key=KEY)
    assert content_cache.get(LOC, KEY) is None


def test_failed_write_leaves_cache_and_row_untouched(db: Session, published, monkeypatch):
    lookup_value(db, key=KEY)

    def failing_commit():
        raise OperationalError("UPDATE content_entries", {}, Exception("statement timeout"))

    monkeypatch.setattr(db, "commit", failing_commit)
    with pytest.raises(StorageError):
        update_entry(db, published.id, value="jamais écrit")
    monkeypatch.undo()

    assert content_cache.get(LOC, KEY) == published.value
    row = entry_store.get_entry(db, published.id)
    assert row.version == 2
    assert row.value == "Spécialisés en droit des étrangers"
    assert len(row.change_history) == 2


def test_lookup_with_explicit_cache(db: Session, published):
    cache = ContentCache()
    lookup_value(db, key=KEY, cache=cache)
    assert cache.get(LOC, KEY) == published.value
    assert content_cache.get(LOC, KEY) is None


def test_write_between_read_and_put_is_not_cached(db: Session, published, monkeypatch):
    original = entry_store.find_published

    def read_then_concurrent_write(db_, *, key, locale):
        entry = original(db_, key=key, locale=locale)
        # el lector ya tiene el valor viejo; otra petición publica uno nuevo
        stale = SimpleNamespace(value=entry.value)
        monkeypatch.setattr(entry_store, "find_published", original)
        update_entry(db_, published.id, value="Nouveau sous-titre")
        return stale

    monkeypatch.setattr(entry_store, "find_published", read_then_concurrent_write)

    out = lookup_value(db, key=KEY)
    assert out.value == "Spécialisés en droit des étrangers"
    assert content_cache.get(LOC, KEY) is None

    after = lookup_value(db, key=KEY)
    assert after.value == "Nouveau sous-titre"
    assert after.from_cache is False
