# sitecopy/db/session.py
from __future__ import annotations

from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from sitecopy.core.settings import settings

ENGINE_URL = settings.SQLALCHEMY_DATABASE_URL


def _connect_args(url: str, timeout_ms: int) -> Dict[str, Any]:
    """
    PostgreSQL: statement_timeout, deadline real por sentencia; al vencer la
    sentencia falla y la escritura se revierte entera.
    SQLite: ``timeout`` es solo la espera máxima por el lock de la base
    (busy timeout), no limita la duración de la sentencia.
    """
    if url.startswith("sqlite"):
        args: Dict[str, Any] = {"check_same_thread": False}
        if timeout_ms > 0:
            args["timeout"] = timeout_ms / 1000.0
        return args
    if url.startswith("postgresql") and timeout_ms > 0:
        return {"options": f"-c statement_timeout={int(timeout_ms)}"}
    return {}


def build_engine(url: str = ENGINE_URL, timeout_ms: int | None = None, **kwargs):
    if timeout_ms is None:
        timeout_ms = settings.DB_STATEMENT_TIMEOUT_MS
    opts: Dict[str, Any] = {"connect_args": _connect_args(url, timeout_ms)}
    if not url.startswith("sqlite"):
        opts.update(pool_pre_ping=True, pool_recycle=1800)  # keep connections fresh on Heroku
    opts.update(kwargs)
    return create_engine(url, **opts)


engine = build_engine()

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
