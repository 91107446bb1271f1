from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sitecopy.core.errors import StorageError
from sitecopy.db.session import get_db

router = APIRouter()


@router.get("/ping")
def ping():
    return {"status": "ok"}


@router.get("/db")
def db_check(db: Session = Depends(get_db)):
    """Ida y vuelta mínima al Entry Store (503 si no responde)."""
    try:
        db.execute(text("select 1")).scalar_one()
    except SQLAlchemyError as e:
        raise StorageError("content store unavailable") from e
    return {"status": "ok", "database": db.get_bind().dialect.name}
