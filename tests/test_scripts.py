# tests/test_scripts.py
from __future__ import annotations

from sqlalchemy.orm import Session

from scripts.create_admin import get_or_create_admin
from sitecopy.deps.auth import is_admin
from sitecopy.models.user import User


def test_create_admin_is_idempotent(db: Session):
    u = get_or_create_admin(db, email="ops@example.com", first_name="Ops")
    db.commit()
    assert is_admin(u)
    assert u.display_name == "Ops"

    again = get_or_create_admin(db, email="ops@example.com", role="superadmin")
    db.commit()
    assert again.id == u.id
    assert again.role == "superadmin"
    assert db.query(User).count() == 1


def test_create_admin_promotes_existing_user(db: Session, client_user: User):
    assert not is_admin(client_user)
    u = get_or_create_admin(db, email=client_user.email)
    db.commit()
    assert u.id == client_user.id
    assert is_admin(u)
