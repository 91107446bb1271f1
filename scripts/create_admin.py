# scripts/create_admin.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

# --- Ensure repo root is on sys.path so "sitecopy.*" imports work when run as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import select
from sqlalchemy.orm import Session

from sitecopy.db.session import SessionLocal
from sitecopy.models.user import User
from sitecopy.security.jwt import create_access_token


def get_or_create_admin(
    db: Session,
    *,
    email: str,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    role: str = "admin",
) -> User:
    u = db.scalar(select(User).where(User.email == email))
    if u:
        u.role = role
        u.is_active = True
    else:
        u = User(email=email, first_name=first_name, last_name=last_name, role=role, is_active=True)
        db.add(u)
    db.flush()
    return u


def run(email: str, first_name: Optional[str], last_name: Optional[str], role: str) -> None:
    db: Session = SessionLocal()
    try:
        u = get_or_create_admin(db, email=email, first_name=first_name, last_name=last_name, role=role)
        db.commit()
        print(f"[OK] User id={u.id} email={u.email} role={u.role}")
        print(f"[TOKEN] {create_access_token(u.id)}")
    finally:
        db.close()


def main():
    ap = argparse.ArgumentParser(
        description="Create (or promote) an admin user and print an access token.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--email", required=True)
    ap.add_argument("--first-name", default=None)
    ap.add_argument("--last-name", default=None)
    ap.add_argument("--role", default="admin", choices=["admin", "superadmin"])
    args = ap.parse_args()
    run(args.email, args.first_name, args.last_name, args.role)


if __name__ == "__main__":
    main()
