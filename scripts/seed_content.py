# scripts/seed_content.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# --- Ensure repo root is on sys.path so "sitecopy.*" imports work when run as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy.orm import Session

from sitecopy.core.logging import configure_logging
from sitecopy.db.session import SessionLocal
from sitecopy.seeds.content_loader import DEFAULT_KEYS_PATH, load_seed_file, seed_default_keys


def run(path: Path = DEFAULT_KEYS_PATH, *, overwrite: bool = False, actor_id: int | None = None) -> None:
    items = load_seed_file(path)
    db: Session = SessionLocal()
    try:
        report = seed_default_keys(db, items, actor_id=actor_id, overwrite=overwrite)
    finally:
        db.close()
    print(
        f"[OK] created={report.created} updated={report.updated} "
        f"skipped={report.skipped} total={report.total}"
    )


def main():
    ap = argparse.ArgumentParser(
        description="Create and publish the default site copy keys.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--file", default=str(DEFAULT_KEYS_PATH), help="JSON file with the keys")
    ap.add_argument("--overwrite", action="store_true", help="Rewrite published keys whose value changed")
    ap.add_argument("--actor-id", type=int, default=None, help="User id recorded as updatedBy")
    args = ap.parse_args()

    configure_logging()
    run(Path(args.file), overwrite=args.overwrite, actor_id=args.actor_id)


if __name__ == "__main__":
    main()
