import argparse
import sys
from pathlib import Path

CURRENT_DIR = Path(__file__).resolve().parent
BACKEND_DIR = CURRENT_DIR.parent
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import app.models  # noqa: E402,F401 - register tables on Base.metadata
from app.db import Base, engine, get_db_path  # noqa: E402
from app.demo_seed import DEMO_USERS, seed_demo_data  # noqa: E402


def reset_database(seed: bool = True) -> None:
    db_path = get_db_path()
    if engine.url.drivername.startswith("sqlite") and db_path:
        path = Path(db_path)
        engine.dispose()
        if path.exists():
            print(f"[reset_db] Removing sqlite file: {path}")
            path.unlink()
    else:
        print("[reset_db] Dropping all tables")
        Base.metadata.drop_all(bind=engine)

    print("[reset_db] Creating database schema...")
    Base.metadata.create_all(bind=engine)

    if seed:
        ids = seed_demo_data()
        print(f"[reset_db] Seeded demo project {ids['project_id']}; accounts:")
        for account in DEMO_USERS:
            print(f"  {account['role'].value:<7} {account['email']} / {account['password']}")
    print("[reset_db] Done.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Reset the local development database.")
    parser.add_argument(
        "--no-seed",
        action="store_true",
        help="Reset schema without seeding demo data.",
    )
    args = parser.parse_args()
    reset_database(seed=not args.no_seed)
