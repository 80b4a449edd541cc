#!/usr/bin/env python3
"""
Quick checks so the backend can start. Run from repo root or backend/:
  python backend/scripts/check_backend.py
  # or: cd backend && python scripts/check_backend.py
"""
import os
import sys
from pathlib import Path

# Run from backend/
backend_dir = Path(__file__).resolve().parent.parent
os.chdir(backend_dir)
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))


def main():
    errors = []

    # 1) .env
    env_file = backend_dir / ".env"
    if not env_file.exists():
        errors.append("backend/.env missing. Copy from backend/.env.example and set DATABASE_URL, etc.")
    else:
        print("OK  .env exists")

    # 2) DB connection and schema
    try:
        from sqlalchemy import inspect, text

        from app.db.session import engine
        from app.db.tables import ALL_TABLE_NAMES

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("OK  Database connection (DATABASE_URL)")
        missing = set(ALL_TABLE_NAMES) - set(inspect(engine).get_table_names())
        if missing:
            errors.append(f"Missing tables {sorted(missing)}; run: alembic upgrade head")
            print("FAIL Schema: missing", ", ".join(sorted(missing)))
        else:
            print("OK  Schema (all matchmaking tables present)")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # 3) Matchmaking config snapshot
    try:
        from app.core.matchmaking_config import get_matchmaking_config

        cfg = get_matchmaking_config()
        print(
            f"OK  Matchmaking config (min players {cfg.min_players}, "
            f"sessions {cfg.min_session_minutes}-{cfg.max_session_minutes} min, target {cfg.target_session_minutes})"
        )
    except Exception as e:
        errors.append(f"Config: {e}")
        print("FAIL Config:", e)

    # 4) Discord webhook (optional)
    from app.config import settings

    if settings.discord_webhook_url:
        print("OK  DISCORD_WEBHOOK_URL set")
    else:
        print("--  DISCORD_WEBHOOK_URL not set; session notices are skipped")

    # 5) App import (catches missing deps, bad imports)
    try:
        from app.main import app  # noqa: F401
        print("OK  App import (app.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)
        print("\nFix the above, then run:")
        print("  cd backend && uvicorn app.main:app --reload --host 0.0.0.0 --port 8000")
        return 1

    # 6) Port 8000
    try:
        import socket
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 8000))
        print("OK  Port 8000 is free")
    except OSError:
        errors.append("Port 8000 is in use. Stop the other process or use another port (e.g. --port 8001).")
        print("FAIL Port 8000 is in use")

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        return 1

    print("\nAll checks passed. Start with: cd backend && uvicorn app.main:app --reload")
    return 0


if __name__ == "__main__":
    sys.exit(main())
