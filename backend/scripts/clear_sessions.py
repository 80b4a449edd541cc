#!/usr/bin/env python3
"""Delete all planned sessions; the next matchmaking pass re-plans from current availability.
Run from backend: python scripts/clear_sessions.py
"""
import sys
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from app.db.session import SessionLocal
from app.services.admin_service import clear_planned_sessions


def main():
    db = SessionLocal()
    try:
        deleted = clear_planned_sessions(db)
        print("Planned sessions cleared. Rows deleted:")
        for table, count in deleted.items():
            print(f"  {table}: {count}")
    except Exception as e:
        db.rollback()
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
