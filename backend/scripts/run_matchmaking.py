#!/usr/bin/env python3
"""
Run one matchmaking pass now and print the resulting sessions.
Run: cd backend && python scripts/run_matchmaking.py
"""
import sys
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.db.session import SessionLocal
from app.services.matchmaking_service import run_matchmaking, session_to_dict
from app.services.session_store import SqlMatchmakingStore


def main():
    now = datetime.now(timezone.utc)
    db = SessionLocal()
    try:
        plan = run_matchmaking(db, now=now)
        games = {g.id: g for g in SqlMatchmakingStore(db).list_games()}
        print(f"Pass done: {len(plan.selected)} planned, {len(plan.confirmed)} confirmed, {len(plan.obsolete_ids)} deleted")
        for s in plan.sessions:
            d = session_to_dict(s, games.get(s.game_id), now)
            title = d["game"]["title"] if d["game"] else d["game_id"]
            players = ", ".join(f"{p['user_id']}({p['status']})" for p in d["players"])
            print(f"  [{d['status']}] {title} {d['start_time']} -> {d['end_time']} score={d['score']} players: {players}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
