"""
FastAPI app entrypoint.

Squad scheduling: availability in, planned game sessions out. A background scheduler re-plans
every few minutes and sweeps sessions for due Discord notices.
"""
import logging
import threading
from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from app.api.routes import availability, games, matchmaking, preferences, sessions
from app.config import settings
from app.core.constants import (
    MATCHMAKING_INTERVAL_SECONDS,
    MATCHMAKING_JOB_ID,
    NOTIFICATION_SWEEP_INTERVAL_SECONDS,
    NOTIFICATION_SWEEP_JOB_ID,
)
from app.scheduler.matchmaking_job import run_matchmaking_job
from app.scheduler.notification_sweep_job import run_notification_sweep_job
from app.services import events
from app.services.notification_listener import handle_session_updated

logger = logging.getLogger(__name__)

_scheduler = BackgroundScheduler()


@asynccontextmanager
async def lifespan(app: FastAPI):
    events.subscribe(handle_session_updated)
    _scheduler.add_job(
        run_matchmaking_job,
        "interval",
        seconds=MATCHMAKING_INTERVAL_SECONDS,
        id=MATCHMAKING_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    _scheduler.add_job(
        run_notification_sweep_job,
        "interval",
        seconds=NOTIFICATION_SWEEP_INTERVAL_SECONDS,
        id=NOTIFICATION_SWEEP_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    _scheduler.start()
    app.state.scheduler = _scheduler

    # One pass on startup so sessions exist before the first interval elapses
    threading.Thread(target=run_matchmaking_job, daemon=True).start()
    logger.info(
        "Backend ready; matchmaking every %ss, notification sweep every %ss",
        MATCHMAKING_INTERVAL_SECONDS, NOTIFICATION_SWEEP_INTERVAL_SECONDS,
    )
    yield
    _scheduler.shutdown(wait=False)
    events.clear_subscribers()


app = FastAPI(title="SquadSync", version="0.1.0", lifespan=lifespan)

# CORS: dev origins + optional CORS_ORIGINS (comma-separated) for a deployed frontend
_cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.cors_origins:
    _cors_origins.extend(o.strip() for o in settings.cors_origins.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(matchmaking.router, prefix="/api/matchmaking", tags=["matchmaking"])
app.include_router(sessions.router, prefix="/api/sessions", tags=["sessions"])
app.include_router(availability.router, prefix="/api/availability", tags=["availability"])
app.include_router(games.router, prefix="/api/games", tags=["games"])
app.include_router(preferences.router, prefix="/api/preferences", tags=["preferences"])


@app.get("/", include_in_schema=False)
def root():
    return {"message": "SquadSync API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
