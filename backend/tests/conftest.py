import os

# Before any app import: settings and the module-level engine read these
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["DISCORD_WEBHOOK_URL"] = ""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.db.base import Base
from app.services import events
from app.services.matchmaking.types import Game
from tests.helpers import CONFIG, at


@pytest.fixture
def config():
    return CONFIG


@pytest.fixture
def now():
    """Early morning of the test day; test windows sit later that day."""
    return at(8)


@pytest.fixture
def game():
    return Game(id="g1", title="Deep Rock Galactic", min_players=2, max_players=4)


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(db_engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def _no_event_subscribers():
    events.clear_subscribers()
    yield
    events.clear_subscribers()
