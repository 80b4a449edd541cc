"""Declarative base shared by all models (alembic target_metadata)."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()
