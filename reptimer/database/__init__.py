"""Database package."""

from .db import configure_engine, get_session, init_db
from .models import BreathingPreset, WorkoutPreset

__all__ = ["configure_engine", "get_session", "init_db", "BreathingPreset", "WorkoutPreset"]
