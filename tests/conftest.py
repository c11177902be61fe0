"""Shared pytest fixtures for RepTimer tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from reptimer.database.db import configure_engine, init_db
from reptimer.timer.breathing import BreathingEngine
from reptimer.timer.engine import WorkoutEngine
from reptimer.timer.stopwatch import Stopwatch


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def engine(qapp):
    """Fresh WorkoutEngine driven by hand (no internal tick timer)."""
    return WorkoutEngine(parent=None, autotick=False)


@pytest.fixture
def fast_engine(qapp):
    """WorkoutEngine with a short settle delay for event-loop tests."""
    return WorkoutEngine(parent=None, autotick=False, settle_delay_ms=50)


@pytest.fixture
def breathing(qapp):
    return BreathingEngine(parent=None, autotick=False)


@pytest.fixture
def stopwatch(qapp):
    return Stopwatch(parent=None, autotick=False)
