"""Timer package."""

from .base import PhaseTimer, TimerState, TICK_INTERVAL_MS, SETTLE_DELAY_MS
from .breathing import BreathingEngine
from .config import (
    BreathingConfig,
    ConfigurationError,
    EmptySequenceError,
    HeadToHeadConfig,
    IntervalConfig,
    StopwatchConfig,
    WorkoutMode,
    breathing_config_from_dict,
    config_from_dict,
    config_to_dict,
)
from .engine import WorkoutEngine
from .sequence import (
    BreathingPhase,
    BreathingPhaseKind,
    HeadToHeadPhase,
    IntervalPhase,
    PhaseKind,
    Sequence,
    build_breathing_sequence,
    build_sequence,
)
from .stopwatch import LapRecord, Stopwatch

__all__ = [
    "PhaseTimer",
    "TimerState",
    "TICK_INTERVAL_MS",
    "SETTLE_DELAY_MS",
    "BreathingEngine",
    "BreathingConfig",
    "ConfigurationError",
    "EmptySequenceError",
    "HeadToHeadConfig",
    "IntervalConfig",
    "StopwatchConfig",
    "WorkoutMode",
    "breathing_config_from_dict",
    "config_from_dict",
    "config_to_dict",
    "WorkoutEngine",
    "BreathingPhase",
    "BreathingPhaseKind",
    "HeadToHeadPhase",
    "IntervalPhase",
    "PhaseKind",
    "Sequence",
    "build_breathing_sequence",
    "build_sequence",
    "LapRecord",
    "Stopwatch",
]
