"""Read-only presentation helpers.

Pure functions that turn timer state into the strings, colours and sizes a
front end shows.  Nothing here mutates a timer.
"""

from __future__ import annotations

from .timer.breathing import BreathingEngine
from .timer.config import HeadToHeadConfig, IntervalConfig
from .timer.engine import WorkoutEngine
from .timer.sequence import BreathingPhaseKind, PhaseKind


# ── labels ────────────────────────────────────────────────────────────────

PHASE_LABELS: dict[PhaseKind, str] = {
    PhaseKind.SETUP: "Setup",
    PhaseKind.WARMUP: "Warm-up",
    PhaseKind.WORK: "Work",
    PhaseKind.REST: "Rest",
    PhaseKind.LONG_REST: "Long Rest",
}

BREATHING_LABELS: dict[BreathingPhaseKind, str] = {
    BreathingPhaseKind.BREATH_IN: "Breathe In",
    BreathingPhaseKind.INHALED_HOLD: "Hold",
    BreathingPhaseKind.BREATH_OUT: "Breathe Out",
    BreathingPhaseKind.EXHALED_HOLD: "Hold",
}

# ── colours ───────────────────────────────────────────────────────────────

PERSON_COLORS = (
    "#4CAF50",  # green
    "#2196F3",  # blue
    "#FF9800",  # orange
    "#9C27B0",  # purple
    "#F44336",  # red
    "#009688",  # teal
    "#E91E63",  # pink
    "#FFC107",  # amber
    "#3F51B5",  # indigo
    "#00BCD4",  # cyan
)

BREATHING_READY_COLOR = "#C8A8E9"
BREATHING_COLORS: dict[BreathingPhaseKind, str] = {
    BreathingPhaseKind.BREATH_IN: "#2196F3",
    BreathingPhaseKind.INHALED_HOLD: "#4CAF50",
    BreathingPhaseKind.BREATH_OUT: "#FF9800",
    BreathingPhaseKind.EXHALED_HOLD: "#9C27B0",
}

CIRCLE_MIN_PX = 130
CIRCLE_MAX_PX = 280


# ── formatting ────────────────────────────────────────────────────────────


def format_time(seconds: float) -> str:
    """``MM:SS.cc`` with centiseconds; negative input shows as zero."""
    total_cs = int(max(0.0, seconds) * 100 + 1e-6)
    mins, rem_cs = divmod(total_cs, 6000)
    secs, cs = divmod(rem_cs, 100)
    return f"{mins:02d}:{secs:02d}.{cs:02d}"


def person_color(person: int) -> str:
    """Colour for a 1-based participant; cycles after ten people."""
    if person < 1:
        return PERSON_COLORS[0]
    return PERSON_COLORS[(person - 1) % len(PERSON_COLORS)]


# ── workout ───────────────────────────────────────────────────────────────


def phase_label(engine: WorkoutEngine) -> str:
    if engine.is_completed:
        return "Complete"
    phase = engine.current_phase
    if phase is None:
        return "Ready"
    return PHASE_LABELS[phase.kind]


def timer_text(engine: WorkoutEngine) -> str:
    if engine.current_phase is None:
        return format_time(0)
    return format_time(engine.time_remaining)


def round_info(engine: WorkoutEngine) -> str:
    """``Round 2 of 3`` while inside a round, otherwise a short status."""
    if engine.is_completed:
        return "Workout Complete!"
    config = engine.config
    rnd = engine.current_round
    if rnd <= 0 or config is None:
        return ""
    return f"Round {rnd} of {config.number_of_rounds}"


def set_info(engine: WorkoutEngine) -> str:
    """Per-phase detail line.

    Interval work shows ``Set N of S``; a rest announces the set it leads
    into (``Rest before Set N of S``).  Head-to-head shows whose turn it is.
    """
    phase = engine.current_phase
    config = engine.config
    if phase is None or config is None or engine.current_round <= 0:
        return ""

    if isinstance(config, HeadToHeadConfig):
        person = engine.current_person
        if person is None:
            return ""
        return f"Person {person} of {config.number_of_people}"

    if not isinstance(config, IntervalConfig):
        return ""
    sets = config.sets_per_round
    if phase.kind == PhaseKind.WORK:
        return f"Set {engine.current_set} of {sets}"
    if phase.kind == PhaseKind.REST:
        next_set = engine.next_set
        if next_set is not None and 0 < next_set <= sets:
            return f"Rest before Set {next_set} of {sets}"
        return f"Set {engine.current_set} - Rest"
    if phase.kind == PhaseKind.LONG_REST:
        return "Rest between rounds"
    return ""


def progress_percent(engine: WorkoutEngine) -> float:
    return round(engine.progress_fraction * 100, 2)


# ── breathing ─────────────────────────────────────────────────────────────


def breathing_label(engine: BreathingEngine) -> str:
    phase = engine.current_phase
    return BREATHING_LABELS[phase.kind] if phase is not None else "Ready"


def breathing_color(engine: BreathingEngine) -> str:
    phase = engine.current_phase
    if phase is None:
        return BREATHING_READY_COLOR
    return BREATHING_COLORS[phase.kind]


def circle_size(expansion: float) -> float:
    """Breathing circle diameter in pixels for an expansion of 0.0 → 1.0."""
    expansion = max(0.0, min(1.0, expansion))
    return CIRCLE_MIN_PX + (CIRCLE_MAX_PX - CIRCLE_MIN_PX) * expansion
