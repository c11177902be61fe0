"""Workout and breathing presets for RepTimer.

Built-in breathing catalog
--------------------------
Thirteen patterns in four categories (in / hold / out / hold, seconds):

    Calming     Box Breathing 4-4-4-4, Relaxed Box 5-5-5-5,
                4-6 Breathing 4-0-6-0, Extended Exhale 4-0-8-0
    Focus       Focus Box 5-5-5-5, Tactical Focus 4-4-6-2,
                Equal Breathing 6-0-6-0
    Energizing  Stimulating Breath 6-0-4-0, Wake-Up Rhythm 4-2-4-0,
                Power Breathing 5-5-3-2
    Sleep       4-7-8 Breathing 4-7-8-0, Slow Drift 6-2-8-2,
                Long Exhale Sleep 4-0-10-0

Persistence
-----------
User presets are stored in the ``workout_presets`` and
``breathing_presets`` tables.  ``PresetStore`` handles save (upsert by
name), list, load and delete.  Custom breathing presets may not reuse a
built-in name.
"""

from __future__ import annotations

from dataclasses import dataclass

from .database.db import get_session
from .database.models import BreathingPreset, WorkoutPreset
from .timer.config import (
    BreathingConfig,
    HeadToHeadConfig,
    IntervalConfig,
    WorkoutConfig,
    WorkoutMode,
    config_from_dict,
    mode_of,
)


# ── errors ────────────────────────────────────────────────────────────────


class PresetError(ValueError):
    pass


class PresetNotFoundError(PresetError):
    pass


class ReservedPresetNameError(PresetError):
    """A custom breathing preset tried to take a built-in name."""


# ── built-in catalog ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class BreathingPresetDef:
    category: str
    name: str
    config: BreathingConfig
    description: str
    use_case: str


def _bp(category: str, name: str, pattern: tuple[int, int, int, int],
        description: str, use_case: str) -> BreathingPresetDef:
    breath_in, inhaled_hold, breath_out, exhaled_hold = pattern
    return BreathingPresetDef(
        category=category,
        name=name,
        config=BreathingConfig(
            name=name,
            breath_in=breath_in,
            inhaled_hold=inhaled_hold,
            breath_out=breath_out,
            exhaled_hold=exhaled_hold,
        ),
        description=description,
        use_case=use_case,
    )


BUILT_IN_BREATHING_PRESETS: list[BreathingPresetDef] = [
    # ── Calming ─────────────────────────────────────────────────────────
    _bp("Calming", "Box Breathing", (4, 4, 4, 4),
        "Stress reduction, emotional control", "Anxiety, grounding"),
    _bp("Calming", "Relaxed Box", (5, 5, 5, 5),
        "Deep calming", "Meditation, nervous system reset"),
    _bp("Calming", "4-6 Breathing", (4, 0, 6, 0),
        "Relaxation", "Mild stress, beginners"),
    _bp("Calming", "Extended Exhale", (4, 0, 8, 0),
        "Strong calming", "Panic, acute stress"),

    # ── Focus ───────────────────────────────────────────────────────────
    _bp("Focus", "Focus Box", (5, 5, 5, 5),
        "Concentration", "Work, studying"),
    _bp("Focus", "Tactical Focus", (4, 4, 6, 2),
        "Calm alertness", "Performance, decision-making"),
    _bp("Focus", "Equal Breathing", (6, 0, 6, 0),
        "Mental balance", "Sustained focus"),

    # ── Energizing ──────────────────────────────────────────────────────
    _bp("Energizing", "Stimulating Breath", (6, 0, 4, 0),
        "Increased energy", "Fatigue, low motivation"),
    _bp("Energizing", "Wake-Up Rhythm", (4, 2, 4, 0),
        "Gentle activation", "Morning use"),
    _bp("Energizing", "Power Breathing", (5, 5, 3, 2),
        "Readiness, alertness", "Pre-task activation"),

    # ── Sleep ───────────────────────────────────────────────────────────
    _bp("Sleep", "4-7-8 Breathing", (4, 7, 8, 0),
        "Sleep induction", "Falling asleep"),
    _bp("Sleep", "Slow Drift", (6, 2, 8, 2),
        "Deep relaxation", "Wind-down, meditation"),
    _bp("Sleep", "Long Exhale Sleep", (4, 0, 10, 0),
        "Nervous system downshift", "Insomnia, racing mind"),
]

BREATHING_CATEGORIES = ("Calming", "Focus", "Energizing", "Sleep")

_BUILT_IN_MAP: dict[str, BreathingPresetDef] = {
    p.name: p for p in BUILT_IN_BREATHING_PRESETS
}


def builtin_breathing_presets(category: str | None = None) -> list[BreathingPresetDef]:
    """All built-in presets, or only those in *category*."""
    if not category:
        return list(BUILT_IN_BREATHING_PRESETS)
    return [p for p in BUILT_IN_BREATHING_PRESETS if p.category == category]


def get_builtin_breathing_preset(name: str) -> BreathingPresetDef | None:
    return _BUILT_IN_MAP.get(name)


# ── store ─────────────────────────────────────────────────────────────────


class PresetStore:
    """Saves and loads user presets in the database."""

    # ── workouts ────────────────────────────────────────────────────

    def save_workout_preset(self, config: WorkoutConfig) -> None:
        """Store *config* under its ``name``, replacing any same-named preset."""
        name = _clean_name(config.name, "Please enter a workout name to save as preset")
        mode = mode_of(config)
        if mode == WorkoutMode.STOPWATCH:
            raise PresetError("Stopwatch mode has nothing to save")

        with get_session() as db:
            record = db.query(WorkoutPreset).filter_by(name=name).first()
            if record is None:
                record = WorkoutPreset(name=name)
                db.add(record)
            record.mode = mode.value
            record.setup_duration = config.setup_duration
            record.work_duration = config.work_duration
            record.number_of_rounds = config.number_of_rounds
            if isinstance(config, IntervalConfig):
                record.warmup_duration = config.warmup_duration
                record.rest_duration = config.rest_duration
                record.long_rest_duration = config.long_rest_duration
                record.sets_per_round = config.sets_per_round
                record.number_of_people = None
            else:
                record.warmup_duration = None
                record.rest_duration = None
                record.long_rest_duration = None
                record.sets_per_round = None
                record.number_of_people = config.number_of_people

    def list_workout_presets(self) -> list[tuple[str, WorkoutMode]]:
        """``(name, mode)`` pairs, in the order they were saved."""
        with get_session() as db:
            return [
                (p.name, WorkoutMode(p.mode))
                for p in db.query(WorkoutPreset).order_by(WorkoutPreset.id).all()
            ]

    def load_workout_preset(self, name: str) -> IntervalConfig | HeadToHeadConfig:
        with get_session() as db:
            record = db.query(WorkoutPreset).filter_by(name=name).first()
            if record is None:
                raise PresetNotFoundError(f"Preset not found: {name!r}")
            data = {
                "name": record.name,
                "setup_duration": record.setup_duration,
                "warmup_duration": record.warmup_duration,
                "work_duration": record.work_duration,
                "rest_duration": record.rest_duration,
                "long_rest_duration": record.long_rest_duration,
                "sets_per_round": record.sets_per_round,
                "number_of_people": record.number_of_people,
                "number_of_rounds": record.number_of_rounds,
            }
            return config_from_dict(record.mode, data)

    def delete_workout_preset(self, name: str) -> bool:
        """Delete *name*; returns ``False`` if there was no such preset."""
        with get_session() as db:
            return db.query(WorkoutPreset).filter_by(name=name).delete() > 0

    # ── breathing ───────────────────────────────────────────────────

    def save_breathing_preset(self, config: BreathingConfig) -> None:
        name = _clean_name(config.name, "Please enter a preset name to save")
        if name in _BUILT_IN_MAP:
            raise ReservedPresetNameError(
                f"{name!r} is reserved for a built-in preset. "
                "Please choose a different name."
            )

        with get_session() as db:
            record = db.query(BreathingPreset).filter_by(name=name).first()
            if record is None:
                record = BreathingPreset(name=name)
                db.add(record)
            record.breath_in = config.breath_in
            record.inhaled_hold = config.inhaled_hold
            record.breath_out = config.breath_out
            record.exhaled_hold = config.exhaled_hold

    def list_breathing_presets(self) -> list[str]:
        with get_session() as db:
            return [
                p.name
                for p in db.query(BreathingPreset).order_by(BreathingPreset.id).all()
            ]

    def load_breathing_preset(self, name: str) -> BreathingConfig:
        """Custom preset *name*, falling back to the built-in catalog."""
        with get_session() as db:
            record = db.query(BreathingPreset).filter_by(name=name).first()
            if record is not None:
                return BreathingConfig(
                    name=record.name,
                    breath_in=record.breath_in,
                    inhaled_hold=record.inhaled_hold,
                    breath_out=record.breath_out,
                    exhaled_hold=record.exhaled_hold,
                )
        builtin = _BUILT_IN_MAP.get(name)
        if builtin is None:
            raise PresetNotFoundError(f"Preset not found: {name!r}")
        return builtin.config

    def delete_breathing_preset(self, name: str) -> bool:
        with get_session() as db:
            return db.query(BreathingPreset).filter_by(name=name).delete() > 0


def _clean_name(name: str, message: str) -> str:
    name = (name or "").strip()
    if not name:
        raise PresetError(message)
    return name
