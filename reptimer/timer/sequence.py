"""Phase variants and the pure sequence builders.

Interval ordering::

    [setup] → [warm-up] → for each round:
        work(1) → [rest(1→2)] → work(2) → … → work(S)
        → [long rest]           (between rounds only)

Head-to-head ordering::

    [setup] → for each round: work(person 1) → … → work(person P)

Breathing ordering::

    [breath in] → [inhaled hold] → [breath out] → [exhaled hold]

Bracketed phases appear only when their duration is positive.  A phase
with a zero duration is never emitted; zero means "feature disabled".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union

from .config import (
    BreathingConfig,
    ConfigurationError,
    HeadToHeadConfig,
    IntervalConfig,
    WorkoutConfig,
    WorkoutMode,
)

logger = logging.getLogger(__name__)


# ── kinds ─────────────────────────────────────────────────────────────────


class PhaseKind(Enum):
    SETUP = "setup"
    WARMUP = "warmup"
    WORK = "work"
    REST = "rest"
    LONG_REST = "long_rest"


class BreathingPhaseKind(Enum):
    BREATH_IN = "breath_in"
    INHALED_HOLD = "inhaled_hold"
    BREATH_OUT = "breath_out"
    EXHALED_HOLD = "exhaled_hold"


# ── phases ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class IntervalPhase:
    """One segment of an interval workout.

    ``round`` is 0 for setup/warm-up.  ``set`` is the set a work phase
    runs or a rest phase follows; ``next_set`` is the set a rest phase
    precedes.  ``None`` means not applicable to this kind.
    """

    kind: PhaseKind
    duration: int
    round: int
    set: int | None = None
    next_set: int | None = None

    @property
    def duration_ms(self) -> int:
        return self.duration * 1000


@dataclass(frozen=True)
class HeadToHeadPhase:
    kind: PhaseKind
    duration: int
    round: int
    person: int | None = None

    @property
    def duration_ms(self) -> int:
        return self.duration * 1000


@dataclass(frozen=True)
class BreathingPhase:
    kind: BreathingPhaseKind
    duration: int

    @property
    def duration_ms(self) -> int:
        return self.duration * 1000


Phase = Union[IntervalPhase, HeadToHeadPhase, BreathingPhase]


# ── sequence ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Sequence:
    """Ordered, immutable phases for one run."""

    phases: tuple[Phase, ...] = ()

    @property
    def total_duration(self) -> int:
        """Sum of all phase durations, in seconds."""
        return sum(phase.duration for phase in self.phases)

    def __len__(self) -> int:
        return len(self.phases)

    def __iter__(self) -> Iterator[Phase]:
        return iter(self.phases)

    def __getitem__(self, index: int) -> Phase:
        return self.phases[index]

    def describe(self) -> str:
        """Compact one-line summary, e.g. ``0:setup R0, 1:work R1 S1``."""
        return ", ".join(
            f"{i}:{_describe_phase(p)}" for i, p in enumerate(self.phases)
        )


def _describe_phase(phase: Phase) -> str:
    if isinstance(phase, BreathingPhase):
        return f"{phase.kind.value} {phase.duration}s"
    text = f"{phase.kind.value} R{phase.round}"
    if isinstance(phase, HeadToHeadPhase):
        if phase.person is not None:
            text += f" P{phase.person}"
    elif phase.set is not None:
        text += f" S{phase.set}"
        if phase.next_set is not None:
            text += f" (next:{phase.next_set})"
    return text


# ── builders ──────────────────────────────────────────────────────────────


def build_sequence(mode: WorkoutMode, config: WorkoutConfig) -> Sequence:
    """Turn a validated workout config into its phase sequence.

    Stopwatch mode has no phases and yields an empty sequence.
    """
    mode = WorkoutMode(mode)
    if mode is WorkoutMode.INTERVAL:
        return build_interval_sequence(config)
    if mode is WorkoutMode.HEAD_TO_HEAD:
        return build_head_to_head_sequence(config)
    return Sequence()


def build_interval_sequence(config: IntervalConfig) -> Sequence:
    if not isinstance(config, IntervalConfig):
        raise ConfigurationError(
            f"Interval mode needs an IntervalConfig, got {type(config).__name__}"
        )
    phases: list[IntervalPhase] = []

    if config.setup_duration > 0:
        phases.append(IntervalPhase(PhaseKind.SETUP, config.setup_duration, 0))
    if config.warmup_duration > 0:
        phases.append(IntervalPhase(PhaseKind.WARMUP, config.warmup_duration, 0))

    sets = config.sets_per_round
    rounds = config.number_of_rounds
    for rnd in range(1, rounds + 1):
        for set_no in range(1, sets + 1):
            phases.append(
                IntervalPhase(PhaseKind.WORK, config.work_duration, rnd, set=set_no)
            )
            if set_no < sets and config.rest_duration > 0:
                phases.append(IntervalPhase(
                    PhaseKind.REST,
                    config.rest_duration,
                    rnd,
                    set=set_no,
                    next_set=set_no + 1,
                ))
        if rnd < rounds and config.long_rest_duration > 0:
            phases.append(
                IntervalPhase(PhaseKind.LONG_REST, config.long_rest_duration, rnd)
            )

    sequence = Sequence(tuple(phases))
    logger.debug(
        "Interval sequence built: %d phases, %ds total: %s",
        len(sequence), sequence.total_duration, sequence.describe(),
    )
    return sequence


def build_head_to_head_sequence(config: HeadToHeadConfig) -> Sequence:
    if not isinstance(config, HeadToHeadConfig):
        raise ConfigurationError(
            f"Head-to-head mode needs a HeadToHeadConfig, got {type(config).__name__}"
        )
    phases: list[HeadToHeadPhase] = []

    if config.setup_duration > 0:
        phases.append(HeadToHeadPhase(PhaseKind.SETUP, config.setup_duration, 0))

    # Rotation is continuous: no rest between people or rounds.
    for rnd in range(1, config.number_of_rounds + 1):
        for person in range(1, config.number_of_people + 1):
            phases.append(HeadToHeadPhase(
                PhaseKind.WORK, config.work_duration, rnd, person=person
            ))

    sequence = Sequence(tuple(phases))
    logger.debug(
        "Head-to-head sequence built: %d phases, %ds total: %s",
        len(sequence), sequence.total_duration, sequence.describe(),
    )
    return sequence


def build_breathing_sequence(config: BreathingConfig) -> Sequence:
    """One breathing cycle.  The engine loops over it indefinitely."""
    phases = [
        BreathingPhase(kind, duration)
        for kind, duration in (
            (BreathingPhaseKind.BREATH_IN, config.breath_in),
            (BreathingPhaseKind.INHALED_HOLD, config.inhaled_hold),
            (BreathingPhaseKind.BREATH_OUT, config.breath_out),
            (BreathingPhaseKind.EXHALED_HOLD, config.exhaled_hold),
        )
        if duration > 0
    ]
    if not phases:
        logger.warning("No breathing phases configured")
    sequence = Sequence(tuple(phases))
    logger.debug("Breathing sequence built: %s", sequence.describe())
    return sequence
