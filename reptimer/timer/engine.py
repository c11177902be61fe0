"""Workout timer state machine for RepTimer.

Runs an interval or head-to-head sequence from its first phase to
completion.  See :mod:`reptimer.timer.base` for the state diagram and the
settle-delay rules shared with the breathing engine.

Completion is terminal for a run: further ticks are ignored and
``completed`` fires exactly once.  The caller then either ``restart()``s
the same sequence or ``reset()``s back to READY.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from .base import (
    PhaseTimer,
    TimerState,
    TICK_INTERVAL_MS,
    SETTLE_DELAY_MS,
)
from .config import ConfigurationError, WorkoutConfig, WorkoutMode, mode_of
from .sequence import (
    HeadToHeadPhase,
    IntervalPhase,
    Phase,
    PhaseKind,
    build_sequence,
)

logger = logging.getLogger(__name__)


class WorkoutEngine(PhaseTimer):
    """Drives one interval or head-to-head workout.

    Signals (in addition to :class:`PhaseTimer`'s)
    -------
    round_started(round: int)
        Emitted before ``phase_loaded`` when an interval workout's first
        set of a new round begins after another phase.
    completed()
        The last phase settled.  Fires once per run.
    """

    round_started = pyqtSignal(int)
    completed = pyqtSignal()

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        autotick: bool = True,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        settle_delay_ms: int = SETTLE_DELAY_MS,
    ) -> None:
        super().__init__(
            parent,
            autotick=autotick,
            tick_interval_ms=tick_interval_ms,
            settle_delay_ms=settle_delay_ms,
        )
        self._completing: bool = False
        self._config: WorkoutConfig | None = None

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def config(self) -> WorkoutConfig | None:
        """Config passed to ``start_workout()``, if any."""
        return self._config

    @property
    def is_completed(self) -> bool:
        return self._state == TimerState.COMPLETED

    @property
    def is_completing(self) -> bool:
        return self._completing

    @property
    def progress_fraction(self) -> float:
        """0.0 → 1.0 through the whole workout."""
        total = self.total_duration
        if total <= 0:
            return 0.0
        return max(0.0, min(1.0, self.elapsed_time / total))

    @property
    def current_round(self) -> int:
        """1-based round of the current phase; 0 for setup/warm-up."""
        phase = self.current_phase
        return phase.round if phase is not None else 0

    @property
    def current_set(self) -> int | None:
        phase = self.current_phase
        return phase.set if isinstance(phase, IntervalPhase) else None

    @property
    def next_set(self) -> int | None:
        """For rest phases, the set the rest precedes."""
        phase = self.current_phase
        return phase.next_set if isinstance(phase, IntervalPhase) else None

    @property
    def current_person(self) -> int | None:
        phase = self.current_phase
        return phase.person if isinstance(phase, HeadToHeadPhase) else None

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start_workout(self, mode: WorkoutMode, config: WorkoutConfig) -> None:
        """Validate *config*, build its sequence and start it."""
        mode = WorkoutMode(mode)
        if mode == WorkoutMode.STOPWATCH:
            raise ConfigurationError(
                "Stopwatch mode has no phase sequence; use Stopwatch instead"
            )
        if mode_of(config) != mode:
            raise ConfigurationError(
                f"{type(config).__name__} does not describe a {mode.value} workout"
            )
        config.validate()
        sequence = build_sequence(mode, config)
        if self._state != TimerState.READY:
            logger.debug("start_workout() ignored in state %s", self._state.value)
            return
        self._config = config
        self.start(sequence)

    def restart(self) -> None:
        """Reset and run the current (or just completed) sequence again."""
        sequence, config = self._sequence, self._config
        if sequence is None:
            return
        self.reset()
        self._config = config
        self.start(sequence)

    def reset(self) -> None:
        self._completing = False
        self._config = None
        super().reset()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _advance(self) -> None:
        next_index = self._index + 1
        if next_index >= len(self._sequence):
            self._complete()
            return

        next_phase = self._sequence[next_index]
        if _starts_new_round(next_phase, self._sequence[self._index]):
            self.round_started.emit(next_phase.round)
            if not self.is_running:
                return
        self._load_phase(next_index)

    def _fail_safe(self) -> None:
        self._complete()

    def _complete(self) -> None:
        if self._completing:
            return
        self._completing = True

        self._qt_timer.stop()
        self._settle_timer.stop()
        self._settle_remaining_ms = None
        self._transitioning = False
        self._remaining_ms = 0

        self._set_state(TimerState.COMPLETED)
        logger.info("Workout complete after %.2fs", self.elapsed_time)
        self.completed.emit()


def _starts_new_round(next_phase: Phase, previous: Phase) -> bool:
    return (
        isinstance(next_phase, IntervalPhase)
        and next_phase.kind == PhaseKind.WORK
        and next_phase.set == 1
        and next_phase.round > previous.round
    )
