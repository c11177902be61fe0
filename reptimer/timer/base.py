"""Shared phase-timer machinery for the workout and breathing engines.

States
------
READY       No run loaded — waiting for ``start()``.
RUNNING     Counting the current phase down on every tick.
PAUSED      Ticks ignored; the run and its position are kept.
COMPLETED   Sequence exhausted (workouts only).  Terminal until reset.

Transitions
-----------
READY → RUNNING                 (start)
RUNNING → PAUSED                (pause)
PAUSED → RUNNING                (resume)
RUNNING → COMPLETED             (last phase settled)
Any → READY                     (reset)

Phase boundaries
----------------
When the remaining time of a phase hits zero the timer enters a
*transition*: ``phase_completed`` fires once, ticks are ignored, and a
single-shot settle timer (500 ms) is armed.  When it fires the next phase
is loaded and ``phase_loaded`` fires.  ``reset()`` stops the settle timer,
so a cancelled transition never loads anything.

Pausing during a transition suspends the settle timer too; ``resume()``
re-arms it with whatever was left.

Times are tracked internally in whole milliseconds so that repeated
10 ms ticks sum exactly.
"""

from __future__ import annotations

import logging
from enum import Enum

from PyQt6.QtCore import QElapsedTimer, QObject, QTimer, pyqtSignal

from .config import EmptySequenceError
from .sequence import Phase, Sequence

logger = logging.getLogger(__name__)


# ── enums / constants ─────────────────────────────────────────────────────


class TimerState(Enum):
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


TICK_INTERVAL_MS = 10
SETTLE_DELAY_MS = 500


# ── base timer ────────────────────────────────────────────────────────────


class PhaseTimer(QObject):
    """Counts down the phases of a :class:`Sequence`.

    Subclasses decide what happens after a phase settles (``_advance``)
    and how to bail out of a broken run (``_fail_safe``).

    Signals
    -------
    ticked(time_remaining: float)
        Emitted after every tick that moved the clock.
    state_changed(new_state: TimerState)
    started()
        Emitted once when a run begins, before the first ``phase_loaded``.
    phase_completed(kind)
        The current phase ran out.  Exactly once per phase boundary.
    phase_loaded(index: int, phase)
        A phase became current (including the first one).
    """

    ticked = pyqtSignal(float)
    state_changed = pyqtSignal(object)
    started = pyqtSignal()
    phase_completed = pyqtSignal(object)
    phase_loaded = pyqtSignal(int, object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        autotick: bool = True,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        settle_delay_ms: int = SETTLE_DELAY_MS,
    ) -> None:
        super().__init__(parent)

        # ── configuration ─────────────────────────────────────────────
        self._autotick: bool = autotick
        self._settle_delay_ms: int = settle_delay_ms

        # ── run state ─────────────────────────────────────────────────
        self._state: TimerState = TimerState.READY
        self._sequence: Sequence | None = None
        self._index: int = 0
        self._remaining_ms: int = 0
        self._elapsed_ms: int = 0
        self._transitioning: bool = False
        self._settle_remaining_ms: int | None = None

        # ── tick driver ───────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(tick_interval_ms)
        self._qt_timer.timeout.connect(self._on_tick)
        self._clock = QElapsedTimer()

        # ── settle delay ──────────────────────────────────────────────
        self._settle_timer = QTimer(self)
        self._settle_timer.setSingleShot(True)
        self._settle_timer.timeout.connect(self._on_settle_elapsed)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def sequence(self) -> Sequence | None:
        return self._sequence

    @property
    def current_phase_index(self) -> int:
        return self._index

    @property
    def current_phase(self) -> Phase | None:
        """The phase being counted, or ``None`` outside a live run."""
        if self._sequence is None or not self.is_running:
            return None
        return self._sequence[self._index]

    @property
    def time_remaining(self) -> float:
        """Seconds left in the current phase."""
        return self._remaining_ms / 1000

    @property
    def elapsed_time(self) -> float:
        """Seconds counted since ``start()`` (settle delays excluded)."""
        return self._elapsed_ms / 1000

    @property
    def total_duration(self) -> int:
        return self._sequence.total_duration if self._sequence else 0

    @property
    def phase_progress(self) -> float:
        """0.0 → 1.0 through the current phase."""
        phase = self.current_phase
        if phase is None or phase.duration_ms <= 0:
            return 0.0
        return max(0.0, min(1.0, 1 - self._remaining_ms / phase.duration_ms))

    @property
    def is_running(self) -> bool:
        """True while a run is live, paused or not."""
        return self._state in (TimerState.RUNNING, TimerState.PAUSED)

    @property
    def is_paused(self) -> bool:
        return self._state == TimerState.PAUSED

    @property
    def is_transitioning(self) -> bool:
        return self._transitioning

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self, sequence: Sequence) -> None:
        """Begin counting *sequence* from its first phase.

        Only valid from READY.  Raises :class:`EmptySequenceError` without
        touching any state when *sequence* has no phases.
        """
        if sequence is None or len(sequence) == 0:
            raise EmptySequenceError("Invalid configuration: no phases to run")
        if self._state != TimerState.READY:
            logger.debug("start() ignored in state %s", self._state.value)
            return

        self._sequence = sequence
        self._index = 0
        self._elapsed_ms = 0
        self._transitioning = False
        self._settle_remaining_ms = None

        self._set_state(TimerState.RUNNING)
        self.started.emit()
        self._load_phase(0)

        if self._autotick and self._state == TimerState.RUNNING:
            self._clock.start()
            self._qt_timer.start()

    def tick(self, dt: float) -> None:
        """Advance the clock by *dt* seconds.

        No-op unless RUNNING and not mid-transition.  The remaining time
        is floored at zero and reaching zero starts the transition.
        """
        if self._state != TimerState.RUNNING or self._transitioning:
            return
        if self._remaining_ms <= 0:
            return

        consumed = min(max(0, round(dt * 1000)), self._remaining_ms)
        self._remaining_ms -= consumed
        self._elapsed_ms += consumed
        self.ticked.emit(self.time_remaining)

        # A slot may have reset us while handling the signal.  A paused
        # run still starts its transition; the settle delay waits for resume.
        if not self.is_running or self._sequence is None:
            return
        if self._remaining_ms <= 0:
            self._begin_transition()

    def pause(self) -> None:
        if self._state != TimerState.RUNNING:
            return
        self._qt_timer.stop()
        if self._settle_timer.isActive():
            self._settle_remaining_ms = max(0, self._settle_timer.remainingTime())
            self._settle_timer.stop()
        self._set_state(TimerState.PAUSED)

    def resume(self) -> None:
        if self._state != TimerState.PAUSED:
            return
        self._set_state(TimerState.RUNNING)
        if self._transitioning and self._settle_remaining_ms is not None:
            self._settle_timer.start(self._settle_remaining_ms)
            self._settle_remaining_ms = None
        if self._autotick:
            self._clock.start()
            self._qt_timer.start()

    def toggle_pause(self) -> None:
        if self._state == TimerState.PAUSED:
            self.resume()
        else:
            self.pause()

    def reset(self) -> None:
        """Cancel any pending transition and return to READY."""
        self._qt_timer.stop()
        self._settle_timer.stop()
        self._settle_remaining_ms = None
        self._transitioning = False
        self._sequence = None
        self._index = 0
        self._remaining_ms = 0
        self._elapsed_ms = 0
        self._set_state(TimerState.READY)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        self.tick(self._clock.restart() / 1000)

    def _begin_transition(self) -> None:
        self._transitioning = True
        phase = self._sequence[self._index]
        self.phase_completed.emit(phase.kind)

        # A slot may have reset or paused us while handling the signal.
        if not self._transitioning:
            return
        if self._state == TimerState.PAUSED:
            self._settle_remaining_ms = self._settle_delay_ms
            return
        self._settle_remaining_ms = None
        self._settle_timer.start(self._settle_delay_ms)

    def _on_settle_elapsed(self) -> None:
        if not self._transitioning or self._state != TimerState.RUNNING:
            return
        self._transitioning = False
        self._advance()

    def _load_phase(self, index: int) -> None:
        if self._state == TimerState.READY:
            return
        if self._sequence is None or not 0 <= index < len(self._sequence):
            logger.warning(
                "Invalid phase index %d of %d",
                index, len(self._sequence) if self._sequence else 0,
            )
            self._fail_safe()
            return

        phase = self._sequence[index]
        if phase.duration_ms <= 0:
            logger.warning("Phase %d has no duration: %r", index, phase)
            self._fail_safe()
            return

        self._index = index
        self._remaining_ms = phase.duration_ms
        logger.debug("Phase %d loaded: %r", index, phase)
        self.phase_loaded.emit(index, phase)

    def _set_state(self, new_state: TimerState) -> None:
        self._state = new_state
        self.state_changed.emit(new_state)

    # ── subclass hooks ────────────────────────────────────────────────

    def _advance(self) -> None:
        """Move on after the settle delay of the current phase."""
        raise NotImplementedError

    def _fail_safe(self) -> None:
        """Terminate a run whose sequence turned out to be unusable."""
        raise NotImplementedError
