"""Free-running stopwatch with lap splits.

The counting-up counterpart of the workout engine: no phases, no
exhaustion, ticks only add to the elapsed time.  ``stop()`` halts the
clock but keeps the elapsed time and laps, so a later ``start()`` carries
on from where it stopped.  Only ``reset()`` clears them.
"""

from __future__ import annotations

from dataclasses import dataclass

from PyQt6.QtCore import QElapsedTimer, QObject, QTimer, pyqtSignal

from .base import TimerState, TICK_INTERVAL_MS


@dataclass(frozen=True)
class LapRecord:
    lap_number: int
    cumulative_time: float  # seconds since start at the moment of the lap
    lap_duration: float     # seconds since the previous lap (or start)


class Stopwatch(QObject):
    """Counts up and records laps.

    Signals
    -------
    ticked(elapsed_time: float)
    state_changed(new_state: TimerState)
    started()
    lap_recorded(lap: LapRecord)
    """

    ticked = pyqtSignal(float)
    state_changed = pyqtSignal(object)
    started = pyqtSignal()
    lap_recorded = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        autotick: bool = True,
        tick_interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._autotick = autotick
        self._state: TimerState = TimerState.READY
        self._elapsed_ms: int = 0
        self._last_lap_ms: int = 0
        self._laps: list[LapRecord] = []

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(tick_interval_ms)
        self._qt_timer.timeout.connect(self._on_tick)
        self._clock = QElapsedTimer()

    # ── properties ────────────────────────────────────────────────────

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def elapsed_time(self) -> float:
        return self._elapsed_ms / 1000

    @property
    def current_lap_time(self) -> float:
        """Seconds since the last lap mark."""
        return (self._elapsed_ms - self._last_lap_ms) / 1000

    @property
    def laps(self) -> tuple[LapRecord, ...]:
        return tuple(self._laps)

    @property
    def is_running(self) -> bool:
        """True while counting or paused."""
        return self._state in (TimerState.RUNNING, TimerState.PAUSED)

    @property
    def is_paused(self) -> bool:
        return self._state == TimerState.PAUSED

    # ── controls ──────────────────────────────────────────────────────

    def start(self) -> None:
        """Start counting, continuing from any previously stopped time."""
        if self.is_running:
            return
        self._set_state(TimerState.RUNNING)
        self.started.emit()
        self._start_driver()

    def stop(self) -> None:
        """Halt the clock, keeping elapsed time and laps."""
        if not self.is_running:
            return
        self._qt_timer.stop()
        self._set_state(TimerState.READY)

    def pause(self) -> None:
        if self._state != TimerState.RUNNING:
            return
        self._qt_timer.stop()
        self._set_state(TimerState.PAUSED)

    def resume(self) -> None:
        if self._state != TimerState.PAUSED:
            return
        self._set_state(TimerState.RUNNING)
        self._start_driver()

    def toggle_pause(self) -> None:
        if self._state == TimerState.PAUSED:
            self.resume()
        else:
            self.pause()

    def tick(self, dt: float) -> None:
        if self._state != TimerState.RUNNING:
            return
        self._elapsed_ms += max(0, round(dt * 1000))
        self.ticked.emit(self.elapsed_time)

    def record_lap(self) -> LapRecord | None:
        """Split at the current elapsed time.  ``None`` when not running."""
        if not self.is_running:
            return None
        lap = LapRecord(
            lap_number=len(self._laps) + 1,
            cumulative_time=self._elapsed_ms / 1000,
            lap_duration=(self._elapsed_ms - self._last_lap_ms) / 1000,
        )
        self._laps.append(lap)
        self._last_lap_ms = self._elapsed_ms
        self.lap_recorded.emit(lap)
        return lap

    def reset(self) -> None:
        self._qt_timer.stop()
        self._elapsed_ms = 0
        self._last_lap_ms = 0
        self._laps.clear()
        self._set_state(TimerState.READY)

    # ── internal ──────────────────────────────────────────────────────

    def _start_driver(self) -> None:
        if self._autotick:
            self._clock.start()
            self._qt_timer.start()

    def _on_tick(self) -> None:
        self.tick(self._clock.restart() / 1000)

    def _set_state(self, new_state: TimerState) -> None:
        self._state = new_state
        self.state_changed.emit(new_state)
