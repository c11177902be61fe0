"""Translate timer events into audio/vibration cues.

The dispatcher only decides *which* cue an event deserves; playing a tone
or buzzing a motor is left to whatever is connected to ``cue``.

Cue table
---------
- run started            start beep (800 Hz), vibrate [100]
- phase ran out          end beep (400 Hz), vibrate [100]
- interval round starts  round-start double beep (600 Hz), vibrate [200, 100, 200]
- head-to-head hand-over end beep, vibrate [100]
- workout complete       complete beep (500 Hz), vibrate [300, 100, 300, 100, 300]
- lap recorded           end beep, vibrate [50]
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from PyQt6.QtCore import QObject, pyqtSignal

from ..timer.breathing import BreathingEngine
from ..timer.engine import WorkoutEngine
from ..timer.sequence import HeadToHeadPhase, PhaseKind
from ..timer.stopwatch import Stopwatch


class BeepType(Enum):
    START = "start"
    END = "end"
    ROUND_START = "round_start"
    COMPLETE = "complete"


BEEP_FREQUENCIES: dict[BeepType, int] = {
    BeepType.START: 800,
    BeepType.END: 400,
    BeepType.ROUND_START: 600,
    BeepType.COMPLETE: 500,
}

VIBRATION_PATTERNS: dict[str, tuple[int, ...]] = {
    "start": (100,),
    "phase_end": (100,),
    "round_start": (200, 100, 200),
    "complete": (300, 100, 300, 100, 300),
    "lap": (50,),
}


@dataclass(frozen=True)
class Cue:
    """One cue to play.  ``None`` parts are disabled by the user."""

    event: str
    beep: BeepType | None
    vibration: tuple[int, ...] | None

    @property
    def frequency(self) -> int | None:
        return BEEP_FREQUENCIES[self.beep] if self.beep is not None else None

    @property
    def repeats(self) -> int:
        return 2 if self.beep == BeepType.ROUND_START else 1

    def describe(self) -> str:
        parts = [self.event]
        if self.beep is not None:
            parts.append(f"beep {self.frequency}Hz x{self.repeats}")
        if self.vibration is not None:
            parts.append("vibrate " + "-".join(str(ms) for ms in self.vibration))
        return ", ".join(parts)


class CueDispatcher(QObject):
    """Listens to timers and emits ``cue(Cue)`` for each notable event.

    Usage::

        cues = CueDispatcher(parent=self)
        cues.attach_workout(engine)
        cues.cue.connect(player.play)
    """

    cue = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_enabled: bool = True,
        vibration_enabled: bool = True,
    ) -> None:
        super().__init__(parent)
        self._sounds_enabled = sounds_enabled
        self._vibration_enabled = vibration_enabled

    # ── settings ──────────────────────────────────────────────────────

    @property
    def sounds_enabled(self) -> bool:
        return self._sounds_enabled

    def set_sounds_enabled(self, enabled: bool) -> None:
        self._sounds_enabled = enabled

    @property
    def vibration_enabled(self) -> bool:
        return self._vibration_enabled

    def set_vibration_enabled(self, enabled: bool) -> None:
        self._vibration_enabled = enabled

    # ── wiring ────────────────────────────────────────────────────────

    def attach_workout(self, engine: WorkoutEngine) -> None:
        engine.started.connect(lambda: self._emit("start", BeepType.START))
        engine.phase_completed.connect(
            lambda kind: self._emit("phase_end", BeepType.END)
        )
        engine.round_started.connect(
            lambda rnd: self._emit("round_start", BeepType.ROUND_START)
        )
        engine.phase_loaded.connect(self._on_workout_phase_loaded)
        engine.completed.connect(lambda: self._emit("complete", BeepType.COMPLETE))

    def attach_breathing(self, engine: BreathingEngine) -> None:
        engine.started.connect(lambda: self._emit("start", BeepType.START))
        engine.phase_completed.connect(
            lambda kind: self._emit("phase_end", BeepType.END)
        )

    def attach_stopwatch(self, stopwatch: Stopwatch) -> None:
        stopwatch.started.connect(lambda: self._emit("start", BeepType.START))
        stopwatch.lap_recorded.connect(lambda lap: self._emit("lap", BeepType.END))

    # ── internal ──────────────────────────────────────────────────────

    def _on_workout_phase_loaded(self, index: int, phase) -> None:
        # Hand-over to the next person; the first phase is covered by "start".
        if (
            index > 0
            and isinstance(phase, HeadToHeadPhase)
            and phase.kind == PhaseKind.WORK
        ):
            self._emit("phase_end", BeepType.END)

    def _emit(self, event: str, beep: BeepType) -> None:
        if not (self._sounds_enabled or self._vibration_enabled):
            return
        self.cue.emit(Cue(
            event=event,
            beep=beep if self._sounds_enabled else None,
            vibration=VIBRATION_PATTERNS[event] if self._vibration_enabled else None,
        ))
