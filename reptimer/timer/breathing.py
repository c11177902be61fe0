"""Breathing cycle engine.

Same tick/pause/resume/reset contract as the workout engine, but the phase
index wraps around at the end of the sequence: the cycle runs until it is
reset and never completes.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject

from .base import PhaseTimer, TICK_INTERVAL_MS, SETTLE_DELAY_MS
from .config import BreathingConfig
from .sequence import BreathingPhaseKind, build_breathing_sequence

logger = logging.getLogger(__name__)


class BreathingEngine(PhaseTimer):

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
        self._phases_completed: int = 0

    # ── properties ────────────────────────────────────────────────────

    @property
    def phases_completed(self) -> int:
        return self._phases_completed

    @property
    def cycles_completed(self) -> int:
        if not self._sequence:
            return 0
        return self._phases_completed // len(self._sequence)

    @property
    def expansion(self) -> float:
        """How far the breathing circle is expanded, 0.0 → 1.0.

        Grows through breath-in, shrinks through breath-out, and holds at
        full/empty during the inhaled/exhaled holds.
        """
        phase = self.current_phase
        if phase is None:
            return 0.0
        if phase.kind == BreathingPhaseKind.BREATH_IN:
            return self.phase_progress
        if phase.kind == BreathingPhaseKind.INHALED_HOLD:
            return 1.0
        if phase.kind == BreathingPhaseKind.BREATH_OUT:
            return 1.0 - self.phase_progress
        return 0.0

    # ── controls ──────────────────────────────────────────────────────

    def start_breathing(self, config: BreathingConfig) -> None:
        """Validate *config*, build its cycle and start looping."""
        config.validate()
        self.start(build_breathing_sequence(config))

    def reset(self) -> None:
        self._phases_completed = 0
        super().reset()

    # ── internal ──────────────────────────────────────────────────────

    def _advance(self) -> None:
        self._phases_completed += 1
        self._load_phase((self._index + 1) % len(self._sequence))

    def _fail_safe(self) -> None:
        logger.error("Breathing sequence is unusable; resetting")
        self.reset()
