"""Shared test helpers for RepTimer."""

from reptimer.timer.base import PhaseTimer, TimerState


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def exhaust_phase(timer: PhaseTimer) -> None:
    """Tick the current phase straight down to zero."""
    timer.tick(timer.time_remaining)


def finish_settle(timer: PhaseTimer) -> None:
    """Fire the pending settle delay immediately instead of waiting 500 ms."""
    timer._settle_timer.stop()
    timer._on_settle_elapsed()


def advance_phase(timer: PhaseTimer) -> None:
    exhaust_phase(timer)
    finish_settle(timer)


def run_to_completion(timer: PhaseTimer, limit: int = 1000) -> int:
    """Advance phase by phase until the run leaves RUNNING; returns steps."""
    steps = 0
    while timer.state == TimerState.RUNNING and steps < limit:
        advance_phase(timer)
        steps += 1
    return steps
