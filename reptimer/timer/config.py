"""Workout and breathing configuration for RepTimer.

A config is built fresh from user input (form, CLI, preset) at the moment a
run starts and is never mutated mid-run.  ``validate()`` is the single gate
between loose user input and the sequence builders, which assume well-formed
values.

Defaults mirror the stock form values::

    interval      setup 10s, warm-up off, work 30s, rest 10s,
                  long rest 60s, 4 sets, 1 round
    head-to-head  setup 10s, work 30s, 3 people, 1 round
    breathing     in 4s, hold off, out 4s, hold off
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, fields
from enum import Enum
from typing import Any, Mapping, Union


# ── errors ────────────────────────────────────────────────────────────────


class ConfigurationError(ValueError):
    """Raised before a run starts when the configuration cannot produce
    a valid sequence.  No engine state is created."""


class EmptySequenceError(ConfigurationError):
    """``start()`` was given a sequence with no phases."""


# ── modes ─────────────────────────────────────────────────────────────────


class WorkoutMode(Enum):
    INTERVAL = "interval"
    HEAD_TO_HEAD = "head_to_head"
    STOPWATCH = "stopwatch"


# ── configs ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class IntervalConfig:
    """Fixed-interval rounds: work/rest sets with a long rest between rounds.

    All durations are whole seconds.  ``0`` disables setup, warm-up, rest
    and long rest.
    """

    name: str = ""
    setup_duration: int = 10
    warmup_duration: int = 0
    work_duration: int = 30
    rest_duration: int = 10
    long_rest_duration: int = 60
    sets_per_round: int = 4
    number_of_rounds: int = 1

    def validate(self) -> None:
        _require_positive(self.work_duration, "Work duration")
        if self.sets_per_round <= 0 or self.number_of_rounds <= 0:
            raise ConfigurationError(
                "Sets per round and number of rounds must be greater than 0"
            )
        _require_non_negative(
            setup_duration=self.setup_duration,
            warmup_duration=self.warmup_duration,
            rest_duration=self.rest_duration,
            long_rest_duration=self.long_rest_duration,
        )


@dataclass(frozen=True)
class HeadToHeadConfig:
    """Participants take consecutive work turns; no rest between them."""

    name: str = ""
    setup_duration: int = 10
    work_duration: int = 30
    number_of_people: int = 3
    number_of_rounds: int = 1

    def validate(self) -> None:
        _require_positive(self.work_duration, "Work duration")
        if self.number_of_people <= 0 or self.number_of_rounds <= 0:
            raise ConfigurationError(
                "Number of people and number of rounds must be greater than 0"
            )
        _require_non_negative(setup_duration=self.setup_duration)


@dataclass(frozen=True)
class StopwatchConfig:
    name: str = ""

    def validate(self) -> None:
        pass


@dataclass(frozen=True)
class BreathingConfig:
    name: str = ""
    breath_in: int = 4
    inhaled_hold: int = 0
    breath_out: int = 4
    exhaled_hold: int = 0

    def validate(self) -> None:
        _require_non_negative(
            breath_in=self.breath_in,
            inhaled_hold=self.inhaled_hold,
            breath_out=self.breath_out,
            exhaled_hold=self.exhaled_hold,
        )
        if self.breath_in <= 0 and self.breath_out <= 0:
            raise ConfigurationError(
                "Breath in or breath out time must be greater than 0"
            )


WorkoutConfig = Union[IntervalConfig, HeadToHeadConfig, StopwatchConfig]

CONFIG_TYPES: dict[WorkoutMode, type] = {
    WorkoutMode.INTERVAL: IntervalConfig,
    WorkoutMode.HEAD_TO_HEAD: HeadToHeadConfig,
    WorkoutMode.STOPWATCH: StopwatchConfig,
}


def mode_of(config: WorkoutConfig) -> WorkoutMode:
    for mode, config_type in CONFIG_TYPES.items():
        if isinstance(config, config_type):
            return mode
    raise ConfigurationError(f"Unknown workout config: {config!r}")


# ── dict conversion ───────────────────────────────────────────────────────


def config_from_dict(
    mode: WorkoutMode | str, data: Mapping[str, Any]
) -> WorkoutConfig:
    """Build a config for *mode* from a loose mapping.

    Unknown keys are ignored, missing keys take the defaults, and numeric
    strings (form values) are coerced to ``int``.
    """
    mode = WorkoutMode(mode)
    return _from_mapping(CONFIG_TYPES[mode], data)


def breathing_config_from_dict(data: Mapping[str, Any]) -> BreathingConfig:
    return _from_mapping(BreathingConfig, data)


def config_to_dict(
    config: WorkoutConfig | BreathingConfig,
) -> dict[str, Any]:
    return asdict(config)


def _from_mapping(config_type: type, data: Mapping[str, Any]):
    kwargs: dict[str, Any] = {}
    for f in fields(config_type):
        if f.name not in data or data[f.name] is None:
            continue
        value = data[f.name]
        if f.name == "name":
            kwargs["name"] = str(value).strip()
            continue
        try:
            kwargs[f.name] = int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"{f.name} must be a whole number of seconds, got {value!r}"
            ) from exc
    return config_type(**kwargs)


# ── helpers ───────────────────────────────────────────────────────────────


def _require_positive(value: int, label: str) -> None:
    if value <= 0:
        raise ConfigurationError(f"{label} must be greater than 0")


def _require_non_negative(**durations: int) -> None:
    for key, value in durations.items():
        if value < 0:
            raise ConfigurationError(f"{key} cannot be negative")
