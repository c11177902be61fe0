"""Allow running RepTimer as a module: python -m reptimer.

Headless console runner::

    python -m reptimer interval --work 40 --rest 20 --sets 5 --rounds 3
    python -m reptimer head-to-head --people 4 --work 30
    python -m reptimer stopwatch
    python -m reptimer breathe --preset "Box Breathing"

Workouts quit on completion; the stopwatch and breathing cycle run until
Ctrl+C.  In stopwatch mode, press Enter to record a lap.
"""

import argparse
import logging
import signal
import sys

from PyQt6.QtCore import QCoreApplication, QSocketNotifier, QTimer

from .audio.cues import CueDispatcher
from .display import (
    breathing_label,
    circle_size,
    format_time,
    phase_label,
    round_info,
    set_info,
)
from .presets import PresetError, PresetStore
from .database.db import init_db
from .settings import Settings, load_settings, save_settings
from .timer import (
    BreathingConfig,
    BreathingEngine,
    ConfigurationError,
    HeadToHeadConfig,
    IntervalConfig,
    Stopwatch,
    WorkoutEngine,
    WorkoutMode,
    config_from_dict,
    config_to_dict,
)

logger = logging.getLogger(__name__)

# config field → sub-command option dest
_INTERVAL_ARGS = {
    "setup_duration": "setup",
    "warmup_duration": "warmup",
    "work_duration": "work",
    "rest_duration": "rest",
    "long_rest_duration": "long_rest",
    "sets_per_round": "sets",
    "number_of_rounds": "rounds",
}
_HEAD_TO_HEAD_ARGS = {
    "setup_duration": "setup",
    "work_duration": "work",
    "number_of_people": "people",
    "number_of_rounds": "rounds",
}


def _last_workout_defaults(settings: Settings) -> tuple[WorkoutMode, dict] | None:
    """Option defaults for the sub-command of the last workout run."""
    if not settings.last_config:
        return None
    try:
        mode = WorkoutMode(settings.last_mode)
        config = config_from_dict(mode, settings.last_config)
        config.validate()
    except (TypeError, ValueError) as exc:
        logger.warning("Ignoring saved last workout: %s", exc)
        return None
    if mode == WorkoutMode.INTERVAL:
        mapping = _INTERVAL_ARGS
    elif mode == WorkoutMode.HEAD_TO_HEAD:
        mapping = _HEAD_TO_HEAD_ARGS
    else:
        return None
    return mode, {dest: getattr(config, field) for field, dest in mapping.items()}


def _build_parser(settings: Settings | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="reptimer", description=__doc__.splitlines()[0])
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--mute", action="store_true", help="suppress beep cues")
    sub = parser.add_subparsers(dest="command", required=True)

    interval = sub.add_parser("interval", help="fixed-interval rounds")
    interval.add_argument("--preset", help="load a saved workout preset")
    interval.add_argument("--setup", type=int, default=10)
    interval.add_argument("--warmup", type=int, default=0)
    interval.add_argument("--work", type=int, default=30)
    interval.add_argument("--rest", type=int, default=10)
    interval.add_argument("--long-rest", type=int, default=60)
    interval.add_argument("--sets", type=int, default=4)
    interval.add_argument("--rounds", type=int, default=1)

    h2h = sub.add_parser("head-to-head", help="rotate work turns between people")
    h2h.add_argument("--preset", help="load a saved workout preset")
    h2h.add_argument("--setup", type=int, default=10)
    h2h.add_argument("--work", type=int, default=30)
    h2h.add_argument("--people", type=int, default=3)
    h2h.add_argument("--rounds", type=int, default=1)

    sub.add_parser("stopwatch", help="count up, Enter records a lap")

    breathe = sub.add_parser("breathe", help="looping breathing pattern")
    breathe.add_argument("--preset", help="built-in or saved breathing preset")
    breathe.add_argument("--in", dest="breath_in", type=int, default=4)
    breathe.add_argument("--hold-in", type=int, default=0)
    breathe.add_argument("--out", dest="breath_out", type=int, default=4)
    breathe.add_argument("--hold-out", type=int, default=0)

    last = _last_workout_defaults(settings) if settings is not None else None
    if last is not None:
        mode, defaults = last
        (interval if mode == WorkoutMode.INTERVAL else h2h).set_defaults(**defaults)
    return parser


def _run_workout(app, args, cues, settings) -> WorkoutEngine:
    store = PresetStore()
    if args.preset:
        config = store.load_workout_preset(args.preset)
    elif args.command == "interval":
        config = IntervalConfig(
            setup_duration=args.setup,
            warmup_duration=args.warmup,
            work_duration=args.work,
            rest_duration=args.rest,
            long_rest_duration=args.long_rest,
            sets_per_round=args.sets,
            number_of_rounds=args.rounds,
        )
    else:
        config = HeadToHeadConfig(
            setup_duration=args.setup,
            work_duration=args.work,
            number_of_people=args.people,
            number_of_rounds=args.rounds,
        )
    mode = (
        WorkoutMode.INTERVAL if isinstance(config, IntervalConfig)
        else WorkoutMode.HEAD_TO_HEAD
    )

    engine = WorkoutEngine(
        app,
        tick_interval_ms=settings.tick_interval_ms,
        settle_delay_ms=settings.settle_delay_ms,
    )
    cues.attach_workout(engine)

    def show_phase(index, phase):
        details = " | ".join(t for t in (round_info(engine), set_info(engine)) if t)
        print(f"[{format_time(engine.elapsed_time)}] {phase_label(engine)} "
              f"{format_time(phase.duration)}" + (f"  {details}" if details else ""))

    def finish():
        print(f"Workout Complete! {format_time(engine.elapsed_time)}")
        QTimer.singleShot(0, app.quit)

    engine.phase_loaded.connect(show_phase)
    engine.completed.connect(finish)
    engine.start_workout(mode, config)

    settings.last_mode = mode.value
    settings.last_config = config_to_dict(config)
    save_settings(settings)
    return engine


def _run_stopwatch(app, cues) -> Stopwatch:
    stopwatch = Stopwatch(app)
    cues.attach_stopwatch(stopwatch)
    stopwatch.lap_recorded.connect(
        lambda lap: print(f"Lap {lap.lap_number}  {format_time(lap.cumulative_time)}"
                          f"  (+{format_time(lap.lap_duration)})")
    )

    notifier = QSocketNotifier(sys.stdin.fileno(), QSocketNotifier.Type.Read, app)

    def on_enter():
        sys.stdin.readline()
        stopwatch.record_lap()

    notifier.activated.connect(on_enter)
    stopwatch.start()
    print("Stopwatch running. Enter = lap, Ctrl+C = stop.")
    return stopwatch


def _run_breathing(app, args, cues, settings) -> BreathingEngine:
    if args.preset:
        config = PresetStore().load_breathing_preset(args.preset)
    else:
        config = BreathingConfig(
            breath_in=args.breath_in,
            inhaled_hold=args.hold_in,
            breath_out=args.breath_out,
            exhaled_hold=args.hold_out,
        )
    engine = BreathingEngine(
        app,
        tick_interval_ms=settings.tick_interval_ms,
        settle_delay_ms=settings.settle_delay_ms,
    )
    cues.attach_breathing(engine)
    engine.phase_loaded.connect(
        lambda index, phase: print(
            f"{breathing_label(engine):<12} {phase.duration}s  "
            f"(cycle {engine.cycles_completed + 1}, "
            f"circle {circle_size(engine.expansion):.0f}px)"
        )
    )
    engine.start_breathing(config)
    return engine


def main(argv=None) -> None:
    settings = load_settings()
    args = _build_parser(settings).parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    init_db()

    app = QCoreApplication(sys.argv[:1])
    app.setApplicationName("RepTimer")
    app.setOrganizationName("RepTimer")

    # Let Python see Ctrl+C while the Qt loop is running.
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    heartbeat = QTimer(app)
    heartbeat.timeout.connect(lambda: None)
    heartbeat.start(200)

    cues = CueDispatcher(
        app,
        sounds_enabled=settings.sounds_enabled and not args.mute,
        vibration_enabled=settings.vibration_enabled,
    )
    cues.cue.connect(lambda cue: print(f"  * {cue.describe()}"))

    try:
        if args.command in ("interval", "head-to-head"):
            timer = _run_workout(app, args, cues, settings)
        elif args.command == "stopwatch":
            timer = _run_stopwatch(app, cues)
        else:
            timer = _run_breathing(app, args, cues, settings)
    except (ConfigurationError, PresetError) as exc:
        print(f"reptimer: {exc}", file=sys.stderr)
        sys.exit(2)

    status = app.exec()
    if isinstance(timer, Stopwatch):
        print(f"Total {format_time(timer.elapsed_time)}, {len(timer.laps)} laps")
    timer.reset()
    sys.exit(status)


if __name__ == "__main__":
    main()
