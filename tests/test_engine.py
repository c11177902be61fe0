"""Comprehensive tests for the RepTimer workout engine.

Covers: state transitions, tick arithmetic, edge-triggered phase
completion, the settle delay (including cancellation by reset and
suspension by pause), completion, round-start events, presentation
properties, and fail-safe handling of broken sequences.
"""

import pytest

from PyQt6.QtTest import QTest

from reptimer.timer.base import TimerState, SETTLE_DELAY_MS
from reptimer.timer.config import (
    ConfigurationError,
    EmptySequenceError,
    HeadToHeadConfig,
    IntervalConfig,
    StopwatchConfig,
    WorkoutMode,
)
from reptimer.timer.sequence import (
    IntervalPhase,
    PhaseKind,
    Sequence,
    build_sequence,
)

from helpers import (
    SignalCollector,
    advance_phase,
    exhaust_phase,
    finish_settle,
    run_to_completion,
)


def _interval(**kwargs):
    base = dict(
        setup_duration=10, warmup_duration=0, work_duration=30,
        rest_duration=10, long_rest_duration=60,
        sets_per_round=3, number_of_rounds=2,
    )
    base.update(kwargs)
    return IntervalConfig(**base)


def _sequence(**kwargs):
    return build_sequence(WorkoutMode.INTERVAL, _interval(**kwargs))


# ═══════════════════════════════════════════════════════════════════════════
#  STATE TRANSITIONS
# ═══════════════════════════════════════════════════════════════════════════


class TestStateTransitions:

    def test_initial_state_is_ready(self, engine):
        assert engine.state == TimerState.READY
        assert engine.current_phase is None
        assert engine.time_remaining == 0
        assert not engine.is_running

    def test_start_loads_first_phase(self, engine):
        seq = _sequence()
        engine.start(seq)
        assert engine.state == TimerState.RUNNING
        assert engine.current_phase_index == 0
        assert engine.current_phase == seq[0]
        assert engine.time_remaining == 10
        assert engine.elapsed_time == 0

    def test_start_emits_started_then_phase_loaded(self, engine):
        events = []
        engine.started.connect(lambda: events.append("started"))
        engine.phase_loaded.connect(lambda i, p: events.append(("loaded", i)))
        engine.start(_sequence())
        assert events == ["started", ("loaded", 0)]

    def test_start_empty_sequence_raises(self, engine):
        with pytest.raises(EmptySequenceError):
            engine.start(Sequence())
        assert engine.state == TimerState.READY
        assert engine.sequence is None

    def test_empty_sequence_error_is_configuration_error(self):
        assert issubclass(EmptySequenceError, ConfigurationError)

    def test_start_is_noop_when_already_running(self, engine):
        first = _sequence()
        engine.start(first)
        engine.tick(1)
        engine.start(_sequence(setup_duration=99))
        assert engine.sequence is first
        assert engine.time_remaining == 9

    def test_pause_and_resume(self, engine):
        engine.start(_sequence())
        engine.pause()
        assert engine.state == TimerState.PAUSED
        assert engine.is_paused
        assert engine.is_running
        engine.resume()
        assert engine.state == TimerState.RUNNING

    def test_pause_is_noop_when_ready(self, engine):
        engine.pause()
        assert engine.state == TimerState.READY

    def test_resume_is_noop_when_not_paused(self, engine):
        engine.start(_sequence())
        engine.resume()
        assert engine.state == TimerState.RUNNING

    def test_toggle_pause(self, engine):
        engine.start(_sequence())
        engine.toggle_pause()
        assert engine.is_paused
        engine.toggle_pause()
        assert not engine.is_paused

    def test_reset_returns_to_ready(self, engine):
        engine.start(_sequence())
        engine.tick(3)
        engine.reset()
        assert engine.state == TimerState.READY
        assert engine.sequence is None
        assert engine.time_remaining == 0
        assert engine.elapsed_time == 0
        assert engine.current_phase_index == 0

    def test_state_changed_signal(self, engine):
        c = SignalCollector()
        engine.state_changed.connect(c)
        engine.start(_sequence())
        assert c.last == TimerState.RUNNING
        engine.pause()
        assert c.last == TimerState.PAUSED
        engine.resume()
        assert c.last == TimerState.RUNNING
        engine.reset()
        assert c.last == TimerState.READY


# ═══════════════════════════════════════════════════════════════════════════
#  TICK / COUNTDOWN
# ═══════════════════════════════════════════════════════════════════════════


class TestCountdown:

    def test_tick_moves_both_clocks_by_dt(self, engine):
        engine.start(_sequence())
        for _ in range(100):
            engine.tick(0.01)
        assert engine.time_remaining == 9.0
        assert engine.elapsed_time == 1.0

    def test_ticked_signal_carries_remaining(self, engine):
        c = SignalCollector()
        engine.ticked.connect(c)
        engine.start(_sequence())
        engine.tick(0.25)
        assert c.last == pytest.approx(9.75)

    def test_remaining_never_goes_negative(self, engine):
        engine.start(_sequence())
        engine.tick(100)
        assert engine.time_remaining == 0
        assert engine.elapsed_time == 10

    def test_tick_ignored_when_ready(self, engine):
        engine.tick(1)
        assert engine.elapsed_time == 0

    def test_tick_ignored_while_paused(self, engine):
        engine.start(_sequence())
        engine.pause()
        engine.tick(5)
        assert engine.time_remaining == 10
        engine.resume()
        engine.tick(5)
        assert engine.time_remaining == 5

    def test_negative_dt_is_ignored(self, engine):
        engine.start(_sequence())
        engine.tick(-3)
        assert engine.time_remaining == 10
        assert engine.elapsed_time == 0


# ═══════════════════════════════════════════════════════════════════════════
#  PHASE BOUNDARIES / SETTLE DELAY
# ═══════════════════════════════════════════════════════════════════════════


class TestPhaseBoundary:

    def test_phase_complete_fires_once(self, engine):
        c = SignalCollector()
        engine.phase_completed.connect(c)
        engine.start(_sequence())
        exhaust_phase(engine)
        for _ in range(50):
            engine.tick(0.01)
        assert c.items == [PhaseKind.SETUP]
        assert engine.is_transitioning

    def test_transition_blocks_ticks(self, engine):
        engine.start(_sequence())
        exhaust_phase(engine)
        elapsed = engine.elapsed_time
        engine.tick(1)
        assert engine.elapsed_time == elapsed
        assert engine.current_phase_index == 0

    def test_settle_timer_armed_with_delay(self, engine):
        engine.start(_sequence())
        exhaust_phase(engine)
        assert engine._settle_timer.isActive()
        assert engine._settle_timer.interval() == SETTLE_DELAY_MS

    def test_settle_loads_next_phase(self, engine):
        c = SignalCollector()
        engine.phase_loaded.connect(c)
        seq = _sequence()
        engine.start(seq)
        advance_phase(engine)
        assert engine.current_phase_index == 1
        assert engine.current_phase == seq[1]
        assert engine.time_remaining == 30
        assert not engine.is_transitioning
        assert c.last == (1, seq[1])

    def test_complete_precedes_loaded(self, engine):
        events = []
        engine.phase_completed.connect(lambda kind: events.append("complete"))
        engine.phase_loaded.connect(lambda i, p: events.append("loaded"))
        engine.start(_sequence())
        events.clear()
        exhaust_phase(engine)
        assert events == ["complete"]
        finish_settle(engine)
        assert events == ["complete", "loaded"]

    def test_settle_fires_through_event_loop(self, fast_engine):
        c = SignalCollector()
        fast_engine.phase_loaded.connect(c)
        fast_engine.start(_sequence())
        exhaust_phase(fast_engine)
        assert len(c) == 1
        QTest.qWait(300)
        assert len(c) == 2
        assert fast_engine.current_phase_index == 1

    def test_reset_during_settle_cancels_advance(self, fast_engine):
        loaded = SignalCollector()
        fast_engine.phase_loaded.connect(loaded)
        fast_engine.start(_sequence())
        exhaust_phase(fast_engine)
        fast_engine.reset()
        assert not fast_engine._settle_timer.isActive()
        QTest.qWait(300)
        assert len(loaded) == 1
        assert fast_engine.state == TimerState.READY
        assert fast_engine.current_phase is None

    def test_stale_settle_callback_after_reset_is_noop(self, engine):
        loaded = SignalCollector()
        engine.phase_loaded.connect(loaded)
        engine.start(_sequence())
        exhaust_phase(engine)
        engine.reset()
        engine._on_settle_elapsed()
        assert len(loaded) == 1
        assert engine.state == TimerState.READY

    def test_reset_from_phase_complete_slot(self, engine):
        engine.phase_completed.connect(lambda kind: engine.reset())
        engine.start(_sequence())
        exhaust_phase(engine)
        assert engine.state == TimerState.READY
        assert not engine._settle_timer.isActive()


class TestPauseDuringSettle:

    def test_pause_suspends_settle(self, engine):
        engine.start(_sequence())
        exhaust_phase(engine)
        engine.pause()
        assert not engine._settle_timer.isActive()
        assert engine.is_transitioning
        engine._on_settle_elapsed()
        assert engine.current_phase_index == 0

    def test_resume_rearms_settle(self, engine):
        engine.start(_sequence())
        exhaust_phase(engine)
        engine.pause()
        engine.resume()
        assert engine._settle_timer.isActive()
        finish_settle(engine)
        assert engine.current_phase_index == 1

    def test_paused_settle_does_not_fire_in_event_loop(self, fast_engine):
        fast_engine.start(_sequence())
        exhaust_phase(fast_engine)
        fast_engine.pause()
        QTest.qWait(200)
        assert fast_engine.current_phase_index == 0
        fast_engine.resume()
        QTest.qWait(300)
        assert fast_engine.current_phase_index == 1


# ═══════════════════════════════════════════════════════════════════════════
#  COMPLETION
# ═══════════════════════════════════════════════════════════════════════════


class TestCompletion:

    def test_runs_to_completion(self, engine):
        seq = _sequence()
        engine.start(seq)
        steps = run_to_completion(engine)
        assert steps == len(seq)
        assert engine.state == TimerState.COMPLETED
        assert engine.is_completed
        assert not engine.is_running

    def test_elapsed_equals_total(self, engine):
        engine.start(_sequence())
        run_to_completion(engine)
        assert engine.elapsed_time == 290
        assert engine.progress_fraction == 1.0

    def test_completed_fires_once(self, engine):
        c = SignalCollector()
        engine.completed.connect(c)
        engine.start(_sequence())
        run_to_completion(engine)
        engine._complete()
        engine.tick(5)
        assert len(c) == 1
        assert engine.is_completing

    def test_ticks_ignored_after_completion(self, engine):
        engine.start(_sequence())
        run_to_completion(engine)
        engine.tick(10)
        assert engine.elapsed_time == 290
        assert engine.time_remaining == 0

    def test_phase_complete_count_matches_phases(self, engine):
        c = SignalCollector()
        engine.phase_completed.connect(c)
        seq = _sequence()
        engine.start(seq)
        run_to_completion(engine)
        assert c.items == [p.kind for p in seq]

    def test_reset_after_completion(self, engine):
        engine.start(_sequence())
        run_to_completion(engine)
        engine.reset()
        assert engine.state == TimerState.READY
        assert not engine.is_completing

    def test_restart_reruns_sequence(self, engine):
        seq = _sequence()
        engine.start(seq)
        run_to_completion(engine)
        engine.restart()
        assert engine.state == TimerState.RUNNING
        assert engine.sequence is seq
        assert engine.current_phase_index == 0
        assert engine.elapsed_time == 0

    def test_restart_keeps_config(self, engine):
        config = _interval()
        engine.start_workout(WorkoutMode.INTERVAL, config)
        run_to_completion(engine)
        engine.restart()
        assert engine.config == config

    def test_restart_without_run_is_noop(self, engine):
        engine.restart()
        assert engine.state == TimerState.READY


# ═══════════════════════════════════════════════════════════════════════════
#  ROUND START EVENTS
# ═══════════════════════════════════════════════════════════════════════════


class TestRoundStart:

    def test_round_started_after_setup_and_long_rest(self, engine):
        c = SignalCollector()
        engine.round_started.connect(c)
        engine.start(_sequence())
        run_to_completion(engine)
        assert c.items == [1, 2]

    def test_first_phase_work_does_not_emit(self, engine):
        c = SignalCollector()
        engine.round_started.connect(c)
        engine.start(_sequence(setup_duration=0))
        run_to_completion(engine)
        assert c.items == [2]

    def test_round_started_precedes_phase_loaded(self, engine):
        events = []
        engine.round_started.connect(lambda r: events.append(("round", r)))
        engine.phase_loaded.connect(lambda i, p: events.append(("loaded", i)))
        engine.start(_sequence())
        events.clear()
        advance_phase(engine)
        assert events == [("round", 1), ("loaded", 1)]

    def test_head_to_head_never_emits(self, engine):
        c = SignalCollector()
        engine.round_started.connect(c)
        engine.start_workout(
            WorkoutMode.HEAD_TO_HEAD,
            HeadToHeadConfig(number_of_people=2, number_of_rounds=3),
        )
        run_to_completion(engine)
        assert len(c) == 0


# ═══════════════════════════════════════════════════════════════════════════
#  PRESENTATION PROPERTIES
# ═══════════════════════════════════════════════════════════════════════════


class TestPresentation:

    def test_setup_has_round_zero(self, engine):
        engine.start(_sequence())
        assert engine.current_round == 0
        assert engine.current_set is None

    def test_work_and_rest_sets(self, engine):
        engine.start(_sequence())
        advance_phase(engine)          # → work R1 S1
        assert engine.current_round == 1
        assert engine.current_set == 1
        assert engine.next_set is None
        advance_phase(engine)          # → rest after S1
        assert engine.current_phase.kind == PhaseKind.REST
        assert engine.current_set == 1
        assert engine.next_set == 2

    def test_head_to_head_person(self, engine):
        engine.start_workout(
            WorkoutMode.HEAD_TO_HEAD,
            HeadToHeadConfig(setup_duration=5, number_of_people=3),
        )
        assert engine.current_person is None
        advance_phase(engine)
        assert engine.current_person == 1
        advance_phase(engine)
        assert engine.current_person == 2
        assert engine.current_set is None

    def test_progress_fraction(self, engine):
        engine.start(_sequence())
        engine.tick(10)
        finish_settle(engine)
        engine.tick(17)
        assert engine.progress_fraction == pytest.approx(27 / 290)

    def test_progress_zero_when_ready(self, engine):
        assert engine.progress_fraction == 0.0

    def test_phase_progress(self, engine):
        engine.start(_sequence())
        engine.tick(2.5)
        assert engine.phase_progress == pytest.approx(0.25)

    def test_total_duration(self, engine):
        engine.start(_sequence())
        assert engine.total_duration == 290


# ═══════════════════════════════════════════════════════════════════════════
#  START FROM CONFIG
# ═══════════════════════════════════════════════════════════════════════════


class TestStartWorkout:

    def test_builds_and_starts(self, engine):
        engine.start_workout(WorkoutMode.INTERVAL, _interval())
        assert engine.state == TimerState.RUNNING
        assert len(engine.sequence) == 1 + 5 + 1 + 5
        assert engine.config == _interval()

    def test_invalid_config_creates_no_state(self, engine):
        with pytest.raises(ConfigurationError):
            engine.start_workout(WorkoutMode.INTERVAL, _interval(work_duration=0))
        assert engine.state == TimerState.READY
        assert engine.sequence is None
        assert engine.config is None

    def test_stopwatch_mode_rejected(self, engine):
        with pytest.raises(ConfigurationError):
            engine.start_workout(WorkoutMode.STOPWATCH, StopwatchConfig())

    def test_mismatched_config_rejected(self, engine):
        with pytest.raises(ConfigurationError):
            engine.start_workout(WorkoutMode.INTERVAL, HeadToHeadConfig())

    def test_accepts_mode_string(self, engine):
        engine.start_workout("head_to_head", HeadToHeadConfig())
        assert engine.state == TimerState.RUNNING


# ═══════════════════════════════════════════════════════════════════════════
#  FAIL-SAFE
# ═══════════════════════════════════════════════════════════════════════════


class TestFailSafe:

    def test_zero_duration_phase_forces_completion(self, engine):
        c = SignalCollector()
        engine.completed.connect(c)
        engine.start(Sequence((IntervalPhase(PhaseKind.WORK, 0, 1, set=1),)))
        assert engine.state == TimerState.COMPLETED
        assert len(c) == 1

    def test_out_of_range_index_forces_completion(self, engine):
        engine.start(_sequence())
        engine._load_phase(999)
        assert engine.state == TimerState.COMPLETED

    def test_out_of_range_index_after_reset_is_ignored(self, engine):
        c = SignalCollector()
        engine.completed.connect(c)
        engine.start(_sequence())
        engine.reset()
        engine._load_phase(1)
        assert engine.state == TimerState.READY
        assert len(c) == 0


# ═══════════════════════════════════════════════════════════════════════════
#  CONTROL CALLS FROM SLOTS
# ═══════════════════════════════════════════════════════════════════════════


class TestControlsFromSlots:

    def test_reset_from_ticked_mid_phase(self, engine):
        done = SignalCollector()
        engine.phase_completed.connect(done)
        engine.ticked.connect(lambda remaining: engine.reset())
        engine.start(_sequence())
        engine.tick(1)
        assert engine.state == TimerState.READY
        assert len(done) == 0

    def test_reset_from_ticked_on_last_tick(self, engine):
        done = SignalCollector()
        engine.phase_completed.connect(done)
        engine.ticked.connect(lambda remaining: engine.reset())
        engine.start(_sequence())
        engine.tick(10)
        assert engine.state == TimerState.READY
        assert not engine.is_transitioning
        assert not engine._settle_timer.isActive()
        assert len(done) == 0

    def test_reset_from_started(self, engine):
        loaded = SignalCollector()
        engine.phase_loaded.connect(loaded)
        engine.started.connect(lambda: engine.reset())
        engine.start(_sequence())
        assert engine.state == TimerState.READY
        assert len(loaded) == 0

    def test_reset_from_round_started(self, engine):
        loaded = SignalCollector()
        completed = SignalCollector()
        engine.start(_sequence())
        engine.phase_loaded.connect(loaded)
        engine.completed.connect(completed)
        engine.round_started.connect(lambda rnd: engine.reset())
        advance_phase(engine)
        assert engine.state == TimerState.READY
        assert len(loaded) == 0
        assert len(completed) == 0

    def test_reset_from_phase_loaded(self, engine):
        completed = SignalCollector()
        engine.start(_sequence())
        engine.completed.connect(completed)
        engine.phase_loaded.connect(lambda index, phase: engine.reset())
        advance_phase(engine)
        assert engine.state == TimerState.READY
        engine.tick(5)
        assert engine.elapsed_time == 0
        assert len(completed) == 0

    def test_pause_from_phase_completed_then_resume(self, engine):
        engine.phase_completed.connect(lambda kind: engine.pause())
        engine.start(_sequence())
        exhaust_phase(engine)
        assert engine.is_paused
        assert engine.is_transitioning
        assert not engine._settle_timer.isActive()
        engine.resume()
        assert engine._settle_timer.isActive()
        finish_settle(engine)
        assert engine.current_phase_index == 1
        engine.tick(1)
        assert engine.time_remaining == 29

    def test_pause_from_phase_completed_in_event_loop(self, fast_engine):
        fast_engine.phase_completed.connect(lambda kind: fast_engine.pause())
        fast_engine.start(_sequence())
        exhaust_phase(fast_engine)
        QTest.qWait(200)
        assert fast_engine.current_phase_index == 0
        fast_engine.resume()
        QTest.qWait(300)
        assert fast_engine.current_phase_index == 1
        assert not fast_engine.is_transitioning
        fast_engine.tick(1)
        assert fast_engine.time_remaining == 29

    def test_pause_from_ticked_on_last_tick(self, engine):
        done = SignalCollector()
        engine.phase_completed.connect(done)
        engine.ticked.connect(
            lambda remaining: engine.pause() if remaining == 0 else None
        )
        engine.start(_sequence())
        engine.tick(10)
        assert engine.is_paused
        assert engine.is_transitioning
        assert done.items == [PhaseKind.SETUP]
        engine.resume()
        finish_settle(engine)
        assert engine.current_phase_index == 1

    def test_start_workout_while_running_is_logged(self, engine, caplog):
        engine.start_workout(WorkoutMode.INTERVAL, _interval())
        first = engine.sequence
        with caplog.at_level("DEBUG", logger="reptimer.timer.engine"):
            engine.start_workout(WorkoutMode.HEAD_TO_HEAD, HeadToHeadConfig())
        assert engine.sequence is first
        assert engine.config == _interval()
        assert "start_workout() ignored" in caplog.text
