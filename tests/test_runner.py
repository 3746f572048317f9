"""Unit tests for the simulation runner and its snapshot fan-out."""

from __future__ import annotations

import dataclasses
import itertools
import threading
import time

import pytest

from atc_sim_core.data_classes import Snapshot
from atc_sim_core.runner import SimulationRunner
from atc_sim_core.scheduler import SimulationScheduler
from atc_sim_core.world import WorldState


class SnapshotCollector:
    """Listener that keeps every snapshot it receives."""

    def __init__(self) -> None:
        self.snapshots: list[Snapshot] = []

    def __call__(self, snapshot: Snapshot) -> None:
        self.snapshots.append(snapshot)


@pytest.fixture
def collector() -> SnapshotCollector:
    """Fresh snapshot collector."""
    return SnapshotCollector()


@pytest.fixture
def runner(collector: SnapshotCollector) -> SimulationRunner:
    """Runner over an empty world with a registered collector."""
    simulation_runner = SimulationRunner(WorldState(timestamp_milliseconds=1_000.0))
    simulation_runner.on_snapshot(collector)
    return simulation_runner


# =============================================================================
# Advance and Snapshot Tests
# =============================================================================


class TestRunnerAdvance:
    """Tests for SimulationRunner.advance_by."""

    def test_sub_step_advance_emits_one_snapshot(self, runner: SimulationRunner, collector: SnapshotCollector) -> None:
        """An advance shorter than a step still produces a frame."""
        runner.advance_by(40)

        assert len(collector.snapshots) == 1
        snapshot = collector.snapshots[0]
        assert snapshot.tick == 0
        assert snapshot.interpolation_fraction == pytest.approx(0.4)
        assert snapshot.timestamp_milliseconds == 1_000.0
        assert snapshot.world_state is runner.world_state

    def test_one_snapshot_per_step(self, runner: SimulationRunner, collector: SnapshotCollector) -> None:
        """Each consumed step publishes a snapshot; no extra one is added."""
        runner.advance_by(250)

        assert [snapshot.tick for snapshot in collector.snapshots] == [1, 2]
        assert [snapshot.timestamp_milliseconds for snapshot in collector.snapshots] == [1_100.0, 1_200.0]
        assert all(0.0 <= snapshot.interpolation_fraction < 1.0 for snapshot in collector.snapshots)
        assert runner.tick == 2
        assert runner.interpolation_fraction == pytest.approx(0.5)

    @pytest.mark.parametrize("elapsed", [0, -5])
    def test_non_positive_advance_emits_unchanged_snapshot(
        self,
        runner: SimulationRunner,
        collector: SnapshotCollector,
        elapsed: float,
    ) -> None:
        """Ignored time still notifies listeners with the unchanged state."""
        runner.advance_by(30)
        runner.advance_by(elapsed)

        assert len(collector.snapshots) == 2
        assert collector.snapshots[1].tick == 0
        assert collector.snapshots[1].interpolation_fraction == pytest.approx(0.3)

    def test_tick_is_cumulative_across_calls(self, runner: SimulationRunner) -> None:
        """Accumulated time is never discarded between calls."""
        for _ in range(7):
            runner.advance_by(45)

        assert runner.tick == 3
        assert runner.world_state.timestamp_milliseconds == 1_300.0

    def test_step_function_receives_previous_state(self) -> None:
        """Every step observes the state produced by the preceding step."""
        observed_timestamps: list[float] = []
        observed_schedulers: list[SimulationScheduler] = []

        def recording_step(world_state: WorldState, fixed_step_milliseconds: float, scheduler: SimulationScheduler) -> WorldState:
            observed_timestamps.append(world_state.timestamp_milliseconds)
            observed_schedulers.append(scheduler)
            return dataclasses.replace(world_state, timestamp_milliseconds=world_state.timestamp_milliseconds + fixed_step_milliseconds)

        simulation_runner = SimulationRunner(WorldState(), step=recording_step)
        simulation_runner.advance_by(300)

        assert observed_timestamps == [0.0, 100.0, 200.0]
        assert all(scheduler is simulation_runner.scheduler for scheduler in observed_schedulers)

    def test_random_source_reaches_step_function(self) -> None:
        """Injected randomness is available to step functions through the scheduler."""
        samples = itertools.cycle([0.1, 0.9])
        drawn: list[float] = []

        def sampling_step(world_state: WorldState, fixed_step_milliseconds: float, scheduler: SimulationScheduler) -> WorldState:
            drawn.append(scheduler.sample_random())
            return world_state

        simulation_runner = SimulationRunner(WorldState(), step=sampling_step, random_source=lambda: next(samples))
        simulation_runner.advance_by(300)

        assert drawn == [0.1, 0.9, 0.1]

    def test_step_exception_propagates(self) -> None:
        """Step failures surface to the caller."""

        def failing_step(world_state: WorldState, fixed_step_milliseconds: float, scheduler: SimulationScheduler) -> WorldState:
            raise RuntimeError("step failed")

        simulation_runner = SimulationRunner(WorldState(), step=failing_step)

        with pytest.raises(RuntimeError, match="step failed"):
            simulation_runner.advance_by(100)
        assert simulation_runner.tick == 0

    def test_listener_failure_keeps_step_committed(self, runner: SimulationRunner) -> None:
        """A listener raising during fan-out does not make the step run again."""
        failures: list[int] = []

        def fail_once(snapshot: Snapshot) -> None:
            if not failures:
                failures.append(snapshot.tick)
                raise RuntimeError("listener failed")

        runner.on_snapshot(fail_once)

        with pytest.raises(RuntimeError, match="listener failed"):
            runner.advance_by(100)
        runner.advance_by(1)

        assert failures == [1]
        assert runner.tick == 101 // 100
        assert runner.world_state.timestamp_milliseconds == 1_100.0
        assert runner.interpolation_fraction == pytest.approx(0.01)

    def test_non_finite_advance_emits_unchanged_snapshot(self, runner: SimulationRunner, collector: SnapshotCollector) -> None:
        """A broken clock delta is ignored and later time still steps."""
        runner.advance_by(float("nan"))
        runner.advance_by(float("inf"))
        runner.advance_by(200)

        assert [snapshot.tick for snapshot in collector.snapshots] == [0, 0, 1, 2]

    def test_rejects_invalid_timer_interval(self) -> None:
        """Timer interval is validated at construction."""
        with pytest.raises(ValueError, match="timer_interval_milliseconds"):
            SimulationRunner(WorldState(), timer_interval_milliseconds=0)


# =============================================================================
# Listener Registration Tests
# =============================================================================


class TestRunnerListeners:
    """Tests for on_snapshot and off_snapshot."""

    def test_duplicate_registration_is_suppressed(self, runner: SimulationRunner, collector: SnapshotCollector) -> None:
        """Registering the same listener twice delivers each snapshot once."""
        runner.on_snapshot(collector)

        runner.advance_by(10)

        assert len(collector.snapshots) == 1

    def test_off_snapshot_stops_delivery(self, runner: SimulationRunner, collector: SnapshotCollector) -> None:
        """Removed listeners receive nothing further."""
        runner.advance_by(10)
        runner.off_snapshot(collector)
        runner.advance_by(10)

        assert len(collector.snapshots) == 1

    def test_off_snapshot_is_idempotent(self, runner: SimulationRunner) -> None:
        """Removing an unknown or already removed listener is a no-op."""
        stranger = SnapshotCollector()

        runner.off_snapshot(stranger)
        runner.off_snapshot(stranger)

    def test_unsubscribe_handle(self, runner: SimulationRunner) -> None:
        """The handle returned by on_snapshot removes the listener."""
        second_collector = SnapshotCollector()
        unsubscribe = runner.on_snapshot(second_collector)

        runner.advance_by(10)
        unsubscribe()
        unsubscribe()
        runner.advance_by(10)

        assert len(second_collector.snapshots) == 1

    def test_listeners_share_snapshot(self, runner: SimulationRunner, collector: SnapshotCollector) -> None:
        """All listeners of one fan-out receive the same snapshot object."""
        second_collector = SnapshotCollector()
        runner.on_snapshot(second_collector)

        runner.advance_by(100)

        assert collector.snapshots[0] is second_collector.snapshots[0]

    def test_listener_may_unsubscribe_during_fan_out(self, runner: SimulationRunner, collector: SnapshotCollector) -> None:
        """Removing a listener from within a callback does not break delivery."""

        def one_shot(snapshot: Snapshot) -> None:
            runner.off_snapshot(one_shot)

        runner.on_snapshot(one_shot)
        runner.advance_by(200)

        assert len(collector.snapshots) == 2


# =============================================================================
# Timer Mode Tests
# =============================================================================


class SteppingClock:
    """Fake wall clock that advances a fixed amount per sample."""

    def __init__(self, increment_milliseconds: float) -> None:
        self.increment_milliseconds = increment_milliseconds
        self.now_milliseconds = 0.0

    def __call__(self) -> float:
        self.now_milliseconds += self.increment_milliseconds
        return self.now_milliseconds


@pytest.mark.timer
class TestRunnerTimer:
    """Tests for the timer-driven mode."""

    def test_timer_feeds_elapsed_clock_time(self) -> None:
        """Each timer firing advances by the clock delta since the previous sample."""
        reached_three_ticks = threading.Event()
        simulation_runner = SimulationRunner(WorldState(), timer_interval_milliseconds=2, clock=SteppingClock(100.0))

        def watch(snapshot: Snapshot) -> None:
            if snapshot.tick >= 3:
                reached_three_ticks.set()

        simulation_runner.on_snapshot(watch)
        simulation_runner.start_timer()
        try:
            assert reached_three_ticks.wait(timeout=5.0)
        finally:
            simulation_runner.stop_timer()
        # Waits for any in-flight timer advance to finish.
        simulation_runner.advance_by(0)

        assert simulation_runner.tick >= 3
        assert simulation_runner.world_state.timestamp_milliseconds == simulation_runner.tick * 100.0

    def test_start_and_stop_are_idempotent(self) -> None:
        """Repeated start/stop calls have no additional effect."""
        simulation_runner = SimulationRunner(WorldState(), timer_interval_milliseconds=1_000, clock=SteppingClock(0.0))

        simulation_runner.stop_timer()
        assert not simulation_runner.is_timer_running

        simulation_runner.start_timer()
        first_thread_count = threading.active_count()
        simulation_runner.start_timer()

        assert simulation_runner.is_timer_running
        assert threading.active_count() == first_thread_count

        simulation_runner.stop_timer()
        simulation_runner.stop_timer()
        assert not simulation_runner.is_timer_running

    def test_stop_joins_timer_thread(self) -> None:
        """Stopping from outside the timer waits for its thread to exit."""
        simulation_runner = SimulationRunner(WorldState(), timer_interval_milliseconds=1_000, clock=SteppingClock(0.0))
        simulation_runner.start_timer()
        timer_thread = simulation_runner._timer_thread
        assert timer_thread is not None

        simulation_runner.stop_timer()

        assert not timer_thread.is_alive()

    def test_listener_may_stop_timer(self) -> None:
        """A listener running on the timer thread can stop the timer."""
        stopped = threading.Event()
        simulation_runner = SimulationRunner(WorldState(), timer_interval_milliseconds=2, clock=SteppingClock(100.0))

        def stop_after_first_step(snapshot: Snapshot) -> None:
            simulation_runner.stop_timer()
            stopped.set()

        simulation_runner.on_snapshot(stop_after_first_step)
        simulation_runner.start_timer()

        assert stopped.wait(timeout=5.0)
        assert not simulation_runner.is_timer_running
        assert simulation_runner.tick == 1

    def test_timer_stops_after_failed_step(self) -> None:
        """A failing step stops the timer instead of retrying forever."""
        attempted = threading.Event()

        def failing_step(world_state: WorldState, fixed_step_milliseconds: float, scheduler: SimulationScheduler) -> WorldState:
            attempted.set()
            raise RuntimeError("step failed")

        simulation_runner = SimulationRunner(
            WorldState(),
            step=failing_step,
            timer_interval_milliseconds=2,
            clock=SteppingClock(100.0),
        )
        simulation_runner.start_timer()

        assert attempted.wait(timeout=5.0)
        for _ in range(500):
            if not simulation_runner.is_timer_running:
                break
            time.sleep(0.01)
        assert not simulation_runner.is_timer_running
        assert simulation_runner.tick == 0
