"""Simulation runner: scheduler, held world state and snapshot fan-out.

The runner owns the world state between steps. Every processed step
replaces that state with the step function's result, increments the tick
counter and publishes a snapshot. An advance that completes no step still
publishes one snapshot, so a renderer gets a fresh interpolation fraction on
every call.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

from atc_sim_core.constants import SimulationTimingConstants, UnitConversionConstants
from atc_sim_core.data_classes import Snapshot
from atc_sim_core.scheduler import SimulationScheduler
from atc_sim_core.validation import require_positive_finite
from atc_sim_core.world import WorldState, advance_world_timestamp

if TYPE_CHECKING:
    from collections.abc import Callable

    from atc_sim_core.types import RandomSource, SnapshotListener, WorldStepFunction

logger = logging.getLogger(__name__)


def monotonic_clock_milliseconds() -> float:
    """Default runner clock."""
    return time.monotonic() * 1000.0


class SimulationRunner:
    """Drives a world state through a fixed-timestep scheduler."""

    def __init__(
        self,
        world_state: WorldState,
        step: WorldStepFunction | None = None,
        random_source: RandomSource | None = None,
        timer_interval_milliseconds: float | None = None,
        fixed_step_milliseconds: float = SimulationTimingConstants.FIXED_TIMESTEP_MILLISECONDS,
        clock: Callable[[], float] = monotonic_clock_milliseconds,
    ) -> None:
        """Initialize the runner.

        Args:
            world_state: Initial world state.
            step: Pure step function (defaults to advancing the timestamp).
            random_source: Random source forwarded to the scheduler.
            timer_interval_milliseconds: Polling interval of the timer mode
                (defaults to the fixed step).
            fixed_step_milliseconds: Scheduler step size.
            clock: Wall clock in milliseconds sampled by the timer mode.

        Raises:
            ValueError: If the step size or timer interval is not positive.
        """
        self._world_state = world_state
        self._step_function: WorldStepFunction = step or advance_world_timestamp
        self._tick = 0
        self._listeners: dict[SnapshotListener, None] = {}
        self._scheduler = SimulationScheduler(
            step_callback=self._apply_step,
            random_source=random_source,
            fixed_step_milliseconds=fixed_step_milliseconds,
            step_committed_callback=self._emit_snapshot,
        )
        self._timer_interval_milliseconds = require_positive_finite(
            timer_interval_milliseconds if timer_interval_milliseconds is not None else fixed_step_milliseconds,
            "timer_interval_milliseconds",
        )
        self._clock = clock
        self._advance_lock = threading.RLock()
        self._advancing_thread_ident: int | None = None
        self._timer_stop_event: threading.Event | None = None
        self._timer_thread: threading.Thread | None = None
        self._last_timer_sample_milliseconds = 0.0

    @property
    def world_state(self) -> WorldState:
        """World state after the most recent step."""
        return self._world_state

    @property
    def tick(self) -> int:
        """Number of fixed steps processed since construction."""
        return self._tick

    @property
    def interpolation_fraction(self) -> float:
        """Scheduler progress toward the next step."""
        return self._scheduler.interpolation_fraction

    @property
    def scheduler(self) -> SimulationScheduler:
        """Underlying scheduler."""
        return self._scheduler

    @property
    def is_timer_running(self) -> bool:
        """Whether the timer-driven mode is active."""
        return self._timer_thread is not None

    def on_snapshot(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener; registering the same listener twice has no extra effect.

        Returns:
            Handle that unregisters the listener when called.
        """
        self._listeners[listener] = None
        return lambda: self.off_snapshot(listener)

    def off_snapshot(self, listener: SnapshotListener) -> None:
        """Unregister a listener; unknown listeners are ignored."""
        self._listeners.pop(listener, None)

    def advance_by(self, elapsed_milliseconds: float) -> None:
        """Feed elapsed wall-clock time into the scheduler.

        A step whose state has been committed stays committed even if a
        listener raises while its snapshot is published.

        Args:
            elapsed_milliseconds: Time since the previous advance; non-positive
                or non-finite values consume no steps but still publish a snapshot.
        """
        with self._advance_lock:
            outer_thread_ident = self._advancing_thread_ident
            self._advancing_thread_ident = threading.get_ident()
            try:
                steps_executed = self._scheduler.advance(elapsed_milliseconds)
                if steps_executed == 0:
                    self._emit_snapshot()
            finally:
                self._advancing_thread_ident = outer_thread_ident

    def start_timer(self) -> None:
        """Start advancing from the wall clock on a fixed polling interval."""
        if self._timer_thread is not None:
            return

        self._last_timer_sample_milliseconds = self._clock()
        self._timer_stop_event = threading.Event()
        self._timer_thread = threading.Thread(
            target=self._run_timer,
            args=(self._timer_stop_event,),
            name="simulation-runner-timer",
            daemon=True,
        )
        logger.debug("Starting simulation timer with %.1f ms interval", self._timer_interval_milliseconds)
        self._timer_thread.start()

    def stop_timer(self) -> None:
        """Stop the timer.

        An advance already in flight runs to completion; no timer advance
        starts after this returns. The timer thread is joined unless this is
        called from the timer thread itself or from inside an advance.
        """
        timer_thread = self._timer_thread
        if timer_thread is None or self._timer_stop_event is None:
            return

        self._timer_stop_event.set()
        self._timer_thread = None
        self._timer_stop_event = None
        if timer_thread is not threading.current_thread() and self._advancing_thread_ident != threading.get_ident():
            timer_thread.join()
        logger.debug("Stopped simulation timer at tick %d", self._tick)

    def _run_timer(self, stop_event: threading.Event) -> None:
        interval_seconds = self._timer_interval_milliseconds * UnitConversionConstants.MILLISECONDS_TO_SECONDS
        while not stop_event.wait(interval_seconds):
            with self._advance_lock:
                if stop_event.is_set():
                    return
                now_milliseconds = self._clock()
                elapsed_milliseconds = now_milliseconds - self._last_timer_sample_milliseconds
                self._last_timer_sample_milliseconds = now_milliseconds
                try:
                    self.advance_by(elapsed_milliseconds)
                except Exception:
                    logger.exception("Simulation timer stopped after a failed advance at tick %d", self._tick)
                    if self._timer_stop_event is stop_event:
                        self.stop_timer()
                    return

    def _apply_step(self, fixed_step_milliseconds: float) -> None:
        self._world_state = self._step_function(self._world_state, fixed_step_milliseconds, self._scheduler)
        self._tick += 1

    def _emit_snapshot(self) -> None:
        snapshot = Snapshot(
            tick=self._tick,
            interpolation_fraction=self._scheduler.interpolation_fraction,
            timestamp_milliseconds=self._world_state.timestamp_milliseconds,
            world_state=self._world_state,
        )
        for listener in tuple(self._listeners):
            listener(snapshot)
