"""Fixed-timestep simulation scheduler.

Irregular wall-clock deltas are accumulated and consumed in equal,
fixed-size steps, so simulation logic only ever sees a constant delta and
simulation time advances in exact multiples of the fixed step. The remainder
left in the accumulator is exposed as an interpolation fraction for
rendering between committed steps.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from atc_sim_core.constants import SimulationTimingConstants
from atc_sim_core.validation import require_positive_finite

if TYPE_CHECKING:
    from collections.abc import Callable

    from atc_sim_core.types import RandomSource, SchedulerStepCallback


def constant_random_source() -> float:
    """Default random source: a constant, so runs are replayable."""
    return SimulationTimingConstants.DEFAULT_RANDOM_VALUE


class SimulationScheduler:
    """Accumulator that turns elapsed time into fixed-size step callbacks."""

    def __init__(
        self,
        step_callback: SchedulerStepCallback,
        random_source: RandomSource | None = None,
        fixed_step_milliseconds: float = SimulationTimingConstants.FIXED_TIMESTEP_MILLISECONDS,
        step_committed_callback: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            step_callback: Called with the fixed step size once per consumed step.
                If it raises, the step's time stays in the accumulator.
            random_source: Source for ``sample_random`` (defaults to a constant).
            fixed_step_milliseconds: Size of every simulation step.
            step_committed_callback: Called after a step's time has been
                consumed. If it raises, the step stays consumed.

        Raises:
            ValueError: If the fixed step is not a positive finite number.
        """
        self._fixed_step_milliseconds = require_positive_finite(fixed_step_milliseconds, "fixed_step_milliseconds")
        self._step_callback = step_callback
        self._step_committed_callback = step_committed_callback
        self._random_source = random_source or constant_random_source
        self._accumulator_milliseconds = 0.0

    @property
    def fixed_step_milliseconds(self) -> float:
        """Size of every simulation step in milliseconds."""
        return self._fixed_step_milliseconds

    @property
    def accumulator_milliseconds(self) -> float:
        """Elapsed time not yet consumed by a step."""
        return self._accumulator_milliseconds

    @property
    def interpolation_fraction(self) -> float:
        """Progress toward the next step, in [0, 1).

        While an advance is still consuming steps, this is the fraction the
        advance will end with.
        """
        return (self._accumulator_milliseconds % self._fixed_step_milliseconds) / self._fixed_step_milliseconds

    def advance(self, elapsed_milliseconds: float) -> int:
        """Accumulate elapsed time and run every whole step it completes.

        Non-positive and non-finite deltas are ignored entirely, which guards
        against clock jitter, rewind or a broken clock sample.

        Args:
            elapsed_milliseconds: Wall-clock time since the previous call.

        Returns:
            Number of steps executed during this call.
        """
        if not math.isfinite(elapsed_milliseconds) or elapsed_milliseconds <= 0:
            return 0

        self._accumulator_milliseconds += elapsed_milliseconds

        steps_executed = 0
        while self._accumulator_milliseconds >= self._fixed_step_milliseconds:
            self._step_callback(self._fixed_step_milliseconds)
            self._accumulator_milliseconds -= self._fixed_step_milliseconds
            steps_executed += 1
            if self._step_committed_callback is not None:
                self._step_committed_callback()

        return steps_executed

    def sample_random(self) -> float:
        """Draw a value from the injected random source."""
        return self._random_source()
