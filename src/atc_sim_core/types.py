"""Type definitions and enumerations for the simulation core.

This module contains enumerations, callable protocols and abstract
interfaces that define the seams between the scheduler, the runner,
step functions, listeners and exporters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Literal, Protocol, TypedDict

if TYPE_CHECKING:
    import pandas as pd

    from atc_sim_core.data_classes import Snapshot
    from atc_sim_core.scheduler import SimulationScheduler
    from atc_sim_core.world import WorldState


class TrackStatus(Enum):
    """Controller-relevant lifecycle status of a track."""

    UNCONCERNED = "UNCONCERNED"
    PRE_INBOUND = "PRE_INBOUND"
    INBOUND = "INBOUND"
    INBOUND_OFFER = "INBOUND_OFFER"
    OUTBOUND_OFFER = "OUTBOUND_OFFER"
    ACCEPTED = "ACCEPTED"
    INTRUDER = "INTRUDER"


class WaypointKind(Enum):
    """Kinds of navigation points unified under the waypoint type."""

    FIX = "FIX"
    VOR = "VOR"
    NDB = "NDB"
    AIRPORT = "AIRPORT"
    RNAV = "RNAV"


class GeoJsonPolygon(TypedDict):
    """GeoJSON polygon geometry.

    Each ring is a sequence of [longitude, latitude] positions; the first
    ring is the outer boundary and any further rings are holes.
    """

    type: Literal["Polygon"]
    coordinates: Sequence[Sequence[Sequence[float]]]


class RandomSource(Protocol):
    """Protocol for injectable random number sources."""

    def __call__(self) -> float:
        """Return a sample in [0, 1)."""
        ...


class SchedulerStepCallback(Protocol):
    """Protocol for the callback fired once per fixed step."""

    def __call__(self, fixed_step_milliseconds: float) -> None: ...


class WorldStepFunction(Protocol):
    """Protocol for pure world step functions driven by the runner."""

    def __call__(
        self,
        world_state: WorldState,
        fixed_step_milliseconds: float,
        scheduler: SimulationScheduler,
    ) -> WorldState:
        """Advance the world by one fixed step.

        Args:
            world_state: State produced by the immediately preceding step.
            fixed_step_milliseconds: Constant step size.
            scheduler: Scheduler, for access to its random source.

        Returns:
            The replacement world state.
        """
        ...


class SnapshotListener(Protocol):
    """Protocol for snapshot listeners."""

    def __call__(self, snapshot: Snapshot) -> None: ...


class SnapshotExporterInterface(ABC):
    """Abstract base class for recorded snapshot exporters."""

    @abstractmethod
    def export_frame(
        self,
        snapshot_frame: pd.DataFrame,
        output_filename_base: str,
        output_directory: Path | None = None,
    ) -> Path | list[Path]:
        """Export recorded snapshot rows to file(s).

        Args:
            snapshot_frame: Rows produced by a snapshot recorder.
            output_filename_base: Base filename for output.
            output_directory: Directory to save files in.

        Returns:
            Path or list of paths to created file(s).
        """
        ...
