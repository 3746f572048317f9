"""Headless simulation sessions.

A session wires a runner to a snapshot recorder and drives it with a fixed
frame interval instead of the wall clock, so runs are reproducible.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from atc_sim_core.constants import SimulationTimingConstants
from atc_sim_core.recording import CsvSnapshotExporter, MatlabSnapshotExporter, SnapshotRecorder
from atc_sim_core.runner import SimulationRunner
from atc_sim_core.sector_geometry import LocalSectorGeometry, build_local_sector_geometry
from atc_sim_core.validation import require_positive_finite
from atc_sim_core.visualization import TrackPlotRenderer

if TYPE_CHECKING:
    import pandas as pd

    from atc_sim_core.data_classes import Origin
    from atc_sim_core.types import RandomSource, WorldStepFunction
    from atc_sim_core.world import WorldState


@dataclass
class SimulationSession:
    """Encapsulates a runner, its recorder and the frame origin used for output."""

    session_name: str
    origin: Origin
    runner: SimulationRunner
    recorder: SnapshotRecorder = field(default_factory=SnapshotRecorder)

    def __post_init__(self) -> None:
        self.runner.on_snapshot(self.recorder)

    @classmethod
    def create(
        cls,
        session_name: str,
        world_state: WorldState,
        origin: Origin,
        step: WorldStepFunction | None = None,
        random_source: RandomSource | None = None,
        fixed_step_milliseconds: float = SimulationTimingConstants.FIXED_TIMESTEP_MILLISECONDS,
    ) -> SimulationSession:
        """Create a session around a new runner."""
        runner = SimulationRunner(
            world_state,
            step=step,
            random_source=random_source,
            fixed_step_milliseconds=fixed_step_milliseconds,
        )
        return cls(session_name=session_name, origin=origin, runner=runner)

    def run_for(
        self,
        duration_milliseconds: float,
        frame_interval_milliseconds: float = SimulationTimingConstants.FIXED_TIMESTEP_MILLISECONDS,
    ) -> pd.DataFrame:
        """Advance the runner in equal frames until the duration is covered.

        The last frame is shortened so exactly ``duration_milliseconds``
        are fed to the runner.

        Returns:
            All rows recorded so far.
        """
        frame_interval = require_positive_finite(frame_interval_milliseconds, "frame_interval_milliseconds")
        remaining_milliseconds = duration_milliseconds
        while remaining_milliseconds > 0:
            elapsed_milliseconds = min(frame_interval, remaining_milliseconds)
            self.runner.advance_by(elapsed_milliseconds)
            remaining_milliseconds -= elapsed_milliseconds
        return self.recorder.to_dataframe()

    def sector_geometries(self) -> list[LocalSectorGeometry]:
        """Local geometry of every sector in the current world state."""
        sectors = self.runner.world_state.sectors
        if sectors is None:
            return []
        return [build_local_sector_geometry(sector, self.origin) for sector in sectors.sectors]

    def export_to_csv(self, output_filename_base: str | None = None, output_directory: Path | None = None) -> list[Path]:
        """Export recorded snapshots to CSV format."""
        exporter = CsvSnapshotExporter()
        return exporter.export_frame(self.recorder.to_dataframe(), output_filename_base or self.session_name, output_directory)

    def export_to_matlab(self, output_filename_base: str | None = None, output_directory: Path | None = None) -> Path | None:
        """Export recorded snapshots to MATLAB format.

        Returns:
            Path to created file or None if nothing was recorded.
        """
        snapshot_frame = self.recorder.to_dataframe()
        if snapshot_frame.empty:
            print("No snapshots to export.")
            return None

        exporter = MatlabSnapshotExporter()
        return exporter.export_frame(snapshot_frame, output_filename_base or self.session_name, output_directory)

    def visualize_tracks(
        self,
        plot_title: str | None = None,
        output_filepath: Path | str | None = None,
        save_to_file: bool = True,
    ) -> Path | None:
        """Plot recorded tracks top-down with sector outlines.

        Returns:
            Path to saved file if saving, None if displaying interactively.
        """
        return TrackPlotRenderer.render_top_down_tracks(
            self.recorder.to_dataframe(),
            self.origin,
            plot_title or self.session_name.replace("_", " "),
            sector_geometries=self.sector_geometries(),
            output_filepath=output_filepath,
            output_filename_base=self.session_name if save_to_file else None,
        )


def run_headless_simulation(
    world_state: WorldState,
    origin: Origin,
    duration_milliseconds: float,
    frame_interval_milliseconds: float = SimulationTimingConstants.FIXED_TIMESTEP_MILLISECONDS,
    step: WorldStepFunction | None = None,
    session_name: str = "headless_simulation",
) -> tuple[pd.DataFrame, SimulationSession]:
    """Run a world state for a fixed simulated duration without a timer.

    This is the main entry point for batch runs.

    Args:
        world_state: Initial world state.
        origin: Origin used for plotting and sector geometry.
        duration_milliseconds: Simulated time to feed to the runner.
        frame_interval_milliseconds: Size of each advance.
        step: World step function (defaults to advancing the timestamp).
        session_name: Name used for output files.

    Returns:
        Tuple of (recorded rows, session).
    """
    start_time = time.time()

    session = SimulationSession.create(session_name, world_state, origin, step=step)
    snapshot_frame = session.run_for(duration_milliseconds, frame_interval_milliseconds)

    elapsed_time = time.time() - start_time
    print(f"Simulated {session.runner.tick} ticks in {elapsed_time:.2f} seconds")

    return snapshot_frame, session
