"""Track visualization for recorded simulation runs.

This module contains a renderer that plots recorded tracks and sector
boundaries top-down in the local ENU frame.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import matplotlib.pyplot as plt

from atc_sim_core.constants import DEFAULT_OUTPUT_DIRECTORY
from atc_sim_core.coordinates import CoordinateFrame
from atc_sim_core.utilities import generate_unique_filepath

if TYPE_CHECKING:
    from collections.abc import Sequence

    import pandas as pd

    from atc_sim_core.data_classes import Origin
    from atc_sim_core.sector_geometry import LocalSectorGeometry


class TrackPlotRenderer:
    """Creates top-down plots of recorded tracks."""

    @staticmethod
    def render_top_down_tracks(
        snapshot_frame: pd.DataFrame,
        origin: Origin,
        plot_title: str = "Simulation Tracks",
        sector_geometries: Sequence[LocalSectorGeometry] = (),
        output_filepath: Path | str | None = None,
        output_directory: Path | None = None,
        output_filename_base: str | None = None,
    ) -> Path | None:
        """Plot every recorded track in east/north meters around ``origin``.

        Args:
            snapshot_frame: Rows produced by a SnapshotRecorder.
            origin: Origin of the plotted local frame.
            plot_title: Plot title.
            sector_geometries: Sector outlines computed against the same origin.
            output_filepath: Explicit path to save the plot image. If None, uses output_directory.
            output_directory: Directory to save files in (uses DEFAULT_OUTPUT_DIRECTORY if None).
            output_filename_base: Base filename for auto-generated path (required if output_filepath is None
                and saving to file is desired).

        Returns:
            Path to saved file if saving, None if displaying interactively.
        """
        figure, axes = plt.subplots()

        for geometry in sector_geometries:
            if not geometry.rings:
                continue
            outer_ring = geometry.rings[0]
            axes.plot(
                [vertex.east_meters for vertex in outer_ring],
                [vertex.north_meters for vertex in outer_ring],
                linestyle="--",
                linewidth=1.0,
                label=f"Sector {geometry.sector_id}",
            )

        for track_id, track_rows in snapshot_frame.groupby("track_id", sort=True):
            local_positions = CoordinateFrame.to_local_array(
                track_rows["latitude_degrees"].to_numpy(),
                track_rows["longitude_degrees"].to_numpy(),
                track_rows["altitude_meters"].to_numpy(),
                origin,
            )
            axes.plot(local_positions[:, 0], local_positions[:, 1], label=str(track_id))

        axes.set_xlabel("East (m)")
        axes.set_ylabel("North (m)")
        axes.set_aspect("equal", adjustable="datalim")
        axes.set_title(plot_title)
        if axes.get_legend_handles_labels()[0]:
            axes.legend()

        # Determine save path
        save_path: Path | None = None
        if output_filepath is not None:
            save_path = Path(output_filepath)
            save_path.parent.mkdir(parents=True, exist_ok=True)
        elif output_filename_base is not None:
            target_directory = output_directory or DEFAULT_OUTPUT_DIRECTORY
            save_path = generate_unique_filepath(target_directory, f"{output_filename_base}_tracks", ".png")

        if save_path is not None:
            figure.savefig(save_path, dpi=150, bbox_inches="tight")
            plt.close(figure)
            return save_path

        plt.show()
        return None
