"""Snapshot recording and export.

This module contains a snapshot listener that flattens published world
states into per-track rows, and exporters that write those rows to
CSV and MATLAB formats.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

import pandas as pd
import scipy.io

from atc_sim_core.constants import DEFAULT_OUTPUT_DIRECTORY, FileExportLimits
from atc_sim_core.types import SnapshotExporterInterface
from atc_sim_core.utilities import generate_unique_filepath

if TYPE_CHECKING:
    from atc_sim_core.data_classes import Snapshot

SNAPSHOT_FRAME_COLUMNS: Final[tuple[str, ...]] = (
    "tick",
    "interpolation_fraction",
    "timestamp_milliseconds",
    "track_id",
    "callsign",
    "status",
    "latitude_degrees",
    "longitude_degrees",
    "altitude_meters",
)


class SnapshotRecorder:
    """Snapshot listener that keeps one row per track per recorded snapshot.

    By default only the first snapshot of each tick is kept, so advances
    that consume no step do not duplicate rows.
    """

    def __init__(self, record_every_snapshot: bool = False) -> None:
        """Initialize the recorder.

        Args:
            record_every_snapshot: Also record snapshots repeating an already recorded tick.
        """
        self.record_every_snapshot = record_every_snapshot
        self._rows: list[dict[str, Any]] = []
        self._last_recorded_tick: int | None = None
        self.snapshot_count = 0

    def __call__(self, snapshot: Snapshot) -> None:
        if not self.record_every_snapshot and snapshot.tick == self._last_recorded_tick:
            return

        self._last_recorded_tick = snapshot.tick
        self.snapshot_count += 1
        for track in snapshot.world_state.tracks:
            position = track.state.position
            self._rows.append(
                {
                    "tick": snapshot.tick,
                    "interpolation_fraction": snapshot.interpolation_fraction,
                    "timestamp_milliseconds": snapshot.timestamp_milliseconds,
                    "track_id": track.track_id,
                    "callsign": track.callsign,
                    "status": track.status.value,
                    "latitude_degrees": position.latitude_degrees,
                    "longitude_degrees": position.longitude_degrees,
                    "altitude_meters": position.altitude_meters,
                }
            )

    def clear(self) -> None:
        """Drop all recorded rows."""
        self._rows.clear()
        self._last_recorded_tick = None
        self.snapshot_count = 0

    def to_dataframe(self) -> pd.DataFrame:
        """Return recorded rows as a DataFrame with a fixed column order."""
        return pd.DataFrame(self._rows, columns=list(SNAPSHOT_FRAME_COLUMNS))


class CsvSnapshotExporter(SnapshotExporterInterface):
    """Exports recorded snapshots to CSV with automatic file splitting."""

    def __init__(
        self,
        maximum_rows_per_file: int = FileExportLimits.MAXIMUM_CSV_ROWS_PER_FILE,
    ) -> None:
        """Initialize the CSV exporter.

        Args:
            maximum_rows_per_file: Maximum number of rows per output file.
        """
        self.maximum_rows_per_file = maximum_rows_per_file

    def export_frame(
        self,
        snapshot_frame: pd.DataFrame,
        output_filename_base: str,
        output_directory: Path | None = None,
    ) -> list[Path]:
        """Export recorded rows to one or more CSV files.

        Args:
            snapshot_frame: Rows produced by a SnapshotRecorder.
            output_filename_base: Base filename for output.
            output_directory: Directory to save files in (uses DEFAULT_OUTPUT_DIRECTORY if None).

        Returns:
            List of paths to created files.
        """
        if snapshot_frame.empty:
            print("No snapshot data to export.")
            return []

        target_directory = output_directory or DEFAULT_OUTPUT_DIRECTORY
        created_files: list[Path] = []

        for chunk_start in range(0, len(snapshot_frame), self.maximum_rows_per_file):
            chunk = snapshot_frame.iloc[chunk_start : chunk_start + self.maximum_rows_per_file]
            output_filepath = generate_unique_filepath(target_directory, f"{output_filename_base}_Snapshots", ".csv")
            print(f"Writing to {output_filepath}...")
            chunk.to_csv(output_filepath, index=False, encoding="utf-8")
            created_files.append(output_filepath)

        print("Data successfully saved.")
        return created_files


class MatlabSnapshotExporter(SnapshotExporterInterface):
    """Exports recorded snapshots to MATLAB .mat format."""

    def export_frame(
        self,
        snapshot_frame: pd.DataFrame,
        output_filename_base: str,
        output_directory: Path | None = None,
    ) -> Path:
        """Export recorded rows as a struct of column vectors.

        Args:
            snapshot_frame: Rows produced by a SnapshotRecorder.
            output_filename_base: Base filename for output.
            output_directory: Directory to save files in (uses DEFAULT_OUTPUT_DIRECTORY if None).

        Returns:
            Path to created file.
        """
        target_directory = output_directory or DEFAULT_OUTPUT_DIRECTORY
        output_filepath = generate_unique_filepath(target_directory, f"{output_filename_base}_Snapshots", ".mat")

        columns = {
            column: snapshot_frame[column].to_numpy(dtype=str)
            if snapshot_frame[column].dtype == object
            else snapshot_frame[column].to_numpy()
            for column in snapshot_frame.columns
        }
        scipy.io.savemat(str(output_filepath), {"snapshots": columns})
        print(f"Data successfully saved to {output_filepath}")
        return output_filepath
