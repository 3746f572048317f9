"""ATC Simulation Core.

This package provides the deterministic simulation substrate of an
air-traffic visualization and training tool: a fixed-timestep scheduler
and runner, a track status machine, and geodetic, local and screen
coordinate conversions.
"""

# Core types and data classes
from .constants import DEFAULT_OUTPUT_DIRECTORY
from .data_classes import (
    GeodeticPoint,
    LocalPoint,
    Origin,
    ProjectionConfig,
    ScreenPoint,
    Snapshot,
    TrackStatusSignals,
)
from .types import TrackStatus, WaypointKind

# Coordinate conversion and projection
from .coordinates import CoordinateFrame
from .projection import ScreenProjector, create_default_projection, meters_to_pixels, pixels_to_meters

# Simulation
from .scheduler import SimulationScheduler
from .runner import SimulationRunner
from .track_status import TrackStatusMachine, apply_track_status
from .world import WorldState, advance_track_positions, advance_world_timestamp, velocity_from_air_data

# Domain model
from .domain_model import Sector, SectorConfig, SectorSet, Track, TrackState
from .sector_geometry import LocalSectorGeometry, build_local_sector_geometry, find_sector_at_screen_point

# Recording, export and sessions
from .recording import CsvSnapshotExporter, MatlabSnapshotExporter, SnapshotRecorder
from .session import SimulationSession, run_headless_simulation

# Utilities
from .utilities import generate_unique_filepath, interpolate_local_points

# Visualization
from .visualization import TrackPlotRenderer

__all__ = [
    # Constants
    "DEFAULT_OUTPUT_DIRECTORY",
    # Core types
    "GeodeticPoint",
    "LocalPoint",
    "Origin",
    "ProjectionConfig",
    "ScreenPoint",
    "Snapshot",
    "TrackStatus",
    "TrackStatusSignals",
    "WaypointKind",
    # Coordinates
    "CoordinateFrame",
    "ScreenProjector",
    "create_default_projection",
    "meters_to_pixels",
    "pixels_to_meters",
    # Simulation
    "SimulationScheduler",
    "SimulationRunner",
    "TrackStatusMachine",
    "apply_track_status",
    "WorldState",
    "advance_track_positions",
    "advance_world_timestamp",
    "velocity_from_air_data",
    # Domain model
    "Sector",
    "SectorConfig",
    "SectorSet",
    "Track",
    "TrackState",
    "LocalSectorGeometry",
    "build_local_sector_geometry",
    "find_sector_at_screen_point",
    # Recording and sessions
    "CsvSnapshotExporter",
    "MatlabSnapshotExporter",
    "SnapshotRecorder",
    "SimulationSession",
    "run_headless_simulation",
    # Utilities
    "generate_unique_filepath",
    "interpolate_local_points",
    # Visualization
    "TrackPlotRenderer",
]
