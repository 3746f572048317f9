"""Constants and configuration values for the simulation core.

This module contains all constant values organized by domain:
geodesy, simulation timing, unit conversion, and output limits.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Final


class GeodeticConstants:
    """Constants for the local tangent plane model.

    A single spherical radius is used; the model is a flat-earth
    approximation around an origin, not a full ellipsoid.
    """

    EARTH_RADIUS_METERS: Final[float] = 6_378_137.0


class UnitConversionConstants:
    """Physical unit conversion factors."""

    FEET_TO_METERS: Final[float] = 0.3048
    KNOTS_TO_METERS_PER_SECOND: Final[float] = 1852.0 / 3600.0
    DEGREES_TO_RADIANS: Final[float] = math.pi / 180.0
    RADIANS_TO_DEGREES: Final[float] = 180.0 / math.pi
    MILLISECONDS_TO_SECONDS: Final[float] = 0.001

    @classmethod
    def convert_feet_to_meters(cls, length_feet: float) -> float:
        """Convert length from feet to meters."""
        return length_feet * cls.FEET_TO_METERS

    @classmethod
    def convert_knots_to_meters_per_second(cls, speed_knots: float) -> float:
        """Convert speed from knots to meters per second."""
        return speed_knots * cls.KNOTS_TO_METERS_PER_SECOND

    @classmethod
    def convert_degrees_to_radians(cls, angle_degrees: float) -> float:
        """Convert angle from degrees to radians."""
        return angle_degrees * cls.DEGREES_TO_RADIANS

    @classmethod
    def convert_radians_to_degrees(cls, angle_radians: float) -> float:
        """Convert angle from radians to degrees."""
        return angle_radians * cls.RADIANS_TO_DEGREES


class SimulationTimingConstants:
    """Timing values for the fixed-timestep scheduler."""

    FIXED_TIMESTEP_MILLISECONDS: Final[float] = 100.0  # 10 Hz
    DEFAULT_RANDOM_VALUE: Final[float] = 0.5


class TrackHistoryLimits:
    """Limits for per-track history kept by step functions."""

    MAXIMUM_HISTORY_ENTRIES: Final[int] = 20


class FileExportLimits:
    """Limits for file export operations."""

    MAXIMUM_CSV_ROWS_PER_FILE: Final[int] = 1_000_000


# Default output directory for all generated files
DEFAULT_OUTPUT_DIRECTORY: Final[Path] = Path("output")
