"""Data classes for the simulation core.

This module contains the immutable value objects exchanged between the
coordinate layer, the projector, the status machine and the runner.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from atc_sim_core.validation import require_positive_finite

if TYPE_CHECKING:
    from atc_sim_core.world import WorldState


@dataclass(frozen=True)
class GeodeticPoint:
    """Geodetic position in degrees with altitude in meters."""

    latitude_degrees: float
    longitude_degrees: float
    altitude_meters: float = 0.0


@dataclass(frozen=True)
class LocalPoint:
    """East-North-Up offset in meters relative to an Origin.

    The origin is not recorded in the value; a LocalPoint is only
    meaningful together with the Origin it was computed against.
    """

    east_meters: float
    north_meters: float
    up_meters: float = 0.0

    def to_array(self) -> NDArray[np.floating[Any]]:
        """Return the point as an [east, north, up] array."""
        return np.array([self.east_meters, self.north_meters, self.up_meters], dtype=np.float64)


@dataclass(frozen=True)
class Origin:
    """Reference point at which local ENU coordinates are zero."""

    reference: GeodeticPoint

    @classmethod
    def from_coordinates(
        cls,
        latitude_degrees: float,
        longitude_degrees: float,
        altitude_meters: float = 0.0,
    ) -> Origin:
        """Create an origin directly from coordinate values."""
        return cls(GeodeticPoint(latitude_degrees, longitude_degrees, altitude_meters))


@dataclass(frozen=True)
class ScreenPoint:
    """Screen position in pixels."""

    x: float
    y: float


@dataclass(frozen=True)
class ProjectionConfig:
    """Parameters of the linear ENU to screen mapping.

    Attributes:
        pixels_per_meter: Scale factor, must be positive.
        screen_origin: Pixel position of the local origin.
        north_up: When True increasing north maps to decreasing screen y.
    """

    pixels_per_meter: float = 1.0
    screen_origin: ScreenPoint = field(default_factory=lambda: ScreenPoint(0.0, 0.0))
    north_up: bool = True

    def __post_init__(self) -> None:
        require_positive_finite(self.pixels_per_meter, "pixels_per_meter")

    @property
    def vertical_axis_sign(self) -> float:
        """Sign applied to north offsets on the screen y axis."""
        return -1.0 if self.north_up else 1.0


@dataclass(frozen=True)
class TrackStatusSignals:
    """Independent boolean signals derived each tick for one track.

    The bundle carries no priority; ordering is imposed by the
    status machine.
    """

    is_pre_inbound: bool = False
    is_inbound: bool = False
    is_accepted: bool = False
    is_intruder: bool = False
    has_inbound_offer: bool = False
    has_outbound_offer: bool = False


@dataclass(frozen=True)
class Snapshot:
    """State published to listeners after a runner advance.

    Listeners must treat the snapshot and its world state as read-only;
    other listeners of the same fan-out receive the same objects.
    """

    tick: int
    interpolation_fraction: float
    timestamp_milliseconds: float
    world_state: WorldState
