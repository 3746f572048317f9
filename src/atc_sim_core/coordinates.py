"""Geodetic to local tangent plane conversion.

Internal geometry runs in a local East-North-Up frame in meters anchored at
an Origin. The transform is a flat-earth approximation: accurate within a
few tens of kilometers of the origin, degrading with distance and as the
origin latitude approaches the poles.

Longitude wraparound at +/-180 degrees is not normalized. Callers must
pre-normalize longitudes for sectors spanning the antimeridian.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from atc_sim_core.constants import GeodeticConstants, UnitConversionConstants
from atc_sim_core.data_classes import GeodeticPoint, LocalPoint, Origin
from atc_sim_core.types import GeoJsonPolygon

LocalRing = tuple[LocalPoint, ...]


class CoordinateFrame:
    """Converts between geodetic points and local ENU points."""

    earth_radius_meters = GeodeticConstants.EARTH_RADIUS_METERS

    @classmethod
    def to_local(cls, point: GeodeticPoint, origin: Origin) -> LocalPoint:
        """Convert a geodetic point to ENU meters relative to an origin.

        Args:
            point: Geodetic point to convert.
            origin: Reference origin of the local frame.

        Returns:
            Local ENU offset of the point.
        """
        reference = origin.reference
        origin_latitude_radians = UnitConversionConstants.convert_degrees_to_radians(reference.latitude_degrees)
        delta_latitude_radians = UnitConversionConstants.convert_degrees_to_radians(
            point.latitude_degrees - reference.latitude_degrees
        )
        delta_longitude_radians = UnitConversionConstants.convert_degrees_to_radians(
            point.longitude_degrees - reference.longitude_degrees
        )

        return LocalPoint(
            east_meters=delta_longitude_radians * math.cos(origin_latitude_radians) * cls.earth_radius_meters,
            north_meters=delta_latitude_radians * cls.earth_radius_meters,
            up_meters=point.altitude_meters - reference.altitude_meters,
        )

    @classmethod
    def to_geodetic(cls, point: LocalPoint, origin: Origin) -> GeodeticPoint:
        """Convert an ENU point back to a geodetic point.

        Args:
            point: Local ENU point computed against ``origin``.
            origin: Reference origin of the local frame.

        Returns:
            Geodetic position of the point.
        """
        reference = origin.reference
        origin_latitude_radians = UnitConversionConstants.convert_degrees_to_radians(reference.latitude_degrees)
        delta_latitude_radians = point.north_meters / cls.earth_radius_meters
        delta_longitude_radians = point.east_meters / (cls.earth_radius_meters * math.cos(origin_latitude_radians))

        return GeodeticPoint(
            latitude_degrees=reference.latitude_degrees
            + UnitConversionConstants.convert_radians_to_degrees(delta_latitude_radians),
            longitude_degrees=reference.longitude_degrees
            + UnitConversionConstants.convert_radians_to_degrees(delta_longitude_radians),
            altitude_meters=reference.altitude_meters + point.up_meters,
        )

    @classmethod
    def polygon_to_local(
        cls,
        polygon: GeoJsonPolygon | Sequence[Sequence[Sequence[float]]],
        origin: Origin,
        default_altitude_meters: float = 0.0,
    ) -> tuple[LocalRing, ...]:
        """Convert every ring of a GeoJSON polygon to local points.

        GeoJSON positions are ordered [longitude, latitude]; any third
        position element is ignored in favour of ``default_altitude_meters``.

        Args:
            polygon: GeoJSON polygon geometry or its bare ``coordinates``.
            origin: Reference origin of the local frame.
            default_altitude_meters: Altitude assigned to every vertex.

        Returns:
            Tuple of rings, each a tuple of LocalPoint, matching the input nesting.
        """
        rings = polygon["coordinates"] if isinstance(polygon, Mapping) else polygon
        return tuple(
            tuple(
                cls.to_local(
                    GeodeticPoint(
                        latitude_degrees=float(position[1]),
                        longitude_degrees=float(position[0]),
                        altitude_meters=default_altitude_meters,
                    ),
                    origin,
                )
                for position in ring
            )
            for ring in rings
        )

    @classmethod
    def to_local_array(
        cls,
        latitudes_degrees: ArrayLike,
        longitudes_degrees: ArrayLike,
        altitudes_meters: ArrayLike,
        origin: Origin,
    ) -> NDArray[np.floating[Any]]:
        """Vectorized forward transform for many points at once.

        Returns:
            Array of shape (N, 3) holding [east, north, up] rows in meters.
        """
        reference = origin.reference
        latitudes = np.asarray(latitudes_degrees, dtype=np.float64)
        longitudes = np.asarray(longitudes_degrees, dtype=np.float64)
        altitudes = np.broadcast_to(np.asarray(altitudes_meters, dtype=np.float64), latitudes.shape)

        cosine_origin_latitude = math.cos(math.radians(reference.latitude_degrees))
        north = np.radians(latitudes - reference.latitude_degrees) * cls.earth_radius_meters
        east = np.radians(longitudes - reference.longitude_degrees) * cosine_origin_latitude * cls.earth_radius_meters
        up = altitudes - reference.altitude_meters

        return np.column_stack((east, north, up))
