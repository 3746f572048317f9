"""Sector geometry in the local ENU frame.

Sector boundaries arrive as GeoJSON polygons and are converted once per
origin. Picking converts a screen position back to ENU and tests it against
the converted rings, so no map projection distortion enters the test.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from matplotlib.path import Path as PolygonPath

from atc_sim_core.constants import UnitConversionConstants
from atc_sim_core.coordinates import CoordinateFrame, LocalRing
from atc_sim_core.projection import ScreenProjector

if TYPE_CHECKING:
    from collections.abc import Iterable

    from atc_sim_core.data_classes import LocalPoint, Origin, ProjectionConfig, ScreenPoint
    from atc_sim_core.domain_model import Sector


@dataclass(frozen=True)
class LocalSectorGeometry:
    """Sector boundary rings and vertical limits in local meters.

    The first ring is the outer boundary; further rings are holes.
    """

    sector_id: str
    rings: tuple[LocalRing, ...]
    floor_meters: float
    ceiling_meters: float

    def contains_local_point(self, point: LocalPoint, check_altitude: bool = False) -> bool:
        """Check whether a local point lies inside the sector.

        Args:
            point: Point computed against the same origin as the rings.
            check_altitude: Also require floor <= up <= ceiling.

        Returns:
            True if the point is inside the outer ring and outside every hole.
        """
        if not self.rings:
            return False
        if check_altitude and not (self.floor_meters <= point.up_meters <= self.ceiling_meters):
            return False

        horizontal_position = (point.east_meters, point.north_meters)
        outer_ring, *holes = self.rings
        if not _ring_path(outer_ring).contains_point(horizontal_position):
            return False
        return not any(_ring_path(hole).contains_point(horizontal_position) for hole in holes)


def _ring_path(ring: LocalRing) -> PolygonPath:
    return PolygonPath([(vertex.east_meters, vertex.north_meters) for vertex in ring])


def build_local_sector_geometry(sector: Sector, origin: Origin) -> LocalSectorGeometry:
    """Convert a sector's GeoJSON boundary and feet limits to local meters."""
    floor_meters = UnitConversionConstants.convert_feet_to_meters(sector.floor_feet)
    return LocalSectorGeometry(
        sector_id=sector.sector_id,
        rings=CoordinateFrame.polygon_to_local(sector.boundary, origin, default_altitude_meters=floor_meters),
        floor_meters=floor_meters,
        ceiling_meters=UnitConversionConstants.convert_feet_to_meters(sector.ceiling_feet),
    )


def find_sector_at_screen_point(
    screen_point: ScreenPoint,
    sector_geometries: Iterable[LocalSectorGeometry],
    config: ProjectionConfig,
) -> LocalSectorGeometry | None:
    """Return the first sector under a screen position, or None."""
    local_point = ScreenProjector.to_local(screen_point, config)
    return next(
        (geometry for geometry in sector_geometries if geometry.contains_local_point(local_point)),
        None,
    )
