"""Unit tests for sector geometry and picking."""

from __future__ import annotations

import pytest

from atc_sim_core.coordinates import CoordinateFrame
from atc_sim_core.data_classes import GeodeticPoint, LocalPoint, Origin, ProjectionConfig, ScreenPoint
from atc_sim_core.domain_model import Sector
from atc_sim_core.projection import ScreenProjector
from atc_sim_core.sector_geometry import LocalSectorGeometry, build_local_sector_geometry, find_sector_at_screen_point


@pytest.fixture
def sector_geometry(square_sector: Sector, exeter_origin: Origin) -> LocalSectorGeometry:
    """Local geometry of the square test sector."""
    return build_local_sector_geometry(square_sector, exeter_origin)


class TestBuildLocalSectorGeometry:
    """Tests for build_local_sector_geometry."""

    def test_vertical_limits_in_meters(self, sector_geometry: LocalSectorGeometry) -> None:
        """Floor and ceiling are converted from feet."""
        assert sector_geometry.sector_id == "EXE"
        assert sector_geometry.floor_meters == pytest.approx(304.8)
        assert sector_geometry.ceiling_meters == pytest.approx(3048.0)

    def test_rings_use_floor_altitude(self, sector_geometry: LocalSectorGeometry, exeter_origin: Origin) -> None:
        """Ring vertices are placed at the sector floor."""
        first_vertex = sector_geometry.rings[0][0]
        expected = CoordinateFrame.to_local(GeodeticPoint(50.48, -3.52, 304.8), exeter_origin)

        assert first_vertex.east_meters == pytest.approx(expected.east_meters)
        assert first_vertex.north_meters == pytest.approx(expected.north_meters)
        assert first_vertex.up_meters == pytest.approx(304.8)


class TestContainsLocalPoint:
    """Tests for LocalSectorGeometry.contains_local_point."""

    def test_origin_is_inside(self, sector_geometry: LocalSectorGeometry) -> None:
        """The origin lies inside the outer ring."""
        assert sector_geometry.contains_local_point(LocalPoint(0.0, 0.0, 0.0))

    def test_point_outside_outer_ring(self, sector_geometry: LocalSectorGeometry, exeter_origin: Origin) -> None:
        """Points beyond the boundary are outside."""
        outside = CoordinateFrame.to_local(GeodeticPoint(50.60, -3.476), exeter_origin)

        assert not sector_geometry.contains_local_point(outside)

    def test_point_inside_hole(self, sector_geometry: LocalSectorGeometry, exeter_origin: Origin) -> None:
        """Holes are excluded from the sector."""
        in_hole = CoordinateFrame.to_local(GeodeticPoint(50.52, -3.44), exeter_origin)

        assert not sector_geometry.contains_local_point(in_hole)

    @pytest.mark.parametrize(
        ("up_meters", "expected"),
        [
            (100.0, False),
            (304.8, True),
            (2000.0, True),
            (3500.0, False),
        ],
    )
    def test_altitude_check(self, sector_geometry: LocalSectorGeometry, up_meters: float, expected: bool) -> None:
        """With altitude checking the point must lie between floor and ceiling."""
        point = LocalPoint(0.0, 0.0, up_meters)

        assert sector_geometry.contains_local_point(point, check_altitude=True) is expected
        assert sector_geometry.contains_local_point(point) is True

    def test_empty_geometry_contains_nothing(self) -> None:
        """A sector without rings contains no point."""
        geometry = LocalSectorGeometry(sector_id="EMPTY", rings=(), floor_meters=0.0, ceiling_meters=1.0)

        assert not geometry.contains_local_point(LocalPoint(0.0, 0.0))


class TestFindSectorAtScreenPoint:
    """Tests for find_sector_at_screen_point."""

    def test_picks_sector_under_cursor(self, sector_geometry: LocalSectorGeometry) -> None:
        """A click on the projected origin selects the sector."""
        config = ProjectionConfig(pixels_per_meter=0.1, screen_origin=ScreenPoint(400.0, 300.0), north_up=True)
        click = ScreenProjector.to_screen(LocalPoint(250.0, -400.0), config)

        assert find_sector_at_screen_point(click, [sector_geometry], config) is sector_geometry

    def test_returns_none_outside_every_sector(self, sector_geometry: LocalSectorGeometry) -> None:
        """Clicks away from all sectors select nothing."""
        config = ProjectionConfig(pixels_per_meter=0.1, screen_origin=ScreenPoint(400.0, 300.0), north_up=True)

        assert find_sector_at_screen_point(ScreenPoint(5000.0, 5000.0), [sector_geometry], config) is None
