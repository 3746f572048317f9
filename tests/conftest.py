"""Pytest configuration and shared fixtures for simulation core tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Render plots off-screen
os.environ.setdefault("MPLBACKEND", "Agg")

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from atc_sim_core.data_classes import GeodeticPoint, LocalPoint, Origin  # noqa: E402
from atc_sim_core.domain_model import Sector, Track, TrackState  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "timer: marks tests that exercise the wall-clock timer thread",
    )


@pytest.fixture
def exeter_origin() -> Origin:
    """Origin used by the reference conversion scenario."""
    return Origin(GeodeticPoint(latitude_degrees=50.5033, longitude_degrees=-3.476, altitude_meters=0.0))


@pytest.fixture
def square_sector() -> Sector:
    """Sector of roughly 6 km x 5.5 km around the Exeter origin, with a hole in its north-east corner."""
    return Sector(
        sector_id="EXE",
        name="Exeter Approach",
        boundary={
            "type": "Polygon",
            "coordinates": [
                [[-3.52, 50.48], [-3.43, 50.48], [-3.43, 50.53], [-3.52, 50.53], [-3.52, 50.48]],
                [[-3.45, 50.515], [-3.435, 50.515], [-3.435, 50.525], [-3.45, 50.525], [-3.45, 50.515]],
            ],
        },
        floor_feet=1000.0,
        ceiling_feet=10000.0,
    )


@pytest.fixture
def eastbound_track(exeter_origin: Origin) -> Track:
    """Track at the origin flying east at 100 m/s."""
    return Track(
        track_id="T1",
        callsign="BAW123",
        state=TrackState(
            position=exeter_origin.reference,
            timestamp_milliseconds=0.0,
            velocity_enu=LocalPoint(100.0, 0.0, 0.0),
        ),
    )
