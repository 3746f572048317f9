"""World state and step functions for the simulation runner.

Step functions are pure: they receive the current world state and return a
replacement, never mutating their input.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from atc_sim_core.constants import TrackHistoryLimits, UnitConversionConstants
from atc_sim_core.coordinates import CoordinateFrame
from atc_sim_core.data_classes import LocalPoint, Origin
from atc_sim_core.domain_model import SectorConfig, Track, TrackHistoryEntry, TrackState

if TYPE_CHECKING:
    from atc_sim_core.scheduler import SimulationScheduler


@dataclass(frozen=True)
class WorldState:
    """Everything the runner holds between steps."""

    timestamp_milliseconds: float = 0.0
    tracks: tuple[Track, ...] = ()
    sectors: SectorConfig | None = None

    def find_track(self, track_id: str) -> Track | None:
        """Return the track with the given identifier, if present."""
        return next((track for track in self.tracks if track.track_id == track_id), None)


def advance_world_timestamp(
    world_state: WorldState,
    fixed_step_milliseconds: float,
    scheduler: SimulationScheduler,
) -> WorldState:
    """Default step: advance the simulation timestamp and nothing else."""
    return dataclasses.replace(
        world_state,
        timestamp_milliseconds=world_state.timestamp_milliseconds + fixed_step_milliseconds,
    )


def advance_track_positions(
    world_state: WorldState,
    fixed_step_milliseconds: float,
    scheduler: SimulationScheduler,
) -> WorldState:
    """Move every track along its ENU velocity for one fixed step.

    Each track is integrated in a local frame anchored at its own current
    position, which keeps the flat-earth error bounded by a single step's
    displacement. Tracks without an ENU velocity are moved from groundspeed
    and heading when both are known. The previous state is appended to the
    track history, bounded to the most recent entries.
    """
    step_seconds = fixed_step_milliseconds * UnitConversionConstants.MILLISECONDS_TO_SECONDS
    next_timestamp = world_state.timestamp_milliseconds + fixed_step_milliseconds

    return dataclasses.replace(
        world_state,
        timestamp_milliseconds=next_timestamp,
        tracks=tuple(_advance_single_track(track, step_seconds, next_timestamp) for track in world_state.tracks),
    )


def velocity_from_air_data(
    groundspeed_knots: float,
    heading_degrees: float,
    vertical_speed_feet_per_minute: float | None = None,
) -> LocalPoint:
    """Convert groundspeed, true heading and vertical speed to an ENU velocity in m/s.

    Heading is measured clockwise from north.
    """
    speed_meters_per_second = UnitConversionConstants.convert_knots_to_meters_per_second(groundspeed_knots)
    heading_radians = UnitConversionConstants.convert_degrees_to_radians(heading_degrees)
    climb_meters_per_second = (
        UnitConversionConstants.convert_feet_to_meters(vertical_speed_feet_per_minute) / 60.0
        if vertical_speed_feet_per_minute is not None
        else 0.0
    )
    return LocalPoint(
        east_meters=speed_meters_per_second * math.sin(heading_radians),
        north_meters=speed_meters_per_second * math.cos(heading_radians),
        up_meters=climb_meters_per_second,
    )


def _resolve_velocity(state: TrackState) -> LocalPoint | None:
    if state.velocity_enu is not None:
        return state.velocity_enu
    if state.groundspeed_knots is None or state.heading_degrees is None:
        return None
    return velocity_from_air_data(state.groundspeed_knots, state.heading_degrees, state.vertical_speed_feet_per_minute)


def _advance_single_track(track: Track, step_seconds: float, next_timestamp: float) -> Track:
    current_state = track.state
    velocity = _resolve_velocity(current_state)

    if velocity is None:
        next_state = dataclasses.replace(current_state, timestamp_milliseconds=next_timestamp)
    else:
        track_origin = Origin(current_state.position)
        displacement = LocalPoint(*(float(component) for component in velocity.to_array() * step_seconds))
        next_state = dataclasses.replace(
            current_state,
            position=CoordinateFrame.to_geodetic(displacement, track_origin),
            timestamp_milliseconds=next_timestamp,
        )

    history = (*track.history, TrackHistoryEntry(state=current_state))
    return dataclasses.replace(
        track,
        state=next_state,
        history=history[-TrackHistoryLimits.MAXIMUM_HISTORY_ENTRIES :],
    )


def create_track_state(
    position: LocalPoint,
    origin: Origin,
    timestamp_milliseconds: float = 0.0,
    velocity_enu: LocalPoint | None = None,
) -> TrackState:
    """Build a track state from a local position, e.g. when spawning scenario traffic."""
    return TrackState(
        position=CoordinateFrame.to_geodetic(position, origin),
        timestamp_milliseconds=timestamp_milliseconds,
        velocity_enu=velocity_enu,
    )
