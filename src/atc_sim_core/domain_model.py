"""Static domain model for the simulation.

Sectors, navigation points, routes, flight plans, aircraft and airline
catalogs, and tracks. These are plain immutable records; behavior lives in
the coordinate, status and world modules.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from atc_sim_core.data_classes import GeodeticPoint, LocalPoint
from atc_sim_core.types import GeoJsonPolygon, TrackStatus, WaypointKind


@dataclass(frozen=True)
class Sector:
    """Airspace sector with a GeoJSON boundary and vertical limits in feet."""

    sector_id: str
    name: str
    boundary: GeoJsonPolygon
    floor_feet: float
    ceiling_feet: float
    frequency: str | None = None


@dataclass(frozen=True)
class SectorSet:
    """Named grouping of sectors used for split and merge scenarios."""

    set_id: str
    name: str
    sector_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class SectorConfig:
    """Static sector definitions plus their operational groupings."""

    sectors: tuple[Sector, ...] = ()
    sets: tuple[SectorSet, ...] = ()

    def find_sector(self, sector_id: str) -> Sector | None:
        """Return the sector with the given identifier, if present."""
        return next((sector for sector in self.sectors if sector.sector_id == sector_id), None)

    def sectors_in_set(self, set_id: str) -> tuple[Sector, ...]:
        """Return the sectors belonging to a sector set, in set order."""
        sector_set = next((candidate for candidate in self.sets if candidate.set_id == set_id), None)
        if sector_set is None:
            return ()
        sectors_by_id = {sector.sector_id: sector for sector in self.sectors}
        return tuple(sectors_by_id[sector_id] for sector_id in sector_set.sector_ids if sector_id in sectors_by_id)


@dataclass(frozen=True)
class Waypoint:
    """Fix, navaid or airport position."""

    waypoint_id: str
    name: str
    kind: WaypointKind
    position: GeodeticPoint
    elevation_feet: float | None = None


Fix = Waypoint


@dataclass(frozen=True)
class RouteLeg:
    """Leg between two fixes, optionally along an airway."""

    from_fix: Fix
    to_fix: Fix
    airway: str | None = None
    distance_nautical_miles: float | None = None


@dataclass(frozen=True)
class Route:
    """Ordered legs defining a lateral path."""

    route_id: str
    legs: tuple[RouteLeg, ...] = ()
    name: str | None = None
    total_distance_nautical_miles: float | None = None


@dataclass(frozen=True)
class FlightPlan:
    """Filed flight plan, kept separate from live track intent."""

    callsign: str
    departure_icao: str
    arrival_icao: str
    route: Route
    cruise_altitude_feet: float
    alternate_icao: str | None = None
    requested_speed_knots: float | None = None
    filed_enroute_time_minutes: float | None = None
    remarks: str | None = None


@dataclass(frozen=True)
class AircraftPerformanceProfile:
    """Lightweight performance profile for planning and simulation."""

    climb_rate_feet_per_minute: float
    descent_rate_feet_per_minute: float
    cruise_speed_knots: float
    maximum_speed_knots: float
    minimum_speed_knots: float
    service_ceiling_feet: float
    turn_rate_degrees_per_second: float | None = None


@dataclass(frozen=True)
class AircraftType:
    """Aircraft type keyed by ICAO designator."""

    icao: str
    name: str
    performance: AircraftPerformanceProfile
    wake_category: str | None = None


@dataclass(frozen=True)
class AirlineLivery:
    """Visual assets of an airline, separate from its identity."""

    livery_id: str
    name: str
    primary_color_hex: str | None = None
    secondary_color_hex: str | None = None
    texture_url: str | None = None


@dataclass(frozen=True)
class CallsignRule:
    """Mapping from flight numbers to spoken callsigns."""

    airline_icao: str
    spoken_name: str
    pattern: str
    allow_leading_zeros: bool = False


@dataclass(frozen=True)
class Airline:
    """Airline identity with liveries and callsign rules."""

    icao: str
    name: str
    iata: str | None = None
    default_livery: AirlineLivery | None = None
    liveries: tuple[AirlineLivery, ...] = ()
    callsign_rules: tuple[CallsignRule, ...] = ()


@dataclass(frozen=True)
class TrackState:
    """Latest observed kinematic state of a track.

    ``velocity_enu`` holds meters per second along east, north and up.
    """

    position: GeodeticPoint
    timestamp_milliseconds: float
    velocity_enu: LocalPoint | None = None
    groundspeed_knots: float | None = None
    heading_degrees: float | None = None
    vertical_speed_feet_per_minute: float | None = None


@dataclass(frozen=True)
class TrackIntent:
    """Controller clearances and desired path."""

    flight_plan: FlightPlan | None = None
    assigned_route: Route | None = None
    target_fix_id: str | None = None
    cleared_altitude_feet: float | None = None
    cleared_speed_knots: float | None = None
    cleared_heading_degrees: float | None = None


@dataclass(frozen=True)
class TrackHistoryEntry:
    """Past state kept for smoothing and playback."""

    state: TrackState
    source: str | None = None


@dataclass(frozen=True)
class Track:
    """A tracked aircraft: state, intent, metadata and lifecycle status."""

    track_id: str
    callsign: str
    state: TrackState
    aircraft_type: AircraftType | None = None
    airline: Airline | None = None
    intent: TrackIntent | None = None
    status: TrackStatus = TrackStatus.UNCONCERNED
    history: tuple[TrackHistoryEntry, ...] = field(default_factory=tuple)
