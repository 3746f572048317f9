"""Demonstration script for the ATC simulation core.

This script builds a small sector and two moving tracks, runs them
headless through the fixed-timestep runner, derives track status from
sector containment, and writes the recorded snapshots and a plot.

All output files are automatically saved to the 'output' directory
with unique filenames to prevent overwriting.
"""

import dataclasses

from atc_sim_core import (
    CoordinateFrame,
    GeodeticPoint,
    LocalPoint,
    Origin,
    Sector,
    SectorConfig,
    SimulationSession,
    Track,
    TrackState,
    TrackStatusSignals,
    WorldState,
    advance_track_positions,
    apply_track_status,
    build_local_sector_geometry,
)


def main() -> None:
    """Run a two-track scenario for one simulated minute."""
    # Configuration parameters
    simulation_duration_milliseconds = 60_000
    frame_interval_milliseconds = 16
    origin = Origin.from_coordinates(50.5033, -3.476, 0.0)

    sector = Sector(
        sector_id="EXE",
        name="Exeter Approach",
        boundary={
            "type": "Polygon",
            "coordinates": [[[-3.52, 50.48], [-3.43, 50.48], [-3.43, 50.53], [-3.52, 50.53], [-3.52, 50.48]]],
        },
        floor_feet=0.0,
        ceiling_feet=10_000.0,
    )
    sector_geometry = build_local_sector_geometry(sector, origin)

    tracks = (
        Track(
            track_id="T1",
            callsign="BAW123",
            state=TrackState(
                position=CoordinateFrame.to_geodetic(LocalPoint(-6000.0, 500.0, 1500.0), origin),
                timestamp_milliseconds=0.0,
                velocity_enu=LocalPoint(120.0, 0.0, 0.0),
            ),
        ),
        Track(
            track_id="T2",
            callsign="EZY45",
            state=TrackState(
                position=GeodeticPoint(50.46, -3.47, 2500.0),
                timestamp_milliseconds=0.0,
                velocity_enu=LocalPoint(0.0, 90.0, -2.0),
            ),
        ),
    )

    def step_with_status(world_state, fixed_step_milliseconds, scheduler):
        moved_world = advance_track_positions(world_state, fixed_step_milliseconds, scheduler)
        updated_tracks = []
        for track in moved_world.tracks:
            local_position = CoordinateFrame.to_local(track.state.position, origin)
            signals = TrackStatusSignals(is_accepted=sector_geometry.contains_local_point(local_position, check_altitude=True))
            updated_tracks.append(apply_track_status(track, signals))
        return dataclasses.replace(moved_world, tracks=tuple(updated_tracks))

    world_state = WorldState(timestamp_milliseconds=0.0, tracks=tracks, sectors=SectorConfig(sectors=(sector,)))
    session = SimulationSession.create("exeter_demo", world_state, origin, step=step_with_status)

    snapshot_frame = session.run_for(simulation_duration_milliseconds, frame_interval_milliseconds)
    print(f"Processed {session.runner.tick} ticks, recorded {len(snapshot_frame)} rows")
    print(snapshot_frame.groupby(["track_id", "status"]).size())

    csv_output_paths = session.export_to_csv()
    if csv_output_paths:
        print(f"Saved CSV file(s): {csv_output_paths}")

    matlab_output_path = session.export_to_matlab()
    if matlab_output_path:
        print(f"Saved MATLAB file: {matlab_output_path}")

    saved_path = session.visualize_tracks()
    if saved_path:
        print(f"Saved plot image: {saved_path}")


if __name__ == "__main__":
    main()
