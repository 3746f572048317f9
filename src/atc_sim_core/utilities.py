"""Utility functions for the simulation core.

This module contains helpers for render interpolation, value clamping
and output file naming.
"""

from __future__ import annotations

from pathlib import Path

from atc_sim_core.data_classes import LocalPoint


def generate_unique_filepath(output_directory: Path, base_name: str, extension: str) -> Path:
    """Generate a unique filepath by appending a number if file exists.

    Args:
        output_directory: Directory to save the file in.
        base_name: Base filename without extension.
        extension: File extension including the dot (e.g., '.csv').

    Returns:
        Unique filepath that does not exist.
    """
    output_directory.mkdir(parents=True, exist_ok=True)
    counter = 0
    filepath = output_directory / f"{base_name}{extension}"

    while filepath.exists():
        counter += 1
        filepath = output_directory / f"{base_name}_{counter}{extension}"

    return filepath


def saturate_value_within_limits(value: float, minimum_limit: float, maximum_limit: float) -> float:
    """Clamp a value to [minimum_limit, maximum_limit]."""
    if value < minimum_limit:
        return minimum_limit
    if value > maximum_limit:
        return maximum_limit
    return value


def interpolate_local_points(previous: LocalPoint, current: LocalPoint, fraction: float) -> LocalPoint:
    """Blend two committed positions for rendering between simulation steps.

    Args:
        previous: Position at the last committed step.
        current: Position at the following step.
        fraction: Interpolation fraction; clamped to [0, 1].

    Returns:
        Linearly interpolated position.
    """
    weight = saturate_value_within_limits(fraction, 0.0, 1.0)
    return LocalPoint(
        east_meters=previous.east_meters + (current.east_meters - previous.east_meters) * weight,
        north_meters=previous.north_meters + (current.north_meters - previous.north_meters) * weight,
        up_meters=previous.up_meters + (current.up_meters - previous.up_meters) * weight,
    )
