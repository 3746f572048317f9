"""Linear projection between local ENU meters and screen pixels.

Sector geometry and trajectories stay in ENU meters and are only projected
at draw time. Picking inverts the projection and tests in ENU.
"""

from __future__ import annotations

from atc_sim_core.data_classes import LocalPoint, ProjectionConfig, ScreenPoint


def create_default_projection() -> ProjectionConfig:
    """Return a unit-scale, north-up projection anchored at pixel (0, 0)."""
    return ProjectionConfig(pixels_per_meter=1.0, screen_origin=ScreenPoint(0.0, 0.0), north_up=True)


def meters_to_pixels(meters: float, config: ProjectionConfig) -> float:
    """Scale a length in meters to pixels, e.g. for stroke widths."""
    return meters * config.pixels_per_meter


def pixels_to_meters(pixels: float, config: ProjectionConfig) -> float:
    """Scale a length in pixels to meters."""
    return pixels / config.pixels_per_meter


class ScreenProjector:
    """Exact, invertible ENU to screen mapping for a ProjectionConfig."""

    @staticmethod
    def to_screen(point: LocalPoint, config: ProjectionConfig) -> ScreenPoint:
        """Project a local point onto the screen (up component is dropped)."""
        return ScreenPoint(
            x=config.screen_origin.x + point.east_meters * config.pixels_per_meter,
            y=config.screen_origin.y + point.north_meters * config.pixels_per_meter * config.vertical_axis_sign,
        )

    @staticmethod
    def to_local(point: ScreenPoint, config: ProjectionConfig) -> LocalPoint:
        """Invert the projection; the returned up component is always zero."""
        return LocalPoint(
            east_meters=(point.x - config.screen_origin.x) / config.pixels_per_meter,
            north_meters=(point.y - config.screen_origin.y) / (config.pixels_per_meter * config.vertical_axis_sign),
            up_meters=0.0,
        )
