"""Track lifecycle status derivation.

Status is recomputed from the current signals every tick; transition
history is not consulted.
"""

from __future__ import annotations

import dataclasses
from operator import attrgetter
from typing import TYPE_CHECKING, Final

from atc_sim_core.data_classes import TrackStatusSignals
from atc_sim_core.types import TrackStatus

if TYPE_CHECKING:
    from collections.abc import Callable

    from atc_sim_core.domain_model import Track


# Highest priority first; the first signal that holds decides the status.
TRACK_STATUS_PRIORITY_TABLE: Final[tuple[tuple[Callable[[TrackStatusSignals], bool], TrackStatus], ...]] = (
    (attrgetter("is_intruder"), TrackStatus.INTRUDER),
    (attrgetter("is_accepted"), TrackStatus.ACCEPTED),
    (attrgetter("has_inbound_offer"), TrackStatus.INBOUND_OFFER),
    (attrgetter("has_outbound_offer"), TrackStatus.OUTBOUND_OFFER),
    (attrgetter("is_inbound"), TrackStatus.INBOUND),
    (attrgetter("is_pre_inbound"), TrackStatus.PRE_INBOUND),
)

FALLBACK_TRACK_STATUS: Final[TrackStatus] = TrackStatus.UNCONCERNED


class TrackStatusMachine:
    """Maps a set of prioritized boolean signals to a track status."""

    @staticmethod
    def next_status(current: TrackStatus, signals: TrackStatusSignals) -> TrackStatus:
        """Compute the next status of a track.

        Every status is reachable from every other status in a single call;
        ``current`` is accepted for interface stability but does not gate
        any transition.

        Args:
            current: Status of the track before this tick.
            signals: Signals derived for the track this tick.

        Returns:
            Status of the highest-priority signal that holds, or UNCONCERNED.
        """
        del current
        for signal_is_set, status in TRACK_STATUS_PRIORITY_TABLE:
            if signal_is_set(signals):
                return status
        return FALLBACK_TRACK_STATUS


def apply_track_status(track: Track, signals: TrackStatusSignals) -> Track:
    """Return a copy of ``track`` whose status is recomputed from ``signals``."""
    next_status = TrackStatusMachine.next_status(track.status, signals)
    if next_status is track.status:
        return track
    return dataclasses.replace(track, status=next_status)
