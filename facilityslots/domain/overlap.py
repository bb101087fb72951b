"""
Overlap checks between a candidate interval and existing bookings.

Intervals are half-open, [start, end). A candidate that ends exactly when a
booking starts (or starts exactly when one ends) does not overlap it.
"""

from typing import Iterable, List, Sequence

from pendulum import DateTime

from .models import Booking, TimeRange


def overlaps(
    candidate_start: DateTime,
    candidate_end: DateTime,
    bookings: Iterable[Booking],
) -> bool:
    """
    Check whether [candidate_start, candidate_end) intersects any booking.

    The caller guarantees candidate_start < candidate_end.
    """
    return any(
        candidate_start < booking.end_time and booking.start_time < candidate_end
        for booking in bookings
    )


def find_conflicting_bookings(
    bookings: Iterable[Booking],
    sessions: Sequence[TimeRange],
) -> List[Booking]:
    """Return the bookings that overlap at least one of the given sessions."""
    return [
        booking for booking in bookings
        if any(overlaps(session.start, session.end, [booking]) for session in sessions)
    ]
