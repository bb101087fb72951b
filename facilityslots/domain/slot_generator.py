"""
Core slot generation for a single day.

This is the heart of the engine - pure domain logic without any external
dependencies (no repositories, no I/O). The only impure input is the clock,
which can be injected.
"""

from datetime import date, datetime
from typing import Callable, List, Optional, Sequence

import pendulum
from pendulum import DateTime

from .dates import start_of_day, to_datetime
from .models import Booking, DayHours, TimeSlot
from .overlap import overlaps


DEFAULT_SLOT_INTERVAL_MINUTES = 30
# Intervals that divide an hour, so grid boundaries stay clock-aligned.
ALLOWED_SLOT_INTERVALS = (15, 30, 60)


class SlotGenerator:
    """
    Enumerates candidate slots on a fixed grid and tags their availability.

    Algorithm:
    1. Grid starts at opening time and the last start is closing time minus
       the duration, so every slot ends by closing time
    2. For today, past starts are skipped by rounding "now" up to the grid
    3. Starts step by the grid interval, independent of the duration
    4. Each candidate is marked unavailable if it overlaps a booking
    """

    def __init__(
        self,
        interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES,
        timezone: str = "UTC",
        clock: Optional[Callable[[], DateTime]] = None,
    ):
        if interval_minutes not in ALLOWED_SLOT_INTERVALS:
            raise ValueError(
                f"interval_minutes must be one of {ALLOWED_SLOT_INTERVALS}, got {interval_minutes}"
            )
        self.interval_minutes = interval_minutes
        self.timezone = timezone
        self._clock = clock or (lambda: pendulum.now(self.timezone))

    def generate(
        self,
        day: date,
        day_hours: Optional[DayHours],
        duration_minutes: int,
        bookings: Sequence[Booking],
        now: Optional[datetime] = None,
    ) -> List[TimeSlot]:
        """
        Generate all slots of one day with their availability flag.

        Args:
            day: The calendar day (time of day is ignored)
            day_hours: Opening window for that day, None when closed
            duration_minutes: Length of each slot
            bookings: Existing bookings of the facility on that day
            now: Current time, defaults to the injected clock

        Returns:
            Slots in start order, available and unavailable alike
        """
        if day_hours is None:
            return []

        midnight = start_of_day(day, self.timezone)
        grid_start = midnight.set(hour=day_hours.open.hour, minute=day_hours.open.minute)
        last_start = midnight.set(
            hour=day_hours.close.hour,
            minute=day_hours.close.minute,
        ).subtract(minutes=duration_minutes)

        if last_start < grid_start:
            return []

        current_time = to_datetime(now if now is not None else self._clock(), self.timezone)
        if current_time.date() == midnight.date() and current_time > grid_start:
            grid_start = self._round_up_to_grid(current_time)

        slots: List[TimeSlot] = []
        current = grid_start

        while current <= last_start:
            slot_end = current.add(minutes=duration_minutes)
            slots.append(
                TimeSlot(
                    start_time=current.format("HH:mm"),
                    end_time=slot_end.format("HH:mm"),
                    is_available=not overlaps(current, slot_end, bookings),
                )
            )
            current = current.add(minutes=self.interval_minutes)

        return slots

    def _round_up_to_grid(self, moment: DateTime) -> DateTime:
        """
        Round up to the next grid boundary at or after moment.

        Boundaries are clock-aligned (:00 and :30 for a 30-minute grid);
        the hour rolls over when rounding past the last boundary.
        """
        floored = moment.set(
            minute=moment.minute - moment.minute % self.interval_minutes,
            second=0,
            microsecond=0,
        )
        if floored < moment:
            floored = floored.add(minutes=self.interval_minutes)
        return floored
