"""
Multi-day slot aggregation.
"""

import asyncio
from typing import Awaitable, Callable, Dict, List

from pendulum import DateTime

from ..domain.models import TimeSlot


DaySlotsFunction = Callable[[str, DateTime, int], Awaitable[List[TimeSlot]]]


class RangeAggregator:
    """
    Runs the single-day pipeline over consecutive days.

    Days are independent and no slot crosses midnight, so results are simply
    collected per day, keyed by "YYYY-MM-DD" in ascending order.
    """

    def __init__(self, day_slots: DaySlotsFunction) -> None:
        self._day_slots = day_slots

    async def generate_range(
        self,
        facility_id: str,
        start_date: DateTime,
        days: int = 7,
        duration_minutes: int = 60,
        concurrent: bool = False,
    ) -> Dict[str, List[TimeSlot]]:
        """
        Compute slots for ``days`` days starting at ``start_date`` (inclusive).

        With ``concurrent=True`` the days are fetched with ``asyncio.gather``;
        the output is the same as in the sequential mode.
        """
        dates = [start_date.add(days=offset) for offset in range(days)]

        if concurrent:
            per_day = await asyncio.gather(
                *(self._day_slots(facility_id, day, duration_minutes) for day in dates)
            )
        else:
            per_day = []
            for day in dates:
                per_day.append(await self._day_slots(facility_id, day, duration_minutes))

        return {day.to_date_string(): slots for day, slots in zip(dates, per_day)}
