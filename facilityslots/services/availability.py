"""
Availability service that orchestrates repositories and domain logic.

The service validates input, fetches business hours and bookings through
repository protocols and delegates the slot calculation to the domain-level
``SlotGenerator``. Repositories are plain protocols so the in-memory adapter
or a database-backed implementation can be plugged in, and tests can pass
small stubs.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Protocol, Sequence

from pendulum import DateTime

from ..config import AppConfig
from ..domain.business_hours import (
    DEFAULT_BUSINESS_HOURS,
    BusinessHoursResolver,
    HoursResolution,
)
from ..domain.dates import end_of_day, start_of_day
from ..domain.exceptions import InvalidArgumentError
from ..domain.models import (
    Booking,
    BookingType,
    BusinessHours,
    ClassSession,
    ConflictReport,
    Facility,
    TimeRange,
    TimeSlot,
)
from ..domain.slot_generator import SlotGenerator
from .range_aggregator import RangeAggregator


logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60
DEFAULT_RANGE_DAYS = 7
MAX_RANGE_DAYS = 30


class FacilityRepositoryProtocol(Protocol):
    """Facility lookup needed by the business hours resolver."""

    async def get_facility(self, facility_id: str) -> Optional[Facility]:
        """Return the facility with its location and organization, or None."""


class BookingRepositoryProtocol(Protocol):
    """Booking queries needed by the service."""

    async def get_bookings(
        self,
        facility_id: str,
        range_start: DateTime,
        range_end: DateTime,
    ) -> List[Booking]:
        """Return bookings of the facility that start and end within the range."""

    async def find_conflicting_bookings(
        self,
        facility_id: str,
        sessions: Sequence[TimeRange],
    ) -> List[Booking]:
        """Return bookings of the facility overlapping any of the sessions."""


class ClassSessionRepositoryProtocol(Protocol):
    """Class session queries used for class time slots."""

    async def get_class_sessions(
        self,
        class_id: str,
        range_start: DateTime,
        range_end: DateTime,
    ) -> List[ClassSession]:
        """Return sessions of the class starting within the range."""


class AvailabilityService:
    """
    Public entry point of the availability engine.

    Every call performs fresh reads and keeps no state between calls. Errors
    from validation or from the repositories propagate unchanged; there are
    no retries and no partial results.
    """

    def __init__(
        self,
        facility_repository: FacilityRepositoryProtocol,
        booking_repository: BookingRepositoryProtocol,
        class_session_repository: Optional[ClassSessionRepositoryProtocol] = None,
        *,
        slot_generator: Optional[SlotGenerator] = None,
        default_hours: BusinessHours = DEFAULT_BUSINESS_HOURS,
        strict_facility_lookup: bool = False,
        timezone: str = "UTC",
        default_range_days: int = DEFAULT_RANGE_DAYS,
        max_range_days: int = MAX_RANGE_DAYS,
    ) -> None:
        self._booking_repository = booking_repository
        self._class_session_repository = class_session_repository
        self._slot_generator = slot_generator or SlotGenerator(timezone=timezone)
        self._hours_resolver = BusinessHoursResolver(
            facility_repository,
            default_hours=default_hours,
            strict=strict_facility_lookup,
        )
        self._range_aggregator = RangeAggregator(self.get_available_time_slots)
        self._timezone = self._slot_generator.timezone
        self._max_range_days = max_range_days
        self._default_range_days = default_range_days

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        facility_repository: FacilityRepositoryProtocol,
        booking_repository: BookingRepositoryProtocol,
        class_session_repository: Optional[ClassSessionRepositoryProtocol] = None,
    ) -> "AvailabilityService":
        """Build a service using the timezone, grid and hours from configuration."""
        return cls(
            facility_repository,
            booking_repository,
            class_session_repository,
            slot_generator=SlotGenerator(
                interval_minutes=config.defaults.slot_interval_minutes,
                timezone=config.timezone,
            ),
            default_hours=config.get_default_business_hours(),
            strict_facility_lookup=config.strict_facility_lookup,
            default_range_days=config.defaults.range_days,
            max_range_days=config.defaults.max_range_days,
        )

    async def get_available_time_slots(
        self,
        facility_id: str,
        day: date,
        duration_minutes: int = DEFAULT_DURATION_MINUTES,
    ) -> List[TimeSlot]:
        """
        Get all time slots of a facility on one day, tagged with availability.

        Args:
            facility_id: ID of the facility
            day: Date to compute slots for (time of day is ignored)
            duration_minutes: Length of the requested booking

        Returns:
            All grid slots of the day; unavailable ones have is_available=False

        Raises:
            InvalidArgumentError: If an argument is missing or invalid
        """
        self._validate_facility_id(facility_id)
        self._validate_date(day)
        self._validate_duration(duration_minutes)

        try:
            day_start = start_of_day(day, self._timezone)
            resolution = await self._hours_resolver.resolve(facility_id, day_start)
            bookings = await self._booking_repository.get_bookings(
                facility_id,
                day_start,
                end_of_day(day_start),
            )
        except Exception:
            logger.exception("Error getting available time slots for facility %s", facility_id)
            raise

        slots = self._slot_generator.generate(
            day_start,
            resolution.hours,
            duration_minutes,
            bookings,
        )
        logger.debug(
            "Facility %s on %s: %d slot(s), %d booking(s), hours %s",
            facility_id,
            day_start.to_date_string(),
            len(slots),
            len(bookings),
            resolution.hours or "closed",
        )
        return slots

    async def get_available_time_slots_for_range(
        self,
        facility_id: str,
        start_date: date,
        days: Optional[int] = None,
        duration_minutes: int = DEFAULT_DURATION_MINUTES,
        *,
        concurrent: bool = False,
    ) -> Dict[str, List[TimeSlot]]:
        """
        Get time slots for several consecutive days.

        Without days, the configured default range length is used.

        Returns:
            Mapping of "YYYY-MM-DD" to the slots of that day, in date order
        """
        self._validate_facility_id(facility_id)
        self._validate_date(start_date)
        self._validate_duration(duration_minutes)
        if days is None:
            days = self._default_range_days
        if days <= 0 or days > self._max_range_days:
            raise InvalidArgumentError(
                f"Days must be a positive number between 1 and {self._max_range_days}"
            )

        return await self._range_aggregator.generate_range(
            facility_id,
            start_of_day(start_date, self._timezone),
            days=days,
            duration_minutes=duration_minutes,
            concurrent=concurrent,
        )

    async def resolve_business_hours(self, facility_id: str, day: date) -> HoursResolution:
        """Resolve the opening window of a facility on one day."""
        self._validate_facility_id(facility_id)
        self._validate_date(day)
        return await self._hours_resolver.resolve(facility_id, start_of_day(day, self._timezone))

    async def check_facility_conflicts(
        self,
        facility_id: str,
        sessions: Sequence[TimeRange],
    ) -> ConflictReport:
        """
        Find existing bookings that collide with proposed sessions.

        Regular bookings and class bookings are reported separately so the
        caller can decide whether a class schedule may displace them.
        """
        self._validate_facility_id(facility_id)
        if not sessions:
            return ConflictReport()

        bookings = await self._booking_repository.find_conflicting_bookings(
            facility_id,
            list(sessions),
        )
        report = ConflictReport(
            conflicts=[b for b in bookings if b.booking_type is BookingType.NORMAL],
            class_conflicts=[b for b in bookings if b.booking_type is BookingType.CLASSES],
        )
        if report.conflict_status or report.class_conflicts_status:
            logger.info(
                "Facility %s: %d booking conflict(s), %d class conflict(s)",
                facility_id,
                len(report.conflicts),
                len(report.class_conflicts),
            )
        return report

    async def get_class_time_slots(self, class_id: str, day: date) -> List[TimeSlot]:
        """
        Turn the sessions of a class on one day into time slots.

        A session is available while it has free capacity.
        """
        if not class_id:
            raise InvalidArgumentError("Class ID is required")
        self._validate_date(day)
        if self._class_session_repository is None:
            raise RuntimeError("No class session repository configured")

        day_start = start_of_day(day, self._timezone)
        sessions = await self._class_session_repository.get_class_sessions(
            class_id,
            day_start,
            end_of_day(day_start),
        )

        return [
            TimeSlot(
                start_time=session.start_time.in_timezone(self._timezone).format("HH:mm"),
                end_time=session.end_time.in_timezone(self._timezone).format("HH:mm"),
                is_available=session.has_capacity(),
                class_session_id=session.id,
            )
            for session in sorted(sessions, key=lambda s: s.start_time)
        ]

    @staticmethod
    def _validate_facility_id(facility_id: str) -> None:
        if not facility_id:
            raise InvalidArgumentError("Facility ID is required")

    @staticmethod
    def _validate_date(day: Optional[date]) -> None:
        if day is None:
            raise InvalidArgumentError("Date is required")

    @staticmethod
    def _validate_duration(duration_minutes: int) -> None:
        if duration_minutes <= 0:
            raise InvalidArgumentError("Duration must be positive")
