"""
Domain models for business hours, bookings and time slots.
"""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from pendulum import DateTime


WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

DEFAULT_MAX_PARTICIPANTS = 999


def parse_clock_time(value: str) -> time:
    """
    Parse a wall-clock time in "HH:MM" format.

    Raises:
        ValueError: If the value is not a valid "HH:MM" string
    """
    parts = value.strip().split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Time must be in HH:MM format, got '{value}'")

    return time(hour=int(parts[0]), minute=int(parts[1]))


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range [start, end).

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another. Touching ranges do not overlap."""
        return self.start < other.end and self.end > other.start

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class DayHours:
    """
    Opening window for a single weekday, minute precision.

    Invariant: open must be before close on the same day.
    """
    open: time
    close: time

    def __post_init__(self):
        for value in (self.open, self.close):
            if value.second or value.microsecond:
                raise ValueError(f"Business hours use minute precision, got {value}")
        if self.open >= self.close:
            raise ValueError(
                f"Opening time {self.open:%H:%M} must be before closing time {self.close:%H:%M}"
            )

    @classmethod
    def parse(cls, open_time: str, close_time: str) -> "DayHours":
        """Build from "HH:MM" strings."""
        return cls(open=parse_clock_time(open_time), close=parse_clock_time(close_time))

    def to_dict(self) -> Dict[str, str]:
        return {"open": f"{self.open:%H:%M}", "close": f"{self.close:%H:%M}"}

    def __str__(self) -> str:
        return f"{self.open:%H:%M}-{self.close:%H:%M}"


@dataclass(frozen=True)
class BusinessHours:
    """
    Weekly business hours table.

    Maps every weekday name to its ``DayHours`` or ``None`` when closed.
    Weekdays missing from the input mapping are treated as closed. The
    stored mapping is read-only.
    """
    days: Mapping[str, Optional[DayHours]]

    def __post_init__(self):
        unknown = sorted(set(self.days) - set(WEEKDAYS))
        if unknown:
            raise ValueError(f"Unknown weekday name(s): {', '.join(unknown)}")
        frozen = MappingProxyType({day: self.days.get(day) for day in WEEKDAYS})
        object.__setattr__(self, "days", frozen)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BusinessHours":
        """
        Build from a plain mapping such as
        ``{"monday": {"open": "09:00", "close": "17:00"}, "sunday": None}``.
        """
        days: Dict[str, Optional[DayHours]] = {}
        for day, hours in data.items():
            key = day.lower()
            if hours is None:
                days[key] = None
            elif isinstance(hours, DayHours):
                days[key] = hours
            else:
                days[key] = DayHours.parse(hours["open"], hours["close"])
        return cls(days=days)

    def for_weekday(self, weekday: int) -> Optional[DayHours]:
        """Hours for a weekday index (0=Monday, 6=Sunday)."""
        return self.days[WEEKDAYS[weekday]]

    def for_date(self, value: date) -> Optional[DayHours]:
        """Hours for the weekday of a calendar date; the time of day is ignored."""
        return self.for_weekday(value.weekday())


@dataclass(frozen=True)
class Organization:
    id: str
    name: str = ""
    business_hours: Optional[BusinessHours] = None


@dataclass(frozen=True)
class Location:
    id: str
    name: str = ""
    organization: Optional[Organization] = None
    business_hours: Optional[BusinessHours] = None


@dataclass(frozen=True)
class Facility:
    """A bookable resource (court, room) belonging to a location."""
    id: str
    name: str = ""
    location: Optional[Location] = None
    business_hours: Optional[BusinessHours] = None


class BookingType(str, Enum):
    NORMAL = "NORMAL"
    CLASSES = "CLASSES"


@dataclass(frozen=True)
class Booking:
    """
    An existing reservation of a facility.

    Read-only snapshot; bookings are created and changed elsewhere.
    """
    facility_id: str
    start_time: DateTime
    end_time: DateTime
    id: str = ""
    booking_type: BookingType = BookingType.NORMAL
    customer_name: str = ""
    class_session_id: Optional[str] = None

    def __post_init__(self):
        if self.start_time >= self.end_time:
            raise ValueError(
                f"Booking start {self.start_time} must be before end {self.end_time}"
            )

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start_time, end=self.end_time)


@dataclass(frozen=True)
class ClassSession:
    """A scheduled session of a class with limited capacity."""
    id: str
    class_id: str
    start_time: DateTime
    end_time: DateTime
    participants: int = 0
    max_participants: Optional[int] = None

    @property
    def capacity(self) -> int:
        # unset or zero capacity falls back to the default
        return self.max_participants or DEFAULT_MAX_PARTICIPANTS

    def has_capacity(self) -> bool:
        return self.participants < self.capacity


@dataclass(frozen=True)
class TimeSlot:
    """
    A candidate booking window on the availability grid.

    Start and end are local wall-clock strings in "HH:MM" format.
    """
    start_time: str
    end_time: str
    is_available: bool
    class_session_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the JSON field names of the booking API."""
        data: Dict[str, Any] = {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "isAvailable": self.is_available,
        }
        if self.class_session_id is not None:
            data["classSessionId"] = self.class_session_id
        return data


@dataclass
class ConflictReport:
    """
    Existing bookings that collide with a set of proposed sessions.

    Regular bookings and class bookings are reported separately.
    """
    conflicts: List[Booking] = field(default_factory=list)
    class_conflicts: List[Booking] = field(default_factory=list)

    @property
    def conflict_status(self) -> bool:
        return bool(self.conflicts)

    @property
    def class_conflicts_status(self) -> bool:
        return bool(self.class_conflicts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "conflictStatus": self.conflict_status,
            "classConflictsStatus": self.class_conflicts_status,
            "conflicts": [
                {
                    "id": booking.id,
                    "facilityId": booking.facility_id,
                    "startTime": booking.start_time.to_iso8601_string(),
                    "endTime": booking.end_time.to_iso8601_string(),
                    "customerName": booking.customer_name,
                }
                for booking in self.conflicts
            ],
            "classConflicts": [
                {
                    "id": booking.id,
                    "facilityId": booking.facility_id,
                    "startTime": booking.start_time.to_iso8601_string(),
                    "endTime": booking.end_time.to_iso8601_string(),
                    "classSessionId": booking.class_session_id,
                }
                for booking in self.class_conflicts
            ],
        }
