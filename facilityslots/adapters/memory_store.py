"""
In-memory repository backed by a JSON data file.

Implements the facility, booking and class session repository protocols
so the engine can run without a database (CLI, demos and tests).
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pendulum
from pendulum import DateTime

from ..domain.exceptions import PersistenceError
from ..domain.models import (
    Booking,
    BookingType,
    BusinessHours,
    ClassSession,
    Facility,
    Location,
    Organization,
    TimeRange,
)
from ..domain.overlap import find_conflicting_bookings


logger = logging.getLogger(__name__)

SAMPLE_DATA_FILE = Path(__file__).parent / "sample_data.json"


class InMemoryStore:
    """
    Repository holding facilities, bookings and class sessions in memory.

    Data file layout (camelCase keys)::

        {
            "organizations": [{"id", "name", "businessHours"}],
            "locations": [{"id", "name", "organizationId", "businessHours"}],
            "facilities": [{"id", "name", "locationId", "businessHours"}],
            "bookings": [{"id", "facilityId", "startTime", "endTime",
                          "type", "customerName", "classSessionId"}],
            "classSessions": [{"id", "classId", "startTime", "endTime",
                               "participants", "maxParticipants"}]
        }
    """

    def __init__(
        self,
        facilities: Iterable[Facility] = (),
        bookings: Iterable[Booking] = (),
        class_sessions: Iterable[ClassSession] = (),
    ):
        self._facilities: Dict[str, Facility] = {f.id: f for f in facilities}
        self._bookings: List[Booking] = list(bookings)
        self._class_sessions: List[ClassSession] = list(class_sessions)

    @classmethod
    def from_json_file(cls, data_file: Path, timezone: str = "UTC") -> "InMemoryStore":
        """
        Load the store from a JSON data file.

        Raises:
            PersistenceError: If the file is missing or malformed
        """
        try:
            with open(data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Could not load data file {data_file}: {exc}") from exc

        logger.debug("Loaded data file %s", data_file)
        return cls.from_dict(data, timezone=timezone)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], timezone: str = "UTC") -> "InMemoryStore":
        """
        Build the store from already decoded data.

        Naive timestamps are interpreted in ``timezone``.

        Raises:
            PersistenceError: If a record is incomplete or invalid
        """
        try:
            organizations = {
                item["id"]: Organization(
                    id=item["id"],
                    name=item.get("name", ""),
                    business_hours=_parse_hours(item.get("businessHours")),
                )
                for item in data.get("organizations", [])
            }
            locations = {
                item["id"]: Location(
                    id=item["id"],
                    name=item.get("name", ""),
                    organization=organizations.get(item.get("organizationId")),
                    business_hours=_parse_hours(item.get("businessHours")),
                )
                for item in data.get("locations", [])
            }
            facilities = [
                Facility(
                    id=item["id"],
                    name=item.get("name", ""),
                    location=locations.get(item.get("locationId")),
                    business_hours=_parse_hours(item.get("businessHours")),
                )
                for item in data.get("facilities", [])
            ]
            bookings = [
                Booking(
                    id=item.get("id", ""),
                    facility_id=item["facilityId"],
                    start_time=_parse_timestamp(item["startTime"], timezone),
                    end_time=_parse_timestamp(item["endTime"], timezone),
                    booking_type=BookingType(item.get("type", BookingType.NORMAL.value)),
                    customer_name=item.get("customerName", ""),
                    class_session_id=item.get("classSessionId"),
                )
                for item in data.get("bookings", [])
            ]
            class_sessions = [
                ClassSession(
                    id=item["id"],
                    class_id=item["classId"],
                    start_time=_parse_timestamp(item["startTime"], timezone),
                    end_time=_parse_timestamp(item["endTime"], timezone),
                    participants=int(item.get("participants", 0)),
                    max_participants=item.get("maxParticipants"),
                )
                for item in data.get("classSessions", [])
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Invalid record in data: {exc}") from exc

        return cls(facilities=facilities, bookings=bookings, class_sessions=class_sessions)

    async def get_facility(self, facility_id: str) -> Optional[Facility]:
        return self._facilities.get(facility_id)

    async def get_bookings(
        self,
        facility_id: str,
        range_start: DateTime,
        range_end: DateTime,
    ) -> List[Booking]:
        """
        Bookings of the facility that lie entirely inside the range.

        A booking crossing a range boundary is not returned.
        """
        return [
            booking for booking in self._bookings
            if booking.facility_id == facility_id
            and booking.start_time >= range_start
            and booking.end_time <= range_end
        ]

    async def find_conflicting_bookings(
        self,
        facility_id: str,
        sessions: Sequence[TimeRange],
    ) -> List[Booking]:
        candidates = [b for b in self._bookings if b.facility_id == facility_id]
        return find_conflicting_bookings(candidates, sessions)

    async def get_class_sessions(
        self,
        class_id: str,
        range_start: DateTime,
        range_end: DateTime,
    ) -> List[ClassSession]:
        return sorted(
            (
                session for session in self._class_sessions
                if session.class_id == class_id
                and range_start <= session.start_time <= range_end
            ),
            key=lambda session: session.start_time,
        )


def _parse_hours(data: Optional[Mapping[str, Any]]) -> Optional[BusinessHours]:
    if data is None:
        return None
    return BusinessHours.from_mapping(data)


def _parse_timestamp(value: str, timezone: str) -> DateTime:
    parsed = pendulum.parse(value, tz=timezone)
    if not isinstance(parsed, DateTime):
        raise ValueError(f"Expected a timestamp, got '{value}'")
    return parsed
