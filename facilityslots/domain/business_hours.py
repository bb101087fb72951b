"""
Business hours resolution.

The effective weekly hours of a facility come from an override chain:
facility, then location, then organization, then the built-in defaults.
The first tier that defines a table wins as a whole.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .exceptions import FacilityNotFoundError
from .models import WEEKDAYS, BusinessHours, DayHours, Facility

if TYPE_CHECKING:
    from ..services.availability import FacilityRepositoryProtocol


logger = logging.getLogger(__name__)


DEFAULT_BUSINESS_HOURS = BusinessHours.from_mapping(
    {
        "monday": {"open": "09:00", "close": "17:00"},
        "tuesday": {"open": "09:00", "close": "17:00"},
        "wednesday": {"open": "09:00", "close": "17:00"},
        "thursday": {"open": "09:00", "close": "17:00"},
        "friday": {"open": "09:00", "close": "17:00"},
        "saturday": {"open": "10:00", "close": "15:00"},
        "sunday": None,
    }
)


class ResolutionKind(str, Enum):
    RESOLVED = "resolved"
    DEFAULTED_MISSING_FACILITY = "defaulted_missing_facility"


@dataclass(frozen=True)
class HoursResolution:
    """
    Result of resolving the hours of one facility on one day.

    ``hours`` is None when the facility is closed that day. ``kind`` tells
    callers whether the facility was found or the defaults were used because
    it does not exist.
    """
    kind: ResolutionKind
    weekday: str
    hours: Optional[DayHours]

    @property
    def is_defaulted(self) -> bool:
        return self.kind is ResolutionKind.DEFAULTED_MISSING_FACILITY


def merge_business_hours(
    *tiers: Optional[BusinessHours],
    default: BusinessHours = DEFAULT_BUSINESS_HOURS,
) -> BusinessHours:
    """Return the first configured tier, most specific first, or the default."""
    for hours in tiers:
        if hours is not None:
            return hours
    return default


def effective_business_hours(
    facility: Facility,
    default: BusinessHours = DEFAULT_BUSINESS_HOURS,
) -> BusinessHours:
    """Collapse the facility -> location -> organization chain to one table."""
    location = facility.location
    organization = location.organization if location else None

    return merge_business_hours(
        facility.business_hours,
        location.business_hours if location else None,
        organization.business_hours if organization else None,
        default=default,
    )


class BusinessHoursResolver:
    """
    Resolves the opening window of a facility for a given date.

    A missing facility does not fail resolution: the condition is logged and
    the default table is used, tagged as ``DEFAULTED_MISSING_FACILITY``. With
    ``strict=True`` a missing facility raises ``FacilityNotFoundError``.
    Repository errors always propagate.
    """

    def __init__(
        self,
        facility_repository: FacilityRepositoryProtocol,
        default_hours: BusinessHours = DEFAULT_BUSINESS_HOURS,
        strict: bool = False,
    ) -> None:
        self._facility_repository = facility_repository
        self._default_hours = default_hours
        self._strict = strict

    async def resolve(self, facility_id: str, day: date) -> HoursResolution:
        weekday = WEEKDAYS[day.weekday()]
        facility = await self._facility_repository.get_facility(facility_id)

        if facility is None:
            if self._strict:
                raise FacilityNotFoundError(f"Facility with ID {facility_id} does not exist")
            logger.warning(
                "Facility %s does not exist, using default business hours for %s",
                facility_id,
                weekday,
            )
            return HoursResolution(
                kind=ResolutionKind.DEFAULTED_MISSING_FACILITY,
                weekday=weekday,
                hours=self._default_hours.for_date(day),
            )

        hours = effective_business_hours(facility, default=self._default_hours)
        return HoursResolution(
            kind=ResolutionKind.RESOLVED,
            weekday=weekday,
            hours=hours.for_date(day),
        )
