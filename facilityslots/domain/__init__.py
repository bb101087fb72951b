"""
Domain layer - Pure business logic without external dependencies.
"""

from .business_hours import (
    DEFAULT_BUSINESS_HOURS,
    BusinessHoursResolver,
    HoursResolution,
    ResolutionKind,
    merge_business_hours,
)
from .models import (
    Booking,
    BookingType,
    BusinessHours,
    ClassSession,
    ConflictReport,
    DayHours,
    Facility,
    Location,
    Organization,
    TimeRange,
    TimeSlot,
)
from .overlap import overlaps
from .slot_generator import SlotGenerator

__all__ = [
    "DEFAULT_BUSINESS_HOURS",
    "Booking",
    "BookingType",
    "BusinessHours",
    "BusinessHoursResolver",
    "ClassSession",
    "ConflictReport",
    "DayHours",
    "Facility",
    "HoursResolution",
    "Location",
    "Organization",
    "ResolutionKind",
    "SlotGenerator",
    "TimeRange",
    "TimeSlot",
    "merge_business_hours",
    "overlaps",
]
