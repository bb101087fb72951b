"""
Service layer helpers that orchestrate repositories and domain logic.
"""

from .availability import (
    AvailabilityService,
    BookingRepositoryProtocol,
    ClassSessionRepositoryProtocol,
    FacilityRepositoryProtocol,
)
from .range_aggregator import RangeAggregator

__all__ = [
    "AvailabilityService",
    "BookingRepositoryProtocol",
    "ClassSessionRepositoryProtocol",
    "FacilityRepositoryProtocol",
    "RangeAggregator",
]
