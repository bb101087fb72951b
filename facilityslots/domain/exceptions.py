"""
Domain-specific exception hierarchy for the facility slots engine.
"""


class FacilitySlotsError(Exception):
    """Base class for all application-level errors."""


class InvalidArgumentError(FacilitySlotsError, ValueError):
    """Raised when a caller passes a missing or out-of-range argument."""


class FacilityNotFoundError(FacilitySlotsError):
    """Raised when a facility lookup fails and strict lookup is enabled."""


class PersistenceError(FacilitySlotsError):
    """Raised when stored facility or booking data cannot be loaded or parsed."""
