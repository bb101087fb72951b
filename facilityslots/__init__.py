"""
facilityslots - availability and timeslot engine for facility bookings.
"""

__version__ = "0.1.0"
