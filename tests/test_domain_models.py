"""
Tests for domain models.
"""

import pendulum
import pytest
from datetime import date, time

from facilityslots.domain.models import (
    Booking,
    BusinessHours,
    ClassSession,
    ConflictReport,
    DayHours,
    TimeRange,
    TimeSlot,
    parse_clock_time,
)


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin")
        end = pendulum.parse("2024-11-25 17:00", tz="Europe/Berlin")

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end

    def test_invalid_time_range_raises_error(self):
        """Test that creating an invalid time range raises ValueError."""
        start = pendulum.parse("2024-11-25 17:00", tz="Europe/Berlin")
        end = pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin")

        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=start, end=end)

    def test_overlaps(self):
        """Test overlap detection, touching ranges do not overlap."""
        tr1 = TimeRange(
            start=pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin"),
            end=pendulum.parse("2024-11-25 12:00", tz="Europe/Berlin")
        )
        tr2 = TimeRange(
            start=pendulum.parse("2024-11-25 11:00", tz="Europe/Berlin"),
            end=pendulum.parse("2024-11-25 14:00", tz="Europe/Berlin")
        )
        tr3 = TimeRange(
            start=pendulum.parse("2024-11-25 14:00", tz="Europe/Berlin"),
            end=pendulum.parse("2024-11-25 17:00", tz="Europe/Berlin")
        )

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr1.overlaps(tr3)
        assert not tr2.overlaps(tr3)


class TestDayHours:
    """Tests for DayHours model."""

    def test_parse(self):
        hours = DayHours.parse("09:00", "17:30")

        assert hours.open == time(9, 0)
        assert hours.close == time(17, 30)
        assert str(hours) == "09:00-17:30"
        assert hours.to_dict() == {"open": "09:00", "close": "17:30"}

    def test_open_must_be_before_close(self):
        """No overnight wraparound is supported."""
        with pytest.raises(ValueError, match="must be before closing time"):
            DayHours.parse("22:00", "02:00")

        with pytest.raises(ValueError):
            DayHours.parse("09:00", "09:00")

    def test_minute_precision(self):
        with pytest.raises(ValueError, match="minute precision"):
            DayHours(open=time(9, 0, 30), close=time(17, 0))

    @pytest.mark.parametrize("value", ["9", "09-00", "ab:cd", "25:00", "09:60"])
    def test_invalid_clock_time(self, value):
        with pytest.raises(ValueError):
            parse_clock_time(value)


class TestBusinessHours:
    """Tests for the weekly BusinessHours table."""

    def test_missing_weekdays_are_closed(self):
        hours = BusinessHours.from_mapping({"monday": {"open": "08:00", "close": "12:00"}})

        assert hours.for_weekday(0) == DayHours.parse("08:00", "12:00")
        assert hours.for_weekday(1) is None
        assert hours.for_weekday(6) is None

    def test_for_date_uses_weekday(self):
        hours = BusinessHours.from_mapping(
            {
                "monday": {"open": "08:00", "close": "12:00"},
                "sunday": {"open": "10:00", "close": "14:00"},
            }
        )

        assert hours.for_date(date(2024, 11, 25)) == DayHours.parse("08:00", "12:00")  # Monday
        assert hours.for_date(pendulum.datetime(2024, 11, 24, 23, 59)) == DayHours.parse("10:00", "14:00")

    def test_unknown_weekday_rejected(self):
        with pytest.raises(ValueError, match="Unknown weekday"):
            BusinessHours.from_mapping({"funday": None})

    def test_table_is_read_only(self):
        hours = BusinessHours.from_mapping({"monday": None})

        with pytest.raises(TypeError):
            hours.days["monday"] = DayHours.parse("09:00", "10:00")


class TestBooking:
    """Tests for Booking model."""

    def test_start_must_be_before_end(self):
        with pytest.raises(ValueError):
            Booking(
                facility_id="court-1",
                start_time=pendulum.datetime(2024, 11, 25, 11, 0),
                end_time=pendulum.datetime(2024, 11, 25, 10, 0),
            )

    def test_time_range(self):
        booking = Booking(
            facility_id="court-1",
            start_time=pendulum.datetime(2024, 11, 25, 10, 0),
            end_time=pendulum.datetime(2024, 11, 25, 11, 30),
        )

        assert booking.time_range == TimeRange(start=booking.start_time, end=booking.end_time)


class TestClassSession:
    """Tests for ClassSession capacity."""

    def test_default_capacity(self):
        session = ClassSession(
            id="s1",
            class_id="yoga",
            start_time=pendulum.datetime(2024, 11, 25, 18, 0),
            end_time=pendulum.datetime(2024, 11, 25, 19, 0),
            participants=40,
        )

        assert session.capacity == 999
        assert session.has_capacity()

    def test_full_session(self):
        session = ClassSession(
            id="s1",
            class_id="yoga",
            start_time=pendulum.datetime(2024, 11, 25, 18, 0),
            end_time=pendulum.datetime(2024, 11, 25, 19, 0),
            participants=12,
            max_participants=12,
        )

        assert not session.has_capacity()


class TestSerialization:
    """JSON shapes exposed to API callers."""

    def test_time_slot_to_dict(self):
        slot = TimeSlot(start_time="09:00", end_time="10:00", is_available=True)

        assert slot.to_dict() == {"startTime": "09:00", "endTime": "10:00", "isAvailable": True}

    def test_class_slot_to_dict(self):
        slot = TimeSlot(start_time="18:00", end_time="19:00", is_available=False, class_session_id="s1")

        assert slot.to_dict()["classSessionId"] == "s1"

    def test_empty_conflict_report(self):
        report = ConflictReport()

        assert report.to_dict() == {
            "conflictStatus": False,
            "classConflictsStatus": False,
            "conflicts": [],
            "classConflicts": [],
        }
