"""Domain layer tests: policies, value objects, entities, enums, clock"""
import pytest
from datetime import date, timedelta
from decimal import Decimal
from pydantic import ValidationError as PydanticValidationError

from domain.clock import FixedClock, SystemClock
from domain.entities import Room, Guest, Employee, CleaningSchedule, Invoice
from domain.enums import RoomCategory, DayOfWeek, UserRole
from domain.exceptions import (
    CapacityExceeded, DuplicateInvoice, NotFound, ValidationError, Conflict
)
from domain.policies import capacity_for, can_admit, MAX_OCCUPANTS
from domain.value_objects import StayPeriod, ReportingPeriod, charge_for_stay, days_between


# ============================================================================
# OCCUPANCY POLICY
# ============================================================================

class TestOccupancyPolicy:
    """Room category -> capacity rules"""

    @pytest.mark.unit
    @pytest.mark.domain
    def test_capacity_per_category(self):
        assert capacity_for(RoomCategory.SINGLE) == 1
        assert capacity_for(RoomCategory.DOUBLE) == 2
        assert capacity_for(RoomCategory.TRIPLE) == 3

    @pytest.mark.unit
    @pytest.mark.domain
    def test_capacity_accepts_raw_value(self):
        assert capacity_for("TRIPLE") == 3

    @pytest.mark.unit
    @pytest.mark.domain
    @pytest.mark.edge_case
    def test_unknown_category_has_zero_capacity(self):
        assert capacity_for("PENTHOUSE") == 0
        assert can_admit(0, "PENTHOUSE") is False

    @pytest.mark.unit
    @pytest.mark.domain
    def test_can_admit_below_capacity(self):
        assert can_admit(0, RoomCategory.DOUBLE) is True
        assert can_admit(1, RoomCategory.DOUBLE) is True

    @pytest.mark.unit
    @pytest.mark.domain
    @pytest.mark.edge_case
    def test_cannot_admit_at_capacity(self):
        for category, capacity in MAX_OCCUPANTS.items():
            assert can_admit(capacity, category) is False


# ============================================================================
# VALUE OBJECTS
# ============================================================================

class TestStayPeriod:

    @pytest.mark.unit
    @pytest.mark.domain
    def test_of_adds_reserved_days(self):
        stay = StayPeriod.of(date(2024, 1, 1), 5)
        assert stay.check_out == date(2024, 1, 6)

    @pytest.mark.unit
    @pytest.mark.domain
    @pytest.mark.edge_case
    def test_check_out_before_check_in_rejected(self):
        with pytest.raises(PydanticValidationError):
            StayPeriod(check_in=date(2024, 1, 10), check_out=date(2024, 1, 1))

    @pytest.mark.unit
    @pytest.mark.domain
    @pytest.mark.edge_case
    def test_overlap_is_boundary_inclusive(self):
        q1 = ReportingPeriod(start=date(2024, 1, 1), end=date(2024, 3, 31))
        touching = StayPeriod(check_in=date(2023, 12, 20), check_out=date(2024, 1, 1))
        before = StayPeriod(check_in=date(2023, 12, 20), check_out=date(2023, 12, 31))

        assert touching.overlaps(q1) is True
        assert before.overlaps(q1) is False

    @pytest.mark.unit
    @pytest.mark.domain
    def test_days_within_clips_to_period(self):
        q1 = ReportingPeriod(start=date(2024, 1, 1), end=date(2024, 3, 31))
        stay = StayPeriod(check_in=date(2023, 12, 30), check_out=date(2024, 1, 4))
        assert stay.days_within(q1) == 4

    @pytest.mark.unit
    @pytest.mark.domain
    def test_days_within_outside_period_is_zero(self):
        q1 = ReportingPeriod(start=date(2024, 1, 1), end=date(2024, 3, 31))
        stay = StayPeriod(check_in=date(2024, 5, 1), check_out=date(2024, 5, 3))
        assert stay.days_within(q1) == 0

    @pytest.mark.unit
    @pytest.mark.domain
    def test_stay_is_immutable(self):
        stay = StayPeriod.of(date(2024, 1, 1), 2)
        with pytest.raises(PydanticValidationError):
            stay.check_in = date(2024, 2, 1)


class TestReportingPeriod:

    @pytest.mark.unit
    @pytest.mark.domain
    @pytest.mark.parametrize("day,start,end", [
        (date(2024, 2, 15), date(2024, 1, 1), date(2024, 3, 31)),
        (date(2024, 4, 1), date(2024, 4, 1), date(2024, 6, 30)),
        (date(2024, 9, 30), date(2024, 7, 1), date(2024, 9, 30)),
        (date(2024, 12, 31), date(2024, 10, 1), date(2024, 12, 31)),
    ])
    def test_quarter_containing(self, day, start, end):
        period = ReportingPeriod.quarter_containing(day)
        assert (period.start, period.end) == (start, end)

    @pytest.mark.unit
    @pytest.mark.domain
    def test_last_completed_quarter(self):
        period = ReportingPeriod.last_completed_quarter(date(2024, 5, 10))
        assert period.start == date(2024, 1, 1)
        assert period.end == date(2024, 3, 31)
        assert period.total_days == 91

    @pytest.mark.unit
    @pytest.mark.domain
    @pytest.mark.edge_case
    def test_last_completed_quarter_wraps_year(self):
        period = ReportingPeriod.last_completed_quarter(date(2024, 1, 1))
        assert period.start == date(2023, 10, 1)
        assert period.end == date(2023, 12, 31)
        assert period.total_days == 92

    @pytest.mark.unit
    @pytest.mark.domain
    def test_contains_is_inclusive(self):
        period = ReportingPeriod(start=date(2024, 1, 1), end=date(2024, 3, 31))
        assert period.contains(date(2024, 1, 1))
        assert period.contains(date(2024, 3, 31))
        assert not period.contains(date(2024, 4, 1))


class TestMoneyAndDates:

    @pytest.mark.unit
    @pytest.mark.domain
    def test_charge_is_exact_decimal(self):
        assert charge_for_stay(Decimal("3500.00"), 10) == Decimal("35000.00")
        assert charge_for_stay(Decimal("0.10"), 3) == Decimal("0.30")

    @pytest.mark.unit
    @pytest.mark.domain
    def test_days_between_is_absolute(self):
        assert days_between(date(2024, 1, 1), date(2024, 1, 31)) == 30
        assert days_between(date(2024, 1, 31), date(2024, 1, 1)) == 30


# ============================================================================
# ENTITIES
# ============================================================================

class TestRoomEntity:

    @pytest.mark.unit
    @pytest.mark.domain
    def test_capacity_follows_category(self, sample_room):
        assert sample_room.capacity == 2

    @pytest.mark.unit
    @pytest.mark.domain
    def test_charge_for(self, sample_room):
        assert sample_room.charge_for(10) == Decimal("35000.00")

    @pytest.mark.unit
    @pytest.mark.domain
    @pytest.mark.edge_case
    def test_charge_for_zero_days_rejected(self, sample_room):
        with pytest.raises(ValidationError):
            sample_room.charge_for(0)

    @pytest.mark.unit
    @pytest.mark.domain
    @pytest.mark.edge_case
    def test_non_positive_price_rejected(self):
        with pytest.raises(PydanticValidationError):
            Room(
                room_number=1, floor=0, category=RoomCategory.SINGLE,
                price_per_day=Decimal("0"), phone_number="1"
            )


class TestGuestEntity:

    @pytest.mark.unit
    @pytest.mark.domain
    def test_create_strips_and_marks_resident(self):
        guest = Guest.create(
            passport_number="  P1 ", full_name=" Bob Stone ", city="Paris",
            check_in_date=date(2024, 1, 1), days_reserved=3, room_id=7
        )
        assert guest.passport_number == "P1"
        assert guest.full_name == "Bob Stone"
        assert guest.is_resident is True
        assert guest.guest_id is None

    @pytest.mark.unit
    @pytest.mark.domain
    @pytest.mark.edge_case
    def test_create_rejects_zero_days(self):
        with pytest.raises(ValidationError):
            Guest.create(
                passport_number="P1", full_name="Bob", city="Paris",
                check_in_date=date(2024, 1, 1), days_reserved=0, room_id=7
            )

    @pytest.mark.unit
    @pytest.mark.domain
    def test_checkout_date(self, sample_guest):
        assert sample_guest.checkout_date == date(2024, 1, 11)

    @pytest.mark.unit
    @pytest.mark.domain
    def test_has_lapsed_only_after_checkout(self, sample_guest):
        assert sample_guest.has_lapsed(date(2024, 1, 11)) is False
        assert sample_guest.has_lapsed(date(2024, 1, 12)) is True

    @pytest.mark.unit
    @pytest.mark.domain
    def test_non_resident_never_lapses(self, sample_guest):
        sample_guest.move_out()
        assert sample_guest.has_lapsed(date(2030, 1, 1)) is False

    @pytest.mark.unit
    @pytest.mark.domain
    def test_is_transfer_to(self, sample_guest):
        assert sample_guest.is_transfer_to(1, True) is False
        assert sample_guest.is_transfer_to(2, True) is True
        assert sample_guest.is_transfer_to(2, False) is False
        sample_guest.move_out()
        assert sample_guest.is_transfer_to(1, True) is True

    @pytest.mark.unit
    @pytest.mark.domain
    def test_apply_changes_keeps_residency_when_omitted(self, sample_guest):
        sample_guest.move_out()
        sample_guest.apply_changes(
            passport_number="AB123456", full_name="Alice M.", city="Nice",
            check_in_date=date(2024, 2, 1), days_reserved=2, room_id=3
        )
        assert sample_guest.is_resident is False
        assert sample_guest.city == "Nice"
        assert sample_guest.room_id == 3


class TestStaffEntities:

    @pytest.mark.unit
    @pytest.mark.domain
    def test_employee_default_login(self):
        assert Employee(full_name="Marie Claire Dupont", floor=2).default_login() == "marieclairedupont"

    @pytest.mark.unit
    @pytest.mark.domain
    def test_schedule_collision(self):
        a = CleaningSchedule(schedule_id=1, employee_id=1, floor=2, day_of_week=DayOfWeek.MONDAY)
        b = CleaningSchedule(schedule_id=2, employee_id=5, floor=2, day_of_week=DayOfWeek.MONDAY)
        c = CleaningSchedule(schedule_id=3, employee_id=1, floor=2, day_of_week=DayOfWeek.TUESDAY)

        assert a.collides_with(b) is True
        assert a.collides_with(c) is False
        assert a.collides_with(a) is False


class TestInvoiceEntity:

    @pytest.mark.unit
    @pytest.mark.domain
    def test_issue_charges_whole_stay(self, sample_guest, sample_room):
        invoice = Invoice.issue(sample_guest, sample_room, date(2024, 1, 5))
        assert invoice.total_amount == Decimal("35000.00")
        assert invoice.guest_id == 1
        assert invoice.issue_date == date(2024, 1, 5)


# ============================================================================
# ENUMS, CLOCK, EXCEPTIONS
# ============================================================================

class TestEnums:

    @pytest.mark.unit
    @pytest.mark.domain
    def test_day_of_week_parse_ignores_case(self):
        assert DayOfWeek.parse("monday") == DayOfWeek.MONDAY
        assert DayOfWeek.parse(" Friday ") == DayOfWeek.FRIDAY

    @pytest.mark.unit
    @pytest.mark.domain
    @pytest.mark.edge_case
    def test_day_of_week_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown day of week"):
            DayOfWeek.parse("funday")

    @pytest.mark.unit
    @pytest.mark.domain
    def test_role_values(self):
        assert {r.value for r in UserRole} == {"ADMIN", "WORKER", "CLIENT"}


class TestClock:

    @pytest.mark.unit
    @pytest.mark.domain
    def test_fixed_clock_can_move(self):
        clock = FixedClock(date(2024, 1, 1))
        clock.set(date(2024, 1, 10))
        assert clock.today() == date(2024, 1, 10)

    @pytest.mark.unit
    @pytest.mark.domain
    def test_system_clock_is_today(self):
        assert abs((SystemClock().today() - date.today()).days) <= 1


class TestDomainErrors:

    @pytest.mark.unit
    @pytest.mark.domain
    def test_capacity_exceeded_carries_figures(self):
        error = CapacityExceeded(room_number=101, category="DOUBLE", capacity=2, current=2)
        assert isinstance(error, Conflict)
        assert "capacity 2, current 2" in error.message
        assert error.details() == {"room_number": 101, "category": "DOUBLE", "capacity": 2, "current": 2}

    @pytest.mark.unit
    @pytest.mark.domain
    def test_duplicate_invoice_carries_figures(self):
        error = DuplicateInvoice(
            guest_id=4, existing_invoice_id=9,
            existing_issue_date=date(2024, 1, 5), window_days=30
        )
        assert error.code == "DUPLICATE_INVOICE"
        assert error.details()["existing_issue_date"] == "2024-01-05"

    @pytest.mark.unit
    @pytest.mark.domain
    def test_not_found_message(self):
        assert NotFound("Room", 12).message == "Room 12 not found"

    @pytest.mark.unit
    @pytest.mark.domain
    def test_validation_error_is_value_error(self):
        assert isinstance(ValidationError("bad", field="x"), ValueError)
