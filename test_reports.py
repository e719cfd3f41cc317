"""Quarterly occupancy report tests"""
import pytest
from datetime import date
from decimal import Decimal

from domain.entities import Guest, Invoice, Room
from domain.enums import RoomCategory


async def _add_room(store, number, category=RoomCategory.TRIPLE):
    return await store.rooms.save(Room(
        room_number=number, floor=number // 100, category=category,
        price_per_day=Decimal("100.00"), phone_number=str(number)
    ))


async def _add_stay(store, room_id, check_in, days, passport):
    return await store.guests.save(Guest(
        passport_number=passport, full_name=passport, city="Lyon",
        check_in_date=check_in, days_reserved=days, room_id=room_id, is_resident=False
    ))


class TestOccupancyReport:
    """Reports cover the quarter before the reference date"""

    @pytest.mark.unit
    @pytest.mark.application
    async def test_period_is_last_completed_quarter(self, report_builder):
        report = await report_builder.build_quarterly_report(date(2024, 5, 10))

        assert report.period_start == date(2024, 1, 1)
        assert report.period_end == date(2024, 3, 31)
        assert report.total_guests == 0
        assert report.total_revenue == Decimal("0")
        assert report.room_occupancy == []

    @pytest.mark.unit
    @pytest.mark.application
    async def test_defaults_to_clock(self, report_builder, clock):
        clock.set(date(2024, 8, 1))
        report = await report_builder.build_quarterly_report()
        assert report.period_start == date(2024, 4, 1)

    @pytest.mark.unit
    @pytest.mark.application
    async def test_occupied_and_free_days(self, store, report_builder):
        room = await _add_room(store, 101)
        await _add_stay(store, room.room_id, date(2024, 1, 10), 9, "P-1")

        report = await report_builder.build_quarterly_report(date(2024, 4, 15))
        occupancy = report.room_occupancy[0]

        assert occupancy.total_days == 91
        assert occupancy.occupied_days == 10
        assert occupancy.free_days == 81
        assert report.total_guests == 1

    @pytest.mark.unit
    @pytest.mark.application
    @pytest.mark.edge_case
    async def test_overlapping_stays_are_clamped(self, store, report_builder):
        """Three full-quarter stays in one room never give negative free days"""
        room = await _add_room(store, 101)
        for i in range(3):
            await _add_stay(store, room.room_id, date(2023, 12, 1), 150, f"P-{i}")

        report = await report_builder.build_quarterly_report(date(2024, 4, 1))
        occupancy = report.room_occupancy[0]

        assert occupancy.occupied_days == occupancy.total_days == 91
        assert occupancy.free_days == 0
        assert report.total_guests == 3

    @pytest.mark.unit
    @pytest.mark.application
    @pytest.mark.edge_case
    async def test_checkout_on_period_start_is_included(self, store, report_builder):
        room = await _add_room(store, 101)
        await _add_stay(store, room.room_id, date(2023, 12, 27), 5, "EDGE")  # out on 2024-01-01

        report = await report_builder.build_quarterly_report(date(2024, 4, 1))

        assert report.total_guests == 1
        assert report.room_occupancy[0].occupied_days == 1

    @pytest.mark.unit
    @pytest.mark.application
    @pytest.mark.edge_case
    async def test_checkout_day_before_period_start_is_excluded(self, store, report_builder):
        room = await _add_room(store, 101)
        await _add_stay(store, room.room_id, date(2023, 12, 26), 5, "EARLY")  # out on 2023-12-31

        report = await report_builder.build_quarterly_report(date(2024, 4, 1))

        assert report.total_guests == 0
        assert report.room_occupancy[0].occupied_days == 0
        assert report.room_occupancy[0].free_days == 91

    @pytest.mark.unit
    @pytest.mark.application
    async def test_revenue_counts_invoices_issued_in_period(self, store, report_builder):
        room = await _add_room(store, 101)
        guest = await _add_stay(store, room.room_id, date(2024, 1, 1), 3, "P-1")
        for issue_date, amount in [
            (date(2023, 12, 31), "999.00"),
            (date(2024, 1, 1), "300.00"),
            (date(2024, 3, 31), "0.10"),
            (date(2024, 4, 1), "999.00"),
        ]:
            await store.invoices.save(Invoice(
                guest_id=guest.guest_id, total_amount=Decimal(amount), issue_date=issue_date
            ))

        report = await report_builder.build_quarterly_report(date(2024, 4, 1))

        assert report.total_revenue == Decimal("300.10")

    @pytest.mark.unit
    @pytest.mark.application
    async def test_every_room_is_listed(self, store, report_builder):
        busy = await _add_room(store, 101)
        await _add_room(store, 202, RoomCategory.SINGLE)
        await _add_stay(store, busy.room_id, date(2024, 2, 1), 1, "P-1")

        report = await report_builder.build_quarterly_report(date(2024, 4, 1))
        by_number = {r.room_number: r for r in report.room_occupancy}

        assert by_number[101].occupied_days == 2
        assert by_number[202].occupied_days == 0
        assert by_number[202].category == RoomCategory.SINGLE
