"""Entity -> response DTO conversion"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from api.schemas import (
    RoomResponse, GuestResponse, EmployeeResponse, ScheduleResponse, CleanerResponse,
    InvoiceResponse, QuarterlyReportResponse, RoomOccupancyResponse, UserResponse
)
from application.reports import QuarterlyReport
from domain.auth import Account
from domain.entities import Room, Guest, Employee, CleaningSchedule, Invoice

CENTS = Decimal("0.01")


def money(amount: Decimal) -> str:
    """Two-place decimal string, e.g. Decimal('35000') -> '35000.00'"""
    return format(amount.quantize(CENTS, rounding=ROUND_HALF_UP), "f")


def room_to_response(room: Room) -> RoomResponse:
    return RoomResponse(
        room_id=room.room_id,
        room_number=room.room_number,
        floor=room.floor,
        category=room.category,
        capacity=room.capacity,
        price_per_day=money(room.price_per_day),
        phone_number=room.phone_number
    )


def guest_to_response(guest: Guest) -> GuestResponse:
    return GuestResponse(
        guest_id=guest.guest_id,
        passport_number=guest.passport_number,
        full_name=guest.full_name,
        city=guest.city,
        check_in_date=guest.check_in_date,
        days_reserved=guest.days_reserved,
        checkout_date=guest.checkout_date,
        room_id=guest.room_id,
        is_resident=guest.is_resident
    )


def employee_to_response(employee: Employee) -> EmployeeResponse:
    return EmployeeResponse(
        employee_id=employee.employee_id,
        full_name=employee.full_name,
        floor=employee.floor
    )


def schedule_to_response(schedule: CleaningSchedule) -> ScheduleResponse:
    return ScheduleResponse(
        schedule_id=schedule.schedule_id,
        employee_id=schedule.employee_id,
        floor=schedule.floor,
        day_of_week=schedule.day_of_week
    )


def cleaner_to_response(employee: Employee, schedule: CleaningSchedule) -> CleanerResponse:
    return CleanerResponse(
        employee_id=employee.employee_id,
        employee_name=employee.full_name,
        floor=schedule.floor,
        day_of_week=schedule.day_of_week
    )


def invoice_to_response(invoice: Invoice) -> InvoiceResponse:
    return InvoiceResponse(
        invoice_id=invoice.invoice_id,
        guest_id=invoice.guest_id,
        total_amount=money(invoice.total_amount),
        issue_date=invoice.issue_date
    )


def report_to_response(report: QuarterlyReport) -> QuarterlyReportResponse:
    return QuarterlyReportResponse(
        period_start=report.period_start,
        period_end=report.period_end,
        total_guests=report.total_guests,
        total_revenue=money(report.total_revenue),
        room_occupancy=[RoomOccupancyResponse(**r.model_dump()) for r in report.room_occupancy]
    )


def user_to_response(account: Account, full_name: Optional[str] = None) -> UserResponse:
    return UserResponse(
        user_id=account.user_id,
        username=account.username,
        role=account.role,
        guest_id=account.guest_id,
        employee_id=account.employee_id,
        full_name=full_name,
        disabled=account.disabled
    )
