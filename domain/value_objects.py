"""Domain Value Objects"""
from pydantic import BaseModel, field_validator
from datetime import date, timedelta
from decimal import Decimal


class StayPeriod(BaseModel):
    """Value Object for a guest stay, both ends counted as days in the hotel"""
    check_in: date
    check_out: date

    @field_validator('check_out')
    @classmethod
    def check_out_not_before_check_in(cls, v, info):
        check_in = info.data.get('check_in')
        if check_in is not None and v < check_in:
            raise ValueError('Check-out must not be before check-in')
        return v

    @staticmethod
    def of(check_in: date, days_reserved: int) -> "StayPeriod":
        """Stay starting on check_in and ending days_reserved days later"""
        return StayPeriod(check_in=check_in, check_out=check_in + timedelta(days=days_reserved))

    def overlaps(self, period: "ReportingPeriod") -> bool:
        """Boundary-inclusive overlap with a reporting period"""
        return self.check_in <= period.end and self.check_out >= period.start

    def days_within(self, period: "ReportingPeriod") -> int:
        """Inclusive count of stay days falling inside the period"""
        start = max(self.check_in, period.start)
        end = min(self.check_out, period.end)
        if end < start:
            return 0
        return (end - start).days + 1

    class Config:
        frozen = True


class ReportingPeriod(BaseModel):
    """Value Object for a calendar quarter, both bounds inclusive"""
    start: date
    end: date

    @staticmethod
    def quarter_containing(day: date) -> "ReportingPeriod":
        """Calendar quarter (Jan-Mar, Apr-Jun, Jul-Sep, Oct-Dec) holding day"""
        start_month = 3 * ((day.month - 1) // 3) + 1
        start = date(day.year, start_month, 1)
        if start_month == 10:
            next_start = date(day.year + 1, 1, 1)
        else:
            next_start = date(day.year, start_month + 3, 1)
        return ReportingPeriod(start=start, end=next_start - timedelta(days=1))

    @staticmethod
    def last_completed_quarter(reference_date: date) -> "ReportingPeriod":
        """Quarter immediately before the one holding reference_date"""
        current = ReportingPeriod.quarter_containing(reference_date)
        return ReportingPeriod.quarter_containing(current.start - timedelta(days=1))

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    class Config:
        frozen = True


def charge_for_stay(price_per_day: Decimal, days_reserved: int) -> Decimal:
    """Room charge for a stay, exact decimal product"""
    return Decimal(price_per_day) * Decimal(days_reserved)


def days_between(earlier: date, later: date) -> int:
    """Absolute number of calendar days separating two dates"""
    return abs((later - earlier).days)
