"""Domain Entities - Aggregates"""
from pydantic import BaseModel, Field
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from domain.enums import RoomCategory, DayOfWeek
from domain.exceptions import ValidationError
from domain.policies import capacity_for
from domain.value_objects import StayPeriod, charge_for_stay


class Room(BaseModel):
    """Room Aggregate Root Entity"""

    room_id: Optional[int] = None
    room_number: int = Field(ge=1)
    floor: int = Field(ge=0)
    category: RoomCategory
    price_per_day: Decimal = Field(gt=0)
    phone_number: str

    class Config:
        from_attributes = True

    @property
    def capacity(self) -> int:
        """Maximum simultaneous residents"""
        return capacity_for(self.category)

    def charge_for(self, days_reserved: int) -> Decimal:
        """Exact charge for a stay of days_reserved days"""
        if days_reserved < 1:
            raise ValidationError("Days reserved must be at least 1", field="days_reserved")
        return charge_for_stay(self.price_per_day, days_reserved)


class Guest(BaseModel):
    """Guest Aggregate Root Entity (a hotel client)"""

    guest_id: Optional[int] = None
    passport_number: str = Field(min_length=1)
    full_name: str = Field(min_length=1)
    city: str
    check_in_date: date
    days_reserved: int = Field(ge=1)
    room_id: Optional[int] = None
    is_resident: bool = True

    class Config:
        from_attributes = True

    # ==================== FACTORY METHOD ====================
    @staticmethod
    def create(
        passport_number: str,
        full_name: str,
        city: str,
        check_in_date: date,
        days_reserved: int,
        room_id: int
    ) -> "Guest":
        """Create a newly admitted, resident guest"""
        Guest._validate_days_reserved(days_reserved)
        return Guest(
            passport_number=passport_number.strip(),
            full_name=full_name.strip(),
            city=city.strip(),
            check_in_date=check_in_date,
            days_reserved=days_reserved,
            room_id=room_id,
            is_resident=True
        )

    # ==================== QUERY METHODS ====================
    @property
    def checkout_date(self) -> date:
        return self.check_in_date + timedelta(days=self.days_reserved)

    @property
    def stay(self) -> StayPeriod:
        return StayPeriod.of(self.check_in_date, self.days_reserved)

    def has_lapsed(self, today: date) -> bool:
        """Still flagged resident although the reservation ended before today"""
        return self.is_resident and self.checkout_date < today

    def is_transfer_to(self, room_id: Optional[int], is_resident: bool) -> bool:
        """Whether an edit places this guest as a new resident of room_id"""
        if not is_resident:
            return False
        return room_id != self.room_id or not self.is_resident

    # ==================== STATE TRANSITION METHODS ====================
    def move_out(self) -> None:
        self.is_resident = False

    def apply_changes(
        self,
        passport_number: str,
        full_name: str,
        city: str,
        check_in_date: date,
        days_reserved: int,
        room_id: Optional[int],
        is_resident: Optional[bool] = None
    ) -> None:
        """Replace editable fields; residency is kept unless given"""
        Guest._validate_days_reserved(days_reserved)
        self.passport_number = passport_number.strip()
        self.full_name = full_name.strip()
        self.city = city.strip()
        self.check_in_date = check_in_date
        self.days_reserved = days_reserved
        self.room_id = room_id
        if is_resident is not None:
            self.is_resident = is_resident

    @staticmethod
    def _validate_days_reserved(days_reserved: int) -> None:
        if days_reserved < 1:
            raise ValidationError("Days reserved must be at least 1", field="days_reserved")


class Employee(BaseModel):
    """Employee Entity (cleaning staff)"""

    employee_id: Optional[int] = None
    full_name: str = Field(min_length=1)
    floor: int = Field(ge=0)

    class Config:
        from_attributes = True

    def default_login(self) -> str:
        """Login derived from the full name: no spaces, lower case"""
        return self.full_name.replace(" ", "").lower()


class CleaningSchedule(BaseModel):
    """Cleaning assignment of an employee to a floor on a weekday"""

    schedule_id: Optional[int] = None
    employee_id: int
    floor: int = Field(ge=0)
    day_of_week: DayOfWeek

    class Config:
        from_attributes = True

    def collides_with(self, other: "CleaningSchedule") -> bool:
        """Same floor on the same day, and not the same record"""
        return (
            other.schedule_id != self.schedule_id
            and other.floor == self.floor
            and other.day_of_week == self.day_of_week
        )


class Invoice(BaseModel):
    """Invoice Entity, immutable in the normal billing flow"""

    invoice_id: Optional[int] = None
    guest_id: int
    total_amount: Decimal = Field(ge=0)
    issue_date: date

    class Config:
        from_attributes = True

    @staticmethod
    def issue(guest: Guest, room: Room, issue_date: date) -> "Invoice":
        """Invoice for the guest's whole reserved stay in room"""
        return Invoice(
            guest_id=guest.guest_id,
            total_amount=room.charge_for(guest.days_reserved),
            issue_date=issue_date
        )
