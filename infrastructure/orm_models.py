from datetime import date
from decimal import Decimal
from typing import Optional
from sqlalchemy import String, Date, ForeignKey, Numeric, Integer, Boolean, Enum
from sqlalchemy.orm import Mapped, mapped_column

from domain.enums import RoomCategory, UserRole, DayOfWeek
from infrastructure.database import Base


class RoomRow(Base):
    __tablename__ = "rooms"

    room_id: Mapped[int] = mapped_column(primary_key=True, index=True)
    room_number: Mapped[int] = mapped_column(Integer, nullable=False)
    floor: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[RoomCategory] = mapped_column(Enum(RoomCategory), nullable=False)
    price_per_day: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(32), nullable=False)


class GuestRow(Base):
    __tablename__ = "clients"

    guest_id: Mapped[int] = mapped_column(primary_key=True, index=True)
    passport_number: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(255), nullable=False)
    check_in_date: Mapped[date] = mapped_column(Date, nullable=False)
    days_reserved: Mapped[int] = mapped_column(Integer, nullable=False)
    # No FK: deleting a room keeps its former guests for billing history
    room_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    is_resident: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class EmployeeRow(Base):
    __tablename__ = "employees"

    employee_id: Mapped[int] = mapped_column(primary_key=True, index=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    floor: Mapped[int] = mapped_column(Integer, nullable=False)


class CleaningScheduleRow(Base):
    __tablename__ = "cleaning_schedules"

    schedule_id: Mapped[int] = mapped_column(primary_key=True, index=True)
    employee_id: Mapped[int] = mapped_column(
        ForeignKey("employees.employee_id", ondelete="CASCADE"), nullable=False, index=True
    )
    floor: Mapped[int] = mapped_column(Integer, nullable=False)
    day_of_week: Mapped[DayOfWeek] = mapped_column(Enum(DayOfWeek), nullable=False)


class InvoiceRow(Base):
    __tablename__ = "invoices"

    invoice_id: Mapped[int] = mapped_column(primary_key=True, index=True)
    guest_id: Mapped[int] = mapped_column(
        ForeignKey("clients.guest_id", ondelete="CASCADE"), nullable=False, index=True
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)


class AccountRow(Base):
    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), nullable=False)
    guest_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("clients.guest_id", ondelete="CASCADE"), nullable=True
    )
    employee_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("employees.employee_id", ondelete="CASCADE"), nullable=True
    )
    disabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
