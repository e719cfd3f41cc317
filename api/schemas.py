"""API Schemas - Request and Response DTOs

Money leaves the API as a decimal string with two places ("35000.00") so
clients never see binary floating point.
"""
from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from domain.enums import RoomCategory, UserRole, DayOfWeek


# ============================================================================
# ROOM SCHEMAS
# ============================================================================

class RoomRequest(BaseModel):
    """Create/update room request DTO"""
    room_number: int = Field(ge=1)
    floor: int = Field(ge=0)
    category: RoomCategory
    price_per_day: Decimal = Field(gt=0, decimal_places=2)
    phone_number: str = Field(min_length=1)


class RoomResponse(BaseModel):
    """Room response DTO"""
    room_id: int
    room_number: int
    floor: int
    category: RoomCategory
    capacity: int
    price_per_day: str
    phone_number: str


class FreeRoomsResponse(BaseModel):
    """Rooms without any current resident"""
    total_rooms: int
    free_rooms_count: int
    free_rooms: List[RoomResponse]


# ============================================================================
# GUEST (CLIENT) SCHEMAS
# ============================================================================

class GuestRequest(BaseModel):
    """Create guest request DTO"""
    passport_number: str = Field(min_length=1)
    full_name: str = Field(min_length=1)
    city: str
    check_in_date: date
    days_reserved: int = Field(ge=1)
    room_id: int


class UpdateGuestRequest(GuestRequest):
    """Update guest request DTO; residency is kept when omitted"""
    is_resident: Optional[bool] = None


class GuestResponse(BaseModel):
    """Guest response DTO"""
    guest_id: int
    passport_number: str
    full_name: str
    city: str
    check_in_date: date
    days_reserved: int
    checkout_date: date
    room_id: Optional[int] = None
    is_resident: bool


class CredentialsResponse(BaseModel):
    """Generated login, shown once"""
    login: str
    password: str


class GuestCreatedResponse(BaseModel):
    guest: GuestResponse
    credentials: CredentialsResponse


# ============================================================================
# EMPLOYEE & SCHEDULE SCHEMAS
# ============================================================================

class EmployeeRequest(BaseModel):
    full_name: str = Field(min_length=1)
    floor: int = Field(ge=0)


class EmployeeResponse(BaseModel):
    employee_id: int
    full_name: str
    floor: int


class EmployeeCreatedResponse(BaseModel):
    employee: EmployeeResponse
    credentials: CredentialsResponse


class ScheduleRequest(BaseModel):
    employee_id: int
    floor: int = Field(ge=0)
    day_of_week: DayOfWeek


class ScheduleResponse(BaseModel):
    schedule_id: int
    employee_id: int
    floor: int
    day_of_week: DayOfWeek


class CleanerResponse(BaseModel):
    """Employee cleaning a floor on a given day"""
    employee_id: int
    employee_name: str
    floor: int
    day_of_week: DayOfWeek


# ============================================================================
# INVOICE SCHEMAS
# ============================================================================

class CreateInvoiceRequest(BaseModel):
    """Issue invoice request DTO; issue_date defaults to today"""
    guest_id: int
    issue_date: Optional[date] = None


class UpdateInvoiceRequest(BaseModel):
    """Manual invoice correction DTO"""
    guest_id: int
    total_amount: Decimal = Field(ge=0, decimal_places=2)
    issue_date: date


class InvoiceResponse(BaseModel):
    invoice_id: int
    guest_id: int
    total_amount: str
    issue_date: date


# ============================================================================
# REPORT SCHEMAS
# ============================================================================

class RoomOccupancyResponse(BaseModel):
    room_id: int
    room_number: int
    floor: int
    category: RoomCategory
    occupied_days: int
    free_days: int
    total_days: int


class QuarterlyReportResponse(BaseModel):
    period_start: date
    period_end: date
    total_guests: int
    total_revenue: str
    room_occupancy: List[RoomOccupancyResponse]


# ============================================================================
# AUTH & USER SCHEMAS
# ============================================================================

class LoginRequest(BaseModel):
    username: str
    password: str


class Token(BaseModel):
    """Token response DTO"""
    access_token: str
    token_type: str


class TokenData(BaseModel):
    """Token payload DTO"""
    username: Optional[str] = None


class UserRequest(BaseModel):
    """Create/update user request DTO"""
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    role: UserRole


class UserResponse(BaseModel):
    """User response DTO"""
    user_id: int
    username: str
    role: UserRole
    guest_id: Optional[int] = None
    employee_id: Optional[int] = None
    full_name: Optional[str] = None
    disabled: bool = False
