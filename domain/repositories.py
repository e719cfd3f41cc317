"""Domain Repository Interfaces"""
from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import date

from domain.auth import AccountInDB
from domain.entities import Room, Guest, Employee, CleaningSchedule, Invoice


class RoomRepository(ABC):
    """Repository interface for Room Aggregate"""

    @abstractmethod
    async def save(self, room: Room) -> Room:
        """Insert room, assigning its ID"""
        pass

    @abstractmethod
    async def find_by_id(self, room_id: int) -> Optional[Room]:
        pass

    @abstractmethod
    async def find_all(self) -> List[Room]:
        pass

    @abstractmethod
    async def update(self, room: Room) -> Optional[Room]:
        """Update room, None if it does not exist"""
        pass

    @abstractmethod
    async def delete(self, room_id: int) -> bool:
        pass


class GuestRepository(ABC):
    """Repository interface for Guest Aggregate"""

    @abstractmethod
    async def save(self, guest: Guest) -> Guest:
        """Insert guest, assigning its ID"""
        pass

    @abstractmethod
    async def find_by_id(self, guest_id: int) -> Optional[Guest]:
        pass

    @abstractmethod
    async def find_by_passport(self, passport_number: str) -> Optional[Guest]:
        pass

    @abstractmethod
    async def find_by_room(self, room_id: int) -> List[Guest]:
        pass

    @abstractmethod
    async def find_by_checkout_date(self, checkout_date: date) -> List[Guest]:
        pass

    @abstractmethod
    async def find_residents(self) -> List[Guest]:
        """Guests currently flagged as resident"""
        pass

    @abstractmethod
    async def find_all(self) -> List[Guest]:
        pass

    @abstractmethod
    async def update(self, guest: Guest) -> Optional[Guest]:
        """Update guest, None if it does not exist"""
        pass

    @abstractmethod
    async def set_resident_by_room(self, room_id: int, is_resident: bool) -> int:
        """Set the resident flag of every guest in a room, returns rows changed"""
        pass

    @abstractmethod
    async def delete(self, guest_id: int) -> bool:
        pass


class EmployeeRepository(ABC):
    """Repository interface for Employee Entity"""

    @abstractmethod
    async def save(self, employee: Employee) -> Employee:
        pass

    @abstractmethod
    async def find_by_id(self, employee_id: int) -> Optional[Employee]:
        pass

    @abstractmethod
    async def find_all(self) -> List[Employee]:
        pass

    @abstractmethod
    async def update(self, employee: Employee) -> Optional[Employee]:
        pass

    @abstractmethod
    async def delete(self, employee_id: int) -> bool:
        pass


class CleaningScheduleRepository(ABC):
    """Repository interface for CleaningSchedule Entity"""

    @abstractmethod
    async def save(self, schedule: CleaningSchedule) -> CleaningSchedule:
        pass

    @abstractmethod
    async def find_by_id(self, schedule_id: int) -> Optional[CleaningSchedule]:
        pass

    @abstractmethod
    async def find_by_employee(self, employee_id: int) -> List[CleaningSchedule]:
        pass

    @abstractmethod
    async def find_all(self) -> List[CleaningSchedule]:
        pass

    @abstractmethod
    async def update(self, schedule: CleaningSchedule) -> Optional[CleaningSchedule]:
        pass

    @abstractmethod
    async def delete(self, schedule_id: int) -> bool:
        pass


class InvoiceRepository(ABC):
    """Repository interface for Invoice Entity"""

    @abstractmethod
    async def save(self, invoice: Invoice) -> Invoice:
        pass

    @abstractmethod
    async def find_by_id(self, invoice_id: int) -> Optional[Invoice]:
        pass

    @abstractmethod
    async def find_by_guest(self, guest_id: int) -> List[Invoice]:
        pass

    @abstractmethod
    async def find_all(self) -> List[Invoice]:
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Optional[Invoice]:
        pass

    @abstractmethod
    async def delete(self, invoice_id: int) -> bool:
        pass


class AccountRepository(ABC):
    """Repository interface for login accounts"""

    @abstractmethod
    async def save(self, account: AccountInDB) -> AccountInDB:
        pass

    @abstractmethod
    async def find_by_id(self, user_id: int) -> Optional[AccountInDB]:
        pass

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[AccountInDB]:
        pass

    @abstractmethod
    async def find_by_guest_id(self, guest_id: int) -> Optional[AccountInDB]:
        pass

    @abstractmethod
    async def find_by_employee_id(self, employee_id: int) -> Optional[AccountInDB]:
        pass

    @abstractmethod
    async def find_all(self) -> List[AccountInDB]:
        pass

    @abstractmethod
    async def update(self, account: AccountInDB) -> Optional[AccountInDB]:
        pass

    @abstractmethod
    async def delete(self, user_id: int) -> bool:
        pass


class EntityStore:
    """Bundle of the repositories one application instance works against"""

    def __init__(
        self,
        rooms: RoomRepository,
        guests: GuestRepository,
        employees: EmployeeRepository,
        schedules: CleaningScheduleRepository,
        invoices: InvoiceRepository,
        accounts: AccountRepository
    ):
        self.rooms = rooms
        self.guests = guests
        self.employees = employees
        self.schedules = schedules
        self.invoices = invoices
        self.accounts = accounts

    async def initialize(self) -> None:
        """Prepare backing storage, no-op unless overridden"""

    async def close(self) -> None:
        """Release backing storage, no-op unless overridden"""
