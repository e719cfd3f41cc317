"""In-Memory Repository Implementations"""
from itertools import count
from typing import Optional, List, Dict
from datetime import date

from domain.repositories import (
    RoomRepository, GuestRepository, EmployeeRepository,
    CleaningScheduleRepository, InvoiceRepository, AccountRepository, EntityStore
)
from domain.auth import AccountInDB
from domain.entities import Room, Guest, Employee, CleaningSchedule, Invoice


class _InMemoryTable:
    """Dict-backed table handing out copies so callers never alias stored rows"""

    def __init__(self, id_field: str):
        self._id_field = id_field
        self._storage: Dict[int, object] = {}
        self._ids = count(1)

    def insert(self, entity):
        stored = entity.model_copy(update={self._id_field: next(self._ids)})
        self._storage[getattr(stored, self._id_field)] = stored
        return stored.model_copy()

    def get(self, entity_id: int):
        entity = self._storage.get(entity_id)
        return entity.model_copy() if entity is not None else None

    def all(self) -> list:
        return [e.model_copy() for e in self._storage.values()]

    def where(self, predicate) -> list:
        return [e.model_copy() for e in self._storage.values() if predicate(e)]

    def replace(self, entity):
        entity_id = getattr(entity, self._id_field)
        if entity_id not in self._storage:
            return None
        self._storage[entity_id] = entity.model_copy()
        return entity

    def remove(self, entity_id: int) -> bool:
        if entity_id in self._storage:
            del self._storage[entity_id]
            return True
        return False


class InMemoryRoomRepository(RoomRepository):
    """In-memory implementation of RoomRepository"""

    def __init__(self):
        self._table = _InMemoryTable("room_id")

    async def save(self, room: Room) -> Room:
        return self._table.insert(room)

    async def find_by_id(self, room_id: int) -> Optional[Room]:
        return self._table.get(room_id)

    async def find_all(self) -> List[Room]:
        return self._table.all()

    async def update(self, room: Room) -> Optional[Room]:
        return self._table.replace(room)

    async def delete(self, room_id: int) -> bool:
        return self._table.remove(room_id)


class InMemoryGuestRepository(GuestRepository):
    """In-memory implementation of GuestRepository"""

    def __init__(self):
        self._table = _InMemoryTable("guest_id")

    async def save(self, guest: Guest) -> Guest:
        return self._table.insert(guest)

    async def find_by_id(self, guest_id: int) -> Optional[Guest]:
        return self._table.get(guest_id)

    async def find_by_passport(self, passport_number: str) -> Optional[Guest]:
        matches = self._table.where(lambda g: g.passport_number == passport_number)
        return matches[0] if matches else None

    async def find_by_room(self, room_id: int) -> List[Guest]:
        return self._table.where(lambda g: g.room_id == room_id)

    async def find_by_checkout_date(self, checkout_date: date) -> List[Guest]:
        return self._table.where(lambda g: g.checkout_date == checkout_date)

    async def find_residents(self) -> List[Guest]:
        return self._table.where(lambda g: g.is_resident)

    async def find_all(self) -> List[Guest]:
        return self._table.all()

    async def update(self, guest: Guest) -> Optional[Guest]:
        return self._table.replace(guest)

    async def set_resident_by_room(self, room_id: int, is_resident: bool) -> int:
        changed = 0
        for guest in self._table.where(lambda g: g.room_id == room_id):
            guest.is_resident = is_resident
            self._table.replace(guest)
            changed += 1
        return changed

    async def delete(self, guest_id: int) -> bool:
        return self._table.remove(guest_id)


class InMemoryEmployeeRepository(EmployeeRepository):
    """In-memory implementation of EmployeeRepository"""

    def __init__(self):
        self._table = _InMemoryTable("employee_id")

    async def save(self, employee: Employee) -> Employee:
        return self._table.insert(employee)

    async def find_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._table.get(employee_id)

    async def find_all(self) -> List[Employee]:
        return self._table.all()

    async def update(self, employee: Employee) -> Optional[Employee]:
        return self._table.replace(employee)

    async def delete(self, employee_id: int) -> bool:
        return self._table.remove(employee_id)


class InMemoryCleaningScheduleRepository(CleaningScheduleRepository):
    """In-memory implementation of CleaningScheduleRepository"""

    def __init__(self):
        self._table = _InMemoryTable("schedule_id")

    async def save(self, schedule: CleaningSchedule) -> CleaningSchedule:
        return self._table.insert(schedule)

    async def find_by_id(self, schedule_id: int) -> Optional[CleaningSchedule]:
        return self._table.get(schedule_id)

    async def find_by_employee(self, employee_id: int) -> List[CleaningSchedule]:
        return self._table.where(lambda s: s.employee_id == employee_id)

    async def find_all(self) -> List[CleaningSchedule]:
        return self._table.all()

    async def update(self, schedule: CleaningSchedule) -> Optional[CleaningSchedule]:
        return self._table.replace(schedule)

    async def delete(self, schedule_id: int) -> bool:
        return self._table.remove(schedule_id)


class InMemoryInvoiceRepository(InvoiceRepository):
    """In-memory implementation of InvoiceRepository"""

    def __init__(self):
        self._table = _InMemoryTable("invoice_id")

    async def save(self, invoice: Invoice) -> Invoice:
        return self._table.insert(invoice)

    async def find_by_id(self, invoice_id: int) -> Optional[Invoice]:
        return self._table.get(invoice_id)

    async def find_by_guest(self, guest_id: int) -> List[Invoice]:
        return self._table.where(lambda i: i.guest_id == guest_id)

    async def find_all(self) -> List[Invoice]:
        return self._table.all()

    async def update(self, invoice: Invoice) -> Optional[Invoice]:
        return self._table.replace(invoice)

    async def delete(self, invoice_id: int) -> bool:
        return self._table.remove(invoice_id)


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of AccountRepository"""

    def __init__(self):
        self._table = _InMemoryTable("user_id")

    async def save(self, account: AccountInDB) -> AccountInDB:
        return self._table.insert(account)

    async def find_by_id(self, user_id: int) -> Optional[AccountInDB]:
        return self._table.get(user_id)

    async def find_by_username(self, username: str) -> Optional[AccountInDB]:
        matches = self._table.where(lambda a: a.username == username)
        return matches[0] if matches else None

    async def find_by_guest_id(self, guest_id: int) -> Optional[AccountInDB]:
        matches = self._table.where(lambda a: a.guest_id == guest_id)
        return matches[0] if matches else None

    async def find_by_employee_id(self, employee_id: int) -> Optional[AccountInDB]:
        matches = self._table.where(lambda a: a.employee_id == employee_id)
        return matches[0] if matches else None

    async def find_all(self) -> List[AccountInDB]:
        return self._table.all()

    async def update(self, account: AccountInDB) -> Optional[AccountInDB]:
        return self._table.replace(account)

    async def delete(self, user_id: int) -> bool:
        return self._table.remove(user_id)


class InMemoryEntityStore(EntityStore):
    """EntityStore wired to fresh in-memory repositories"""

    def __init__(self):
        super().__init__(
            rooms=InMemoryRoomRepository(),
            guests=InMemoryGuestRepository(),
            employees=InMemoryEmployeeRepository(),
            schedules=InMemoryCleaningScheduleRepository(),
            invoices=InMemoryInvoiceRepository(),
            accounts=InMemoryAccountRepository()
        )
