"""SQLAlchemy Repository Implementations

Each repository call runs in its own session and commits before returning,
so every create/update/delete is one transaction.
"""
import logging
from datetime import date, timedelta
from typing import Optional, List, Type

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from domain.repositories import (
    RoomRepository, GuestRepository, EmployeeRepository,
    CleaningScheduleRepository, InvoiceRepository, AccountRepository, EntityStore
)
from domain.auth import AccountInDB
from domain.entities import Room, Guest, Employee, CleaningSchedule, Invoice
from domain.exceptions import Conflict
from infrastructure.database import Base, build_engine, build_session_factory, create_all
from infrastructure.orm_models import (
    RoomRow, GuestRow, EmployeeRow, CleaningScheduleRow, InvoiceRow, AccountRow
)

logger = logging.getLogger(__name__)


class _SqlAlchemyRepository:
    """Shared row <-> entity plumbing"""

    row_class: Type[Base]
    entity_class: type
    id_field: str

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    def _to_entity(self, row):
        return self.entity_class.model_validate(row)

    async def _commit(self, session: AsyncSession) -> None:
        """Commit, reporting unique-constraint clashes as Conflict"""
        try:
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            logger.warning("Rejected %s write: %s", self.row_class.__tablename__, e.orig)
            raise Conflict(f"{self.entity_class.__name__} clashes with an existing record") from e

    async def _insert(self, entity):
        async with self._session_factory() as session:
            row = self.row_class(**entity.model_dump(exclude={self.id_field}))
            session.add(row)
            await self._commit(session)
            return self._to_entity(row)

    async def _get(self, entity_id: int):
        async with self._session_factory() as session:
            row = await session.get(self.row_class, entity_id)
            return self._to_entity(row) if row is not None else None

    async def _select(self, *criteria) -> list:
        async with self._session_factory() as session:
            stmt = select(self.row_class).where(*criteria).order_by(
                getattr(self.row_class, self.id_field)
            )
            result = await session.execute(stmt)
            return [self._to_entity(row) for row in result.scalars().all()]

    async def _first(self, *criteria):
        rows = await self._select(*criteria)
        return rows[0] if rows else None

    async def _replace(self, entity):
        async with self._session_factory() as session:
            row = await session.get(self.row_class, getattr(entity, self.id_field))
            if row is None:
                return None
            for field, value in entity.model_dump(exclude={self.id_field}).items():
                setattr(row, field, value)
            await self._commit(session)
            return self._to_entity(row)

    async def _remove(self, entity_id: int) -> bool:
        async with self._session_factory() as session:
            row = await session.get(self.row_class, entity_id)
            if row is None:
                return False
            await session.delete(row)
            await session.commit()
            return True


class SqlAlchemyRoomRepository(_SqlAlchemyRepository, RoomRepository):
    row_class = RoomRow
    entity_class = Room
    id_field = "room_id"

    async def save(self, room: Room) -> Room:
        return await self._insert(room)

    async def find_by_id(self, room_id: int) -> Optional[Room]:
        return await self._get(room_id)

    async def find_all(self) -> List[Room]:
        return await self._select()

    async def update(self, room: Room) -> Optional[Room]:
        return await self._replace(room)

    async def delete(self, room_id: int) -> bool:
        return await self._remove(room_id)


class SqlAlchemyGuestRepository(_SqlAlchemyRepository, GuestRepository):
    row_class = GuestRow
    entity_class = Guest
    id_field = "guest_id"

    async def save(self, guest: Guest) -> Guest:
        return await self._insert(guest)

    async def find_by_id(self, guest_id: int) -> Optional[Guest]:
        return await self._get(guest_id)

    async def find_by_passport(self, passport_number: str) -> Optional[Guest]:
        return await self._first(GuestRow.passport_number == passport_number)

    async def find_by_room(self, room_id: int) -> List[Guest]:
        return await self._select(GuestRow.room_id == room_id)

    async def find_by_checkout_date(self, checkout_date: date) -> List[Guest]:
        # Date arithmetic differs per SQL dialect, so narrow in SQL and finish in Python
        candidates = await self._select(GuestRow.check_in_date < checkout_date)
        return [g for g in candidates if g.check_in_date + timedelta(days=g.days_reserved) == checkout_date]

    async def find_residents(self) -> List[Guest]:
        return await self._select(GuestRow.is_resident.is_(True))

    async def find_all(self) -> List[Guest]:
        return await self._select()

    async def update(self, guest: Guest) -> Optional[Guest]:
        return await self._replace(guest)

    async def set_resident_by_room(self, room_id: int, is_resident: bool) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                update(GuestRow).where(GuestRow.room_id == room_id).values(is_resident=is_resident)
            )
            await session.commit()
            return result.rowcount or 0

    async def delete(self, guest_id: int) -> bool:
        return await self._remove(guest_id)


class SqlAlchemyEmployeeRepository(_SqlAlchemyRepository, EmployeeRepository):
    row_class = EmployeeRow
    entity_class = Employee
    id_field = "employee_id"

    async def save(self, employee: Employee) -> Employee:
        return await self._insert(employee)

    async def find_by_id(self, employee_id: int) -> Optional[Employee]:
        return await self._get(employee_id)

    async def find_all(self) -> List[Employee]:
        return await self._select()

    async def update(self, employee: Employee) -> Optional[Employee]:
        return await self._replace(employee)

    async def delete(self, employee_id: int) -> bool:
        return await self._remove(employee_id)


class SqlAlchemyCleaningScheduleRepository(_SqlAlchemyRepository, CleaningScheduleRepository):
    row_class = CleaningScheduleRow
    entity_class = CleaningSchedule
    id_field = "schedule_id"

    async def save(self, schedule: CleaningSchedule) -> CleaningSchedule:
        return await self._insert(schedule)

    async def find_by_id(self, schedule_id: int) -> Optional[CleaningSchedule]:
        return await self._get(schedule_id)

    async def find_by_employee(self, employee_id: int) -> List[CleaningSchedule]:
        return await self._select(CleaningScheduleRow.employee_id == employee_id)

    async def find_all(self) -> List[CleaningSchedule]:
        return await self._select()

    async def update(self, schedule: CleaningSchedule) -> Optional[CleaningSchedule]:
        return await self._replace(schedule)

    async def delete(self, schedule_id: int) -> bool:
        return await self._remove(schedule_id)


class SqlAlchemyInvoiceRepository(_SqlAlchemyRepository, InvoiceRepository):
    row_class = InvoiceRow
    entity_class = Invoice
    id_field = "invoice_id"

    async def save(self, invoice: Invoice) -> Invoice:
        return await self._insert(invoice)

    async def find_by_id(self, invoice_id: int) -> Optional[Invoice]:
        return await self._get(invoice_id)

    async def find_by_guest(self, guest_id: int) -> List[Invoice]:
        return await self._select(InvoiceRow.guest_id == guest_id)

    async def find_all(self) -> List[Invoice]:
        return await self._select()

    async def update(self, invoice: Invoice) -> Optional[Invoice]:
        return await self._replace(invoice)

    async def delete(self, invoice_id: int) -> bool:
        return await self._remove(invoice_id)


class SqlAlchemyAccountRepository(_SqlAlchemyRepository, AccountRepository):
    row_class = AccountRow
    entity_class = AccountInDB
    id_field = "user_id"

    async def save(self, account: AccountInDB) -> AccountInDB:
        return await self._insert(account)

    async def find_by_id(self, user_id: int) -> Optional[AccountInDB]:
        return await self._get(user_id)

    async def find_by_username(self, username: str) -> Optional[AccountInDB]:
        return await self._first(AccountRow.username == username)

    async def find_by_guest_id(self, guest_id: int) -> Optional[AccountInDB]:
        return await self._first(AccountRow.guest_id == guest_id)

    async def find_by_employee_id(self, employee_id: int) -> Optional[AccountInDB]:
        return await self._first(AccountRow.employee_id == employee_id)

    async def find_all(self) -> List[AccountInDB]:
        return await self._select()

    async def update(self, account: AccountInDB) -> Optional[AccountInDB]:
        return await self._replace(account)

    async def delete(self, user_id: int) -> bool:
        return await self._remove(user_id)


class SqlAlchemyEntityStore(EntityStore):
    """EntityStore backed by a relational database through SQLAlchemy"""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        session_factory = build_session_factory(engine)
        super().__init__(
            rooms=SqlAlchemyRoomRepository(session_factory),
            guests=SqlAlchemyGuestRepository(session_factory),
            employees=SqlAlchemyEmployeeRepository(session_factory),
            schedules=SqlAlchemyCleaningScheduleRepository(session_factory),
            invoices=SqlAlchemyInvoiceRepository(session_factory),
            accounts=SqlAlchemyAccountRepository(session_factory)
        )

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "SqlAlchemyEntityStore":
        return cls(build_engine(database_url, echo=echo))

    async def initialize(self) -> None:
        await create_all(self.engine)
        logger.info("Database tables ready")

    async def close(self) -> None:
        await self.engine.dispose()
