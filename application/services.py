"""Application Services - Business use cases"""
import logging
import string
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from pydantic import BaseModel

from application.locks import KeyedLocks
from domain.auth import Account, AccountInDB
from domain.entities import Room, Guest, Employee, CleaningSchedule, Invoice
from domain.enums import RoomCategory, UserRole, DayOfWeek
from domain.exceptions import NotFound, Conflict, CapacityExceeded, PermissionDenied
from domain.policies import can_admit, capacity_for
from domain.repositories import EntityStore
from infrastructure.security import get_password_hash, verify_password, generate_password

logger = logging.getLogger(__name__)


class ProvisionedCredentials(BaseModel):
    """Login handed out once when an account is provisioned"""
    login: str
    password: str


class RoomService:
    """Service for Room use cases"""

    def __init__(self, store: EntityStore):
        self.store = store

    async def create_room(
        self,
        room_number: int,
        floor: int,
        category: RoomCategory,
        price_per_day: Decimal,
        phone_number: str
    ) -> Room:
        room = Room(
            room_number=room_number,
            floor=floor,
            category=category,
            price_per_day=price_per_day,
            phone_number=phone_number
        )
        return await self.store.rooms.save(room)

    async def get_room(self, room_id: int) -> Optional[Room]:
        return await self.store.rooms.find_by_id(room_id)

    async def get_all_rooms(self) -> List[Room]:
        return await self.store.rooms.find_all()

    async def update_room(
        self,
        room_id: int,
        room_number: int,
        floor: int,
        category: RoomCategory,
        price_per_day: Decimal,
        phone_number: str
    ) -> Room:
        room = Room(
            room_id=room_id,
            room_number=room_number,
            floor=floor,
            category=category,
            price_per_day=price_per_day,
            phone_number=phone_number
        )
        updated = await self.store.rooms.update(room)
        if updated is None:
            raise NotFound("Room", room_id)
        return updated

    async def delete_room(self, room_id: int) -> int:
        """Delete the room; its guests stop being residents. Returns guests touched."""
        if not await self.store.rooms.delete(room_id):
            raise NotFound("Room", room_id)
        touched = await self.store.guests.set_resident_by_room(room_id, False)
        logger.info("Room %s deleted, %d guest(s) marked non-resident", room_id, touched)
        return touched

    async def get_free_rooms(self) -> Tuple[List[Room], List[Room]]:
        """All rooms and the subset without any current resident"""
        rooms = await self.store.rooms.find_all()
        occupied = {g.room_id for g in await self.store.guests.find_residents() if g.room_id is not None}
        return rooms, [r for r in rooms if r.room_id not in occupied]


class GuestService:
    """Service for Guest (hotel client) use cases"""

    def __init__(self, store: EntityStore, locks: Optional[KeyedLocks] = None):
        self.store = store
        self.locks = locks or KeyedLocks()

    async def admit_guest(self, room_id: int, exclude_guest_id: Optional[int] = None) -> Room:
        """Check that one more resident fits in the room.

        Counts the room's current residents, leaving out exclude_guest_id, and
        raises CapacityExceeded with the figures when the room is full.
        """
        room = await self.store.rooms.find_by_id(room_id)
        if room is None:
            raise NotFound("Room", room_id)

        current = len([
            g for g in await self.store.guests.find_by_room(room_id)
            if g.is_resident and g.guest_id != exclude_guest_id
        ])
        if not can_admit(current, room.category):
            raise CapacityExceeded(
                room_number=room.room_number,
                category=room.category.value,
                capacity=capacity_for(room.category),
                current=current
            )
        return room

    async def create_guest(
        self,
        passport_number: str,
        full_name: str,
        city: str,
        check_in_date: date,
        days_reserved: int,
        room_id: int
    ) -> Tuple[Guest, ProvisionedCredentials]:
        """Admit a new resident guest and provision their client account.

        The guest row is removed again when the account cannot be saved, so a
        guest never exists without a login.
        """
        async with self.locks.hold(("passport", passport_number.strip())):
            await self._ensure_passport_free(passport_number)

            async with self.locks.hold(("room", room_id)):
                await self.admit_guest(room_id)
                guest = await self.store.guests.save(Guest.create(
                    passport_number=passport_number,
                    full_name=full_name,
                    city=city,
                    check_in_date=check_in_date,
                    days_reserved=days_reserved,
                    room_id=room_id
                ))

        try:
            credentials = ProvisionedCredentials(
                login=await self._free_client_login(guest.guest_id),
                password=generate_password(8, string.ascii_lowercase + string.digits)
            )
            await self.store.accounts.save(AccountInDB(
                username=credentials.login,
                hashed_password=get_password_hash(credentials.password),
                role=UserRole.CLIENT,
                guest_id=guest.guest_id
            ))
        except Exception:
            logger.error("Could not provision an account for guest %s, removing the guest", guest.guest_id)
            await self.store.guests.delete(guest.guest_id)
            raise
        logger.info("Guest %s admitted to room %s with login %s", guest.guest_id, room_id, credentials.login)
        return guest, credentials

    async def get_guest(self, guest_id: int) -> Optional[Guest]:
        return await self.store.guests.find_by_id(guest_id)

    async def get_all_guests(self) -> List[Guest]:
        return await self.store.guests.find_all()

    async def get_guests_from_city(self, city: str) -> List[Guest]:
        """Guests whose home city matches, ignoring case"""
        wanted = city.strip().casefold()
        return [g for g in await self.store.guests.find_all() if g.city.casefold() == wanted]

    async def get_room_residents(self, room_id: int) -> List[Guest]:
        return [g for g in await self.store.guests.find_by_room(room_id) if g.is_resident]

    async def get_guests_checking_out(self, checkout_date: date) -> List[Guest]:
        return await self.store.guests.find_by_checkout_date(checkout_date)

    async def update_guest(
        self,
        guest_id: int,
        passport_number: str,
        full_name: str,
        city: str,
        check_in_date: date,
        days_reserved: int,
        room_id: int,
        is_resident: Optional[bool] = None
    ) -> Guest:
        """Edit a guest, re-checking capacity when the edit moves them into a room"""
        guest = await self.store.guests.find_by_id(guest_id)
        if guest is None:
            raise NotFound("Guest", guest_id)

        will_be_resident = guest.is_resident if is_resident is None else is_resident

        async with self.locks.hold(("passport", passport_number.strip())):
            if passport_number.strip() != guest.passport_number:
                await self._ensure_passport_free(passport_number)

            async with self.locks.hold(("room", room_id)):
                if guest.is_transfer_to(room_id, will_be_resident):
                    await self.admit_guest(room_id, exclude_guest_id=guest_id)

                guest.apply_changes(
                    passport_number=passport_number,
                    full_name=full_name,
                    city=city,
                    check_in_date=check_in_date,
                    days_reserved=days_reserved,
                    room_id=room_id,
                    is_resident=is_resident
                )
                updated = await self.store.guests.update(guest)

        if updated is None:
            raise NotFound("Guest", guest_id)
        return updated

    async def delete_guest(self, guest_id: int) -> None:
        """Delete a guest together with their invoices and client account"""
        if await self.store.guests.find_by_id(guest_id) is None:
            raise NotFound("Guest", guest_id)

        for invoice in await self.store.invoices.find_by_guest(guest_id):
            await self.store.invoices.delete(invoice.invoice_id)
        account = await self.store.accounts.find_by_guest_id(guest_id)
        if account is not None:
            await self.store.accounts.delete(account.user_id)
        else:
            logger.warning("No account found for guest %s", guest_id)
        await self.store.guests.delete(guest_id)

    async def _ensure_passport_free(self, passport_number: str) -> None:
        if await self.store.guests.find_by_passport(passport_number.strip()) is not None:
            raise Conflict(f"A guest with passport {passport_number} already exists")

    async def _free_client_login(self, guest_id: int) -> str:
        """client{id}, or client{id}_2, client{id}_3, ... when an admin already took it"""
        login = f"client{guest_id}"
        suffix = 1
        while await self.store.accounts.find_by_username(login) is not None:
            suffix += 1
            login = f"client{guest_id}_{suffix}"
        return login


class EmployeeService:
    """Service for Employee use cases"""

    def __init__(self, store: EntityStore):
        self.store = store

    async def create_employee(self, full_name: str, floor: int) -> Tuple[Employee, ProvisionedCredentials]:
        """Create an employee with a worker account"""
        employee = Employee(full_name=full_name.strip(), floor=floor)
        login = employee.default_login()
        if await self.store.accounts.find_by_username(login) is not None:
            raise Conflict(f"Login {login} is already taken")

        employee = await self.store.employees.save(employee)
        credentials = ProvisionedCredentials(
            login=login,
            password=generate_password(8, string.ascii_lowercase)
        )
        await self.store.accounts.save(AccountInDB(
            username=login,
            hashed_password=get_password_hash(credentials.password),
            role=UserRole.WORKER,
            employee_id=employee.employee_id
        ))
        logger.info("Employee %s created with login %s", employee.employee_id, login)
        return employee, credentials

    async def get_employee(self, employee_id: int) -> Optional[Employee]:
        return await self.store.employees.find_by_id(employee_id)

    async def get_all_employees(self) -> List[Employee]:
        return await self.store.employees.find_all()

    async def update_employee(self, employee_id: int, full_name: str, floor: int) -> Employee:
        updated = await self.store.employees.update(
            Employee(employee_id=employee_id, full_name=full_name.strip(), floor=floor)
        )
        if updated is None:
            raise NotFound("Employee", employee_id)
        return updated

    async def delete_employee(self, employee_id: int) -> None:
        """Delete an employee with their account and cleaning schedules"""
        if await self.store.employees.find_by_id(employee_id) is None:
            raise NotFound("Employee", employee_id)

        account = await self.store.accounts.find_by_employee_id(employee_id)
        if account is not None:
            await self.store.accounts.delete(account.user_id)
        for schedule in await self.store.schedules.find_by_employee(employee_id):
            await self.store.schedules.delete(schedule.schedule_id)
        await self.store.employees.delete(employee_id)


class CleaningScheduleService:
    """Service for cleaning assignments"""

    def __init__(self, store: EntityStore):
        self.store = store

    async def create_schedule(self, employee_id: int, floor: int, day_of_week: DayOfWeek) -> CleaningSchedule:
        schedule = CleaningSchedule(employee_id=employee_id, floor=floor, day_of_week=day_of_week)
        await self._validate(schedule)
        return await self.store.schedules.save(schedule)

    async def get_schedule(self, schedule_id: int) -> Optional[CleaningSchedule]:
        return await self.store.schedules.find_by_id(schedule_id)

    async def get_all_schedules(self) -> List[CleaningSchedule]:
        return await self.store.schedules.find_all()

    async def get_employee_schedule(self, employee_id: int) -> List[CleaningSchedule]:
        return await self.store.schedules.find_by_employee(employee_id)

    async def update_schedule(
        self,
        schedule_id: int,
        employee_id: int,
        floor: int,
        day_of_week: DayOfWeek
    ) -> CleaningSchedule:
        if await self.store.schedules.find_by_id(schedule_id) is None:
            raise NotFound("Schedule", schedule_id)
        schedule = CleaningSchedule(
            schedule_id=schedule_id, employee_id=employee_id, floor=floor, day_of_week=day_of_week
        )
        await self._validate(schedule)
        updated = await self.store.schedules.update(schedule)
        if updated is None:
            raise NotFound("Schedule", schedule_id)
        return updated

    async def delete_schedule(self, schedule_id: int) -> None:
        if not await self.store.schedules.delete(schedule_id):
            raise NotFound("Schedule", schedule_id)

    async def get_cleaner_for_floor(
        self, floor: int, day_of_week: DayOfWeek
    ) -> Tuple[Employee, CleaningSchedule]:
        """Employee cleaning the floor on the given day, with the matching schedule"""
        schedule = next(
            (s for s in await self.store.schedules.find_all()
             if s.floor == floor and s.day_of_week == day_of_week),
            None
        )
        if schedule is None:
            raise NotFound("Cleaning schedule", f"for floor {floor} on {day_of_week.value}")
        employee = await self.store.employees.find_by_id(schedule.employee_id)
        if employee is None:
            raise NotFound("Employee", schedule.employee_id)
        return employee, schedule

    async def get_cleaner_for_room(
        self, room_id: int, day_of_week: DayOfWeek
    ) -> Tuple[Employee, CleaningSchedule]:
        room = await self.store.rooms.find_by_id(room_id)
        if room is None:
            raise NotFound("Room", room_id)
        return await self.get_cleaner_for_floor(room.floor, day_of_week)

    async def get_cleaner_for_guest(
        self, guest_id: int, day_of_week: DayOfWeek
    ) -> Tuple[Employee, CleaningSchedule]:
        guest = await self.store.guests.find_by_id(guest_id)
        if guest is None or guest.room_id is None:
            raise NotFound("Guest with a room", guest_id)
        return await self.get_cleaner_for_room(guest.room_id, day_of_week)

    async def _validate(self, schedule: CleaningSchedule) -> None:
        if await self.store.employees.find_by_id(schedule.employee_id) is None:
            raise NotFound("Employee", schedule.employee_id)
        for other in await self.store.schedules.find_all():
            if schedule.collides_with(other):
                raise Conflict(
                    f"Floor {schedule.floor} already has a cleaner on {schedule.day_of_week.value} "
                    f"(schedule {other.schedule_id})"
                )


class InvoiceService:
    """Service for invoice bookkeeping; issuing lives in BillingEngine"""

    def __init__(self, store: EntityStore):
        self.store = store

    async def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        return await self.store.invoices.find_by_id(invoice_id)

    async def get_all_invoices(self) -> List[Invoice]:
        return await self.store.invoices.find_all()

    async def get_guest_invoices(self, guest_id: int) -> List[Invoice]:
        return await self.store.invoices.find_by_guest(guest_id)

    async def update_invoice(
        self,
        invoice_id: int,
        guest_id: int,
        total_amount: Decimal,
        issue_date: date
    ) -> Invoice:
        if await self.store.guests.find_by_id(guest_id) is None:
            raise NotFound("Guest", guest_id)
        updated = await self.store.invoices.update(Invoice(
            invoice_id=invoice_id, guest_id=guest_id, total_amount=total_amount, issue_date=issue_date
        ))
        if updated is None:
            raise NotFound("Invoice", invoice_id)
        return updated

    async def delete_invoice(self, invoice_id: int) -> None:
        if not await self.store.invoices.delete(invoice_id):
            raise NotFound("Invoice", invoice_id)


class AccountService:
    """Service for login accounts"""

    def __init__(self, store: EntityStore):
        self.store = store

    async def authenticate(self, username: str, password: str) -> Optional[AccountInDB]:
        account = await self.store.accounts.find_by_username(username)
        if account is None:
            logger.warning("Login attempt for unknown user %s", username)
            return None
        if not verify_password(password, account.hashed_password):
            logger.warning("Incorrect password for user %s", username)
            return None
        return account

    async def get_display_name(self, account: Account) -> Optional[str]:
        """Full name of the guest or employee behind the account"""
        if account.role == UserRole.ADMIN:
            return "Administrator"
        if account.role == UserRole.CLIENT and account.guest_id is not None:
            guest = await self.store.guests.find_by_id(account.guest_id)
            return guest.full_name if guest else None
        if account.role == UserRole.WORKER and account.employee_id is not None:
            employee = await self.store.employees.find_by_id(account.employee_id)
            return employee.full_name if employee else None
        return None

    async def get_account(self, user_id: int) -> Optional[AccountInDB]:
        return await self.store.accounts.find_by_id(user_id)

    async def get_account_by_username(self, username: str) -> Optional[AccountInDB]:
        return await self.store.accounts.find_by_username(username)

    async def get_all_accounts(self) -> List[AccountInDB]:
        return await self.store.accounts.find_all()

    async def create_account(self, username: str, password: str, role: UserRole) -> AccountInDB:
        if role == UserRole.ADMIN:
            raise PermissionDenied("Cannot create another admin")
        await self._ensure_username_free(username)
        return await self.store.accounts.save(AccountInDB(
            username=username,
            hashed_password=get_password_hash(password),
            role=role
        ))

    async def update_account(self, user_id: int, username: str, password: str, role: UserRole) -> AccountInDB:
        account = await self.store.accounts.find_by_id(user_id)
        if account is None:
            raise NotFound("User", user_id)
        if role != account.role and UserRole.ADMIN in (role, account.role):
            raise PermissionDenied("Cannot change the admin role")
        if username != account.username:
            await self._ensure_username_free(username)

        account.username = username
        account.hashed_password = get_password_hash(password)
        account.role = role
        updated = await self.store.accounts.update(account)
        if updated is None:
            raise NotFound("User", user_id)
        return updated

    async def delete_account(self, user_id: int) -> None:
        """Delete an account and the guest or employee it belongs to"""
        account = await self.store.accounts.find_by_id(user_id)
        if account is None:
            raise NotFound("User", user_id)

        if account.role == UserRole.ADMIN:
            raise PermissionDenied("Cannot delete admin accounts")
        if account.role == UserRole.CLIENT and account.guest_id is not None:
            await GuestService(self.store).delete_guest(account.guest_id)
        elif account.role == UserRole.WORKER:
            if account.employee_id is None:
                raise NotFound("Employee for user", user_id)
            await EmployeeService(self.store).delete_employee(account.employee_id)
        else:
            await self.store.accounts.delete(user_id)

    async def seed_admin(self, username: str, password: str) -> AccountInDB:
        """Create the singleton admin account unless one already exists"""
        for account in await self.store.accounts.find_all():
            if account.role == UserRole.ADMIN:
                return account
        admin = await self.store.accounts.save(AccountInDB(
            username=username,
            hashed_password=get_password_hash(password),
            role=UserRole.ADMIN
        ))
        logger.info("Seeded admin account %s", username)
        return admin

    async def _ensure_username_free(self, username: str) -> None:
        if await self.store.accounts.find_by_username(username) is not None:
            raise Conflict(f"Login {username} is already taken")
