"""API Dependencies - Authentication and service wiring"""
from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from application.billing import BillingEngine, ResidencyReconciler, ReconciliationService
from application.locks import KeyedLocks
from application.reports import OccupancyReportBuilder
from application.services import (
    RoomService, GuestService, EmployeeService, CleaningScheduleService,
    InvoiceService, AccountService
)
from config import Settings
from domain.auth import AccountInDB
from domain.clock import Clock
from domain.enums import UserRole, DayOfWeek
from domain.repositories import EntityStore
from infrastructure.security import decode_access_token
from api.schemas import TokenData

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")


# ============================================================================
# APPLICATION STATE
# ============================================================================

def get_store(request: Request) -> EntityStore:
    return request.app.state.store

def get_clock(request: Request) -> Clock:
    return request.app.state.clock

def get_locks(request: Request) -> KeyedLocks:
    return request.app.state.locks

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


# ============================================================================
# SERVICES
# ============================================================================

def get_room_service(store: EntityStore = Depends(get_store)) -> RoomService:
    return RoomService(store)

def get_guest_service(
    store: EntityStore = Depends(get_store),
    locks: KeyedLocks = Depends(get_locks)
) -> GuestService:
    return GuestService(store, locks)

def get_employee_service(store: EntityStore = Depends(get_store)) -> EmployeeService:
    return EmployeeService(store)

def get_schedule_service(store: EntityStore = Depends(get_store)) -> CleaningScheduleService:
    return CleaningScheduleService(store)

def get_invoice_service(store: EntityStore = Depends(get_store)) -> InvoiceService:
    return InvoiceService(store)

def get_account_service(store: EntityStore = Depends(get_store)) -> AccountService:
    return AccountService(store)

def get_billing_engine(
    store: EntityStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    locks: KeyedLocks = Depends(get_locks),
    settings: Settings = Depends(get_app_settings)
) -> BillingEngine:
    return BillingEngine(store, clock, locks, window_days=settings.BILLING_WINDOW_DAYS)

def get_reconciliation_service(
    store: EntityStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    billing: BillingEngine = Depends(get_billing_engine)
) -> ReconciliationService:
    return ReconciliationService(ResidencyReconciler(store, clock), billing)

def get_report_builder(
    store: EntityStore = Depends(get_store),
    clock: Clock = Depends(get_clock)
) -> OccupancyReportBuilder:
    return OccupancyReportBuilder(store, clock)


def day_of_week_param(day_of_week: str = Query(..., description="MONDAY..SUNDAY, any case")) -> DayOfWeek:
    try:
        return DayOfWeek.parse(day_of_week)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


# ============================================================================
# AUTHENTICATION
# ============================================================================

async def get_current_user(
    token: str = Depends(oauth2_scheme),
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings)
) -> AccountInDB:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token, settings)
        username: str = payload.get("sub")
        if username is None:
            raise credentials_exception
        token_data = TokenData(username=username)
    except JWTError:
        raise credentials_exception

    user = await service.get_account_by_username(token_data.username)
    if user is None:
        raise credentials_exception
    return user

async def get_current_active_user(current_user: AccountInDB = Depends(get_current_user)) -> AccountInDB:
    if current_user.disabled:
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user

def require_role(*roles: UserRole):
    """Dependency admitting only users holding one of roles"""
    async def role_checker(current_user: AccountInDB = Depends(get_current_active_user)) -> AccountInDB:
        if current_user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not enough permissions")
        return current_user
    return role_checker
