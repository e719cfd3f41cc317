"""Back office endpoints (ADMIN only)

Handlers that read or change guest residency call
``reconcile_and_bill()`` first so lapsed stays are closed and invoiced
before the response is built.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from api.dependencies import (
    get_room_service, get_guest_service, get_employee_service, get_schedule_service,
    get_invoice_service, get_account_service, get_billing_engine,
    get_reconciliation_service, get_report_builder, day_of_week_param, require_role
)
from api.responses import (
    room_to_response, guest_to_response, employee_to_response, schedule_to_response,
    cleaner_to_response, invoice_to_response, report_to_response, user_to_response
)
from api.schemas import (
    # Rooms
    RoomRequest, RoomResponse, FreeRoomsResponse,
    # Guests
    GuestRequest, UpdateGuestRequest, GuestResponse, GuestCreatedResponse, CredentialsResponse,
    # Staff
    EmployeeRequest, EmployeeResponse, EmployeeCreatedResponse,
    ScheduleRequest, ScheduleResponse, CleanerResponse,
    # Invoices & reports
    CreateInvoiceRequest, UpdateInvoiceRequest, InvoiceResponse, QuarterlyReportResponse,
    # Users
    UserRequest, UserResponse
)
from application.billing import BillingEngine, ReconciliationService
from application.reports import OccupancyReportBuilder
from application.services import (
    RoomService, GuestService, EmployeeService, CleaningScheduleService,
    InvoiceService, AccountService
)
from domain.enums import UserRole, DayOfWeek

router = APIRouter(prefix="/admin", dependencies=[Depends(require_role(UserRole.ADMIN))])


# ============================================================================
# CLIENT (GUEST) ENDPOINTS
# ============================================================================

@router.get("/clients", response_model=List[GuestResponse], tags=["Clients"])
async def get_all_clients(
    service: GuestService = Depends(get_guest_service),
    reconciliation: ReconciliationService = Depends(get_reconciliation_service)
):
    """Get all guests, closing lapsed stays first"""
    await reconciliation.reconcile_and_bill()
    return [guest_to_response(g) for g in await service.get_all_guests()]

@router.get("/clients/from", response_model=List[GuestResponse], tags=["Clients"])
async def get_clients_from_city(
    city: str = Query(..., min_length=1),
    service: GuestService = Depends(get_guest_service),
    reconciliation: ReconciliationService = Depends(get_reconciliation_service)
):
    """Get guests from a city (case-insensitive)"""
    await reconciliation.reconcile_and_bill()
    return [guest_to_response(g) for g in await service.get_guests_from_city(city)]

@router.get("/clients/checking-out", response_model=List[GuestResponse], tags=["Clients"])
async def get_clients_checking_out(
    checkout_date: date,
    service: GuestService = Depends(get_guest_service),
    reconciliation: ReconciliationService = Depends(get_reconciliation_service)
):
    """Guests whose reservation ends on checkout_date"""
    await reconciliation.reconcile_and_bill()
    return [guest_to_response(g) for g in await service.get_guests_checking_out(checkout_date)]

@router.get("/clients/{guest_id}", response_model=GuestResponse, tags=["Clients"])
async def get_client(guest_id: int, service: GuestService = Depends(get_guest_service)):
    guest = await service.get_guest(guest_id)
    if not guest:
        raise HTTPException(status_code=404, detail="Client not found")
    return guest_to_response(guest)

@router.get("/clients/{guest_id}/cleaner", response_model=CleanerResponse, tags=["Clients"])
async def get_client_cleaner(
    guest_id: int,
    day_of_week: DayOfWeek = Depends(day_of_week_param),
    service: CleaningScheduleService = Depends(get_schedule_service)
):
    """Who cleans the guest's room on the given day"""
    employee, schedule = await service.get_cleaner_for_guest(guest_id, day_of_week)
    return cleaner_to_response(employee, schedule)

@router.post("/clients", response_model=GuestCreatedResponse, status_code=201, tags=["Clients"])
async def create_client(
    request: GuestRequest,
    service: GuestService = Depends(get_guest_service),
    reconciliation: ReconciliationService = Depends(get_reconciliation_service)
):
    """Admit a guest into a room; returns the generated client login"""
    await reconciliation.reconcile_and_bill()
    guest, credentials = await service.create_guest(
        passport_number=request.passport_number,
        full_name=request.full_name,
        city=request.city,
        check_in_date=request.check_in_date,
        days_reserved=request.days_reserved,
        room_id=request.room_id
    )
    return GuestCreatedResponse(
        guest=guest_to_response(guest),
        credentials=CredentialsResponse(**credentials.model_dump())
    )

@router.put("/clients/{guest_id}", response_model=GuestResponse, tags=["Clients"])
async def update_client(
    guest_id: int,
    request: UpdateGuestRequest,
    service: GuestService = Depends(get_guest_service),
    reconciliation: ReconciliationService = Depends(get_reconciliation_service)
):
    await reconciliation.reconcile_and_bill()
    guest = await service.update_guest(
        guest_id=guest_id,
        passport_number=request.passport_number,
        full_name=request.full_name,
        city=request.city,
        check_in_date=request.check_in_date,
        days_reserved=request.days_reserved,
        room_id=request.room_id,
        is_resident=request.is_resident
    )
    return guest_to_response(guest)

@router.delete("/clients/{guest_id}", status_code=204, tags=["Clients"])
async def delete_client(guest_id: int, service: GuestService = Depends(get_guest_service)):
    """Delete a guest with their invoices and login"""
    await service.delete_guest(guest_id)
    return Response(status_code=204)

@router.post("/clients/{guest_id}/invoice", response_model=InvoiceResponse, status_code=201, tags=["Clients"])
async def create_client_invoice(guest_id: int, billing: BillingEngine = Depends(get_billing_engine)):
    """Invoice the guest's stay, dated today"""
    return invoice_to_response(await billing.create_invoice_for_guest(guest_id))


# ============================================================================
# ROOM ENDPOINTS
# ============================================================================

@router.get("/rooms", response_model=List[RoomResponse], tags=["Rooms"])
async def get_all_rooms(service: RoomService = Depends(get_room_service)):
    return [room_to_response(r) for r in await service.get_all_rooms()]

@router.get("/rooms/free", response_model=FreeRoomsResponse, tags=["Rooms"])
async def get_free_rooms(
    service: RoomService = Depends(get_room_service),
    reconciliation: ReconciliationService = Depends(get_reconciliation_service)
):
    """Rooms with no current resident"""
    await reconciliation.reconcile_and_bill()
    rooms, free = await service.get_free_rooms()
    return FreeRoomsResponse(
        total_rooms=len(rooms),
        free_rooms_count=len(free),
        free_rooms=[room_to_response(r) for r in free]
    )

@router.get("/rooms/{room_id}", response_model=RoomResponse, tags=["Rooms"])
async def get_room(room_id: int, service: RoomService = Depends(get_room_service)):
    room = await service.get_room(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room_to_response(room)

@router.get("/rooms/{room_id}/residents", response_model=List[GuestResponse], tags=["Rooms"])
async def get_room_residents(
    room_id: int,
    service: GuestService = Depends(get_guest_service),
    rooms: RoomService = Depends(get_room_service),
    reconciliation: ReconciliationService = Depends(get_reconciliation_service)
):
    await reconciliation.reconcile_and_bill()
    if not await rooms.get_room(room_id):
        raise HTTPException(status_code=404, detail="Room not found")
    return [guest_to_response(g) for g in await service.get_room_residents(room_id)]

@router.get("/rooms/{room_id}/cleaner", response_model=CleanerResponse, tags=["Rooms"])
async def get_room_cleaner(
    room_id: int,
    day_of_week: DayOfWeek = Depends(day_of_week_param),
    service: CleaningScheduleService = Depends(get_schedule_service)
):
    employee, schedule = await service.get_cleaner_for_room(room_id, day_of_week)
    return cleaner_to_response(employee, schedule)

@router.post("/rooms", response_model=RoomResponse, status_code=201, tags=["Rooms"])
async def create_room(request: RoomRequest, service: RoomService = Depends(get_room_service)):
    room = await service.create_room(
        room_number=request.room_number,
        floor=request.floor,
        category=request.category,
        price_per_day=request.price_per_day,
        phone_number=request.phone_number
    )
    return room_to_response(room)

@router.put("/rooms/{room_id}", response_model=RoomResponse, tags=["Rooms"])
async def update_room(room_id: int, request: RoomRequest, service: RoomService = Depends(get_room_service)):
    room = await service.update_room(
        room_id=room_id,
        room_number=request.room_number,
        floor=request.floor,
        category=request.category,
        price_per_day=request.price_per_day,
        phone_number=request.phone_number
    )
    return room_to_response(room)

@router.delete("/rooms/{room_id}", tags=["Rooms"])
async def delete_room(room_id: int, service: RoomService = Depends(get_room_service)):
    """Delete a room; its occupants become non-residents"""
    touched = await service.delete_room(room_id)
    return {"deleted": room_id, "guests_moved_out": touched}


# ============================================================================
# INVOICE ENDPOINTS
# ============================================================================

@router.get("/invoices", response_model=List[InvoiceResponse], tags=["Invoices"])
async def get_all_invoices(service: InvoiceService = Depends(get_invoice_service)):
    return [invoice_to_response(i) for i in await service.get_all_invoices()]

@router.get("/invoices/{invoice_id}", response_model=InvoiceResponse, tags=["Invoices"])
async def get_invoice(invoice_id: int, service: InvoiceService = Depends(get_invoice_service)):
    invoice = await service.get_invoice(invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice_to_response(invoice)

@router.post("/invoices", response_model=InvoiceResponse, status_code=201, tags=["Invoices"])
async def create_invoice(request: CreateInvoiceRequest, billing: BillingEngine = Depends(get_billing_engine)):
    invoice = await billing.create_invoice_for_guest(request.guest_id, issue_date=request.issue_date)
    return invoice_to_response(invoice)

@router.put("/invoices/{invoice_id}", response_model=InvoiceResponse, tags=["Invoices"])
async def update_invoice(
    invoice_id: int,
    request: UpdateInvoiceRequest,
    service: InvoiceService = Depends(get_invoice_service)
):
    invoice = await service.update_invoice(
        invoice_id=invoice_id,
        guest_id=request.guest_id,
        total_amount=request.total_amount,
        issue_date=request.issue_date
    )
    return invoice_to_response(invoice)

@router.delete("/invoices/{invoice_id}", status_code=204, tags=["Invoices"])
async def delete_invoice(invoice_id: int, service: InvoiceService = Depends(get_invoice_service)):
    await service.delete_invoice(invoice_id)
    return Response(status_code=204)


# ============================================================================
# EMPLOYEE ENDPOINTS
# ============================================================================

@router.get("/employees", response_model=List[EmployeeResponse], tags=["Employees"])
async def get_all_employees(service: EmployeeService = Depends(get_employee_service)):
    return [employee_to_response(e) for e in await service.get_all_employees()]

@router.get("/employees/{employee_id}", response_model=EmployeeResponse, tags=["Employees"])
async def get_employee(employee_id: int, service: EmployeeService = Depends(get_employee_service)):
    employee = await service.get_employee(employee_id)
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee_to_response(employee)

@router.post("/employees", response_model=EmployeeCreatedResponse, status_code=201, tags=["Employees"])
async def create_employee(request: EmployeeRequest, service: EmployeeService = Depends(get_employee_service)):
    """Create an employee; returns the generated worker login"""
    employee, credentials = await service.create_employee(request.full_name, request.floor)
    return EmployeeCreatedResponse(
        employee=employee_to_response(employee),
        credentials=CredentialsResponse(**credentials.model_dump())
    )

@router.put("/employees/{employee_id}", response_model=EmployeeResponse, tags=["Employees"])
async def update_employee(
    employee_id: int,
    request: EmployeeRequest,
    service: EmployeeService = Depends(get_employee_service)
):
    return employee_to_response(await service.update_employee(employee_id, request.full_name, request.floor))

@router.delete("/employees/{employee_id}", status_code=204, tags=["Employees"])
async def delete_employee(employee_id: int, service: EmployeeService = Depends(get_employee_service)):
    """Delete an employee with their login and cleaning schedules"""
    await service.delete_employee(employee_id)
    return Response(status_code=204)


# ============================================================================
# CLEANING SCHEDULE ENDPOINTS
# ============================================================================

@router.get("/schedules", response_model=List[ScheduleResponse], tags=["Schedules"])
async def get_all_schedules(service: CleaningScheduleService = Depends(get_schedule_service)):
    return [schedule_to_response(s) for s in await service.get_all_schedules()]

@router.get("/schedules/{schedule_id}", response_model=ScheduleResponse, tags=["Schedules"])
async def get_schedule(schedule_id: int, service: CleaningScheduleService = Depends(get_schedule_service)):
    schedule = await service.get_schedule(schedule_id)
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return schedule_to_response(schedule)

@router.post("/schedules", response_model=ScheduleResponse, status_code=201, tags=["Schedules"])
async def create_schedule(
    request: ScheduleRequest,
    service: CleaningScheduleService = Depends(get_schedule_service)
):
    schedule = await service.create_schedule(request.employee_id, request.floor, request.day_of_week)
    return schedule_to_response(schedule)

@router.put("/schedules/{schedule_id}", response_model=ScheduleResponse, tags=["Schedules"])
async def update_schedule(
    schedule_id: int,
    request: ScheduleRequest,
    service: CleaningScheduleService = Depends(get_schedule_service)
):
    schedule = await service.update_schedule(
        schedule_id, request.employee_id, request.floor, request.day_of_week
    )
    return schedule_to_response(schedule)

@router.delete("/schedules/{schedule_id}", status_code=204, tags=["Schedules"])
async def delete_schedule(schedule_id: int, service: CleaningScheduleService = Depends(get_schedule_service)):
    await service.delete_schedule(schedule_id)
    return Response(status_code=204)


# ============================================================================
# USER ENDPOINTS
# ============================================================================

@router.get("/users", response_model=List[UserResponse], tags=["Users"])
async def get_all_users(service: AccountService = Depends(get_account_service)):
    return [user_to_response(u) for u in await service.get_all_accounts()]

@router.get("/users/{user_id}", response_model=UserResponse, tags=["Users"])
async def get_user(user_id: int, service: AccountService = Depends(get_account_service)):
    user = await service.get_account(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user_to_response(user, await service.get_display_name(user))

@router.post("/users", response_model=UserResponse, status_code=201, tags=["Users"])
async def create_user(request: UserRequest, service: AccountService = Depends(get_account_service)):
    """Create a WORKER or CLIENT login; admins cannot be created"""
    return user_to_response(await service.create_account(request.username, request.password, request.role))

@router.put("/users/{user_id}", response_model=UserResponse, tags=["Users"])
async def update_user(user_id: int, request: UserRequest, service: AccountService = Depends(get_account_service)):
    user = await service.update_account(user_id, request.username, request.password, request.role)
    return user_to_response(user)

@router.delete("/users/{user_id}", status_code=204, tags=["Users"])
async def delete_user(user_id: int, service: AccountService = Depends(get_account_service)):
    """Delete a login with the guest or employee behind it"""
    await service.delete_account(user_id)
    return Response(status_code=204)


# ============================================================================
# REPORT ENDPOINTS
# ============================================================================

@router.get("/reports/quarterly", response_model=QuarterlyReportResponse, tags=["Reports"])
async def get_quarterly_report(
    reference_date: Optional[date] = None,
    builder: OccupancyReportBuilder = Depends(get_report_builder)
):
    """Occupancy and revenue for the last quarter completed before reference_date"""
    return report_to_response(await builder.build_quarterly_report(reference_date))
