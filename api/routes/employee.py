"""Self-service endpoints for cleaning staff"""
from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_schedule_service, require_role
from api.responses import schedule_to_response
from api.schemas import ScheduleResponse
from application.services import CleaningScheduleService
from domain.auth import AccountInDB
from domain.enums import UserRole
from domain.exceptions import InvalidState

router = APIRouter(prefix="/employee", tags=["Employee"])


@router.get("/my-schedule", response_model=List[ScheduleResponse])
async def get_my_schedule(
    current_user: AccountInDB = Depends(require_role(UserRole.WORKER)),
    service: CleaningScheduleService = Depends(get_schedule_service)
):
    """Cleaning assignments of the logged-in employee"""
    if current_user.employee_id is None:
        raise InvalidState(f"Account {current_user.username} is not linked to an employee")
    schedules = await service.get_employee_schedule(current_user.employee_id)
    return [schedule_to_response(s) for s in schedules]
