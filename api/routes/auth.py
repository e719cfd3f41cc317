"""Login endpoints"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm

from api.dependencies import get_account_service, get_app_settings, get_current_active_user
from api.responses import user_to_response
from api.schemas import LoginRequest, Token, UserResponse
from application.services import AccountService
from config import Settings
from domain.auth import AccountInDB
from infrastructure.security import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


async def _issue_token(service: AccountService, settings: Settings, username: str, password: str) -> Token:
    user = await service.authenticate(username, password)
    if not user:
        raise HTTPException(
            status_code=401,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_access_token(data={
        "sub": user.username,
        "role": user.role.value,
        "guest_id": user.guest_id,
        "employee_id": user.employee_id,
        "full_name": await service.get_display_name(user),
    }, settings=settings)
    logger.info("User %s logged in as %s", user.username, user.role.value)
    return Token(access_token=access_token, token_type="bearer")


@router.post("/login", response_model=Token)
async def login(
    request: LoginRequest,
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings)
):
    """JSON login used by the back office UI"""
    return await _issue_token(service, settings, request.username, request.password)


@router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings)
):
    return await _issue_token(service, settings, form_data.username, form_data.password)


@router.get("/users/me", response_model=UserResponse)
async def read_users_me(
    current_user: AccountInDB = Depends(get_current_active_user),
    service: AccountService = Depends(get_account_service)
):
    return user_to_response(current_user, await service.get_display_name(current_user))
