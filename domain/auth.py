"""Domain Entities - Auth"""
from pydantic import BaseModel
from typing import Optional

from domain.enums import UserRole


class Account(BaseModel):
    """Login account of an admin, a worker or a hotel client"""
    user_id: Optional[int] = None
    username: str
    role: UserRole
    guest_id: Optional[int] = None
    employee_id: Optional[int] = None
    disabled: bool = False

    class Config:
        from_attributes = True


class AccountInDB(Account):
    """Account with hashed password for DB storage"""
    hashed_password: str
