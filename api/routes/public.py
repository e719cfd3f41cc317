"""Health check and enum reference endpoints"""
from fastapi import APIRouter

from domain.enums import RoomCategory, UserRole, DayOfWeek
from domain.policies import capacity_for

router = APIRouter()


@router.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}


@router.get("/api/enums/room-category", tags=["Enum Reference"])
async def get_room_categories():
    """Get all RoomCategory enum values with their capacity"""
    return {
        "values": {item.name: capacity_for(item) for item in RoomCategory},
        "description": "Room category values mapped to maximum residents: SINGLE=1, DOUBLE=2, TRIPLE=3"
    }


@router.get("/api/enums/role", tags=["Enum Reference"])
async def get_roles():
    """Get all UserRole enum values"""
    return {
        "values": [item.name for item in UserRole],
        "description": "User role values: ADMIN, WORKER, CLIENT"
    }


@router.get("/api/enums/day-of-week", tags=["Enum Reference"])
async def get_days_of_week():
    """Get all DayOfWeek enum values"""
    return {
        "values": [item.name for item in DayOfWeek],
        "description": "Day of week values: MONDAY through SUNDAY"
    }
