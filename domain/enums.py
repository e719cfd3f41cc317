"""Domain Enums"""
from enum import Enum


class RoomCategory(str, Enum):
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    TRIPLE = "TRIPLE"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    WORKER = "WORKER"
    CLIENT = "CLIENT"


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def parse(cls, value: str) -> "DayOfWeek":
        """Case-insensitive lookup, raises ValueError for unknown days"""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown day of week: {value}")
