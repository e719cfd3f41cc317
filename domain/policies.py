"""Domain Policies - Room occupancy rules"""
from typing import Dict, Union

from domain.enums import RoomCategory


MAX_OCCUPANTS: Dict[RoomCategory, int] = {
    RoomCategory.SINGLE: 1,
    RoomCategory.DOUBLE: 2,
    RoomCategory.TRIPLE: 3,
}


def capacity_for(category: Union[RoomCategory, str]) -> int:
    """Maximum simultaneous residents for a room category, 0 when unknown"""
    try:
        return MAX_OCCUPANTS.get(RoomCategory(category), 0)
    except ValueError:
        return 0


def can_admit(current_resident_count: int, category: Union[RoomCategory, str]) -> bool:
    """Whether one more resident fits.

    The count must cover the other residents only: when a guest is being
    moved or edited, that guest is left out of ``current_resident_count``.
    """
    return current_resident_count < capacity_for(category)
