"""Quarterly occupancy & revenue report"""
import logging
from pydantic import BaseModel
from datetime import date
from decimal import Decimal
from typing import List, Optional

from domain.clock import Clock
from domain.enums import RoomCategory
from domain.repositories import EntityStore
from domain.value_objects import ReportingPeriod

logger = logging.getLogger(__name__)


class RoomOccupancy(BaseModel):
    room_id: int
    room_number: int
    floor: int
    category: RoomCategory
    occupied_days: int
    free_days: int
    total_days: int

    class Config:
        frozen = True


class QuarterlyReport(BaseModel):
    period_start: date
    period_end: date
    total_guests: int
    total_revenue: Decimal
    room_occupancy: List[RoomOccupancy]

    class Config:
        frozen = True


class OccupancyReportBuilder:
    """Aggregates guest stays and invoices over the last completed quarter"""

    def __init__(self, store: EntityStore, clock: Clock):
        self.store = store
        self.clock = clock

    async def build_quarterly_report(self, reference_date: Optional[date] = None) -> QuarterlyReport:
        reference_date = reference_date or self.clock.today()
        period = ReportingPeriod.last_completed_quarter(reference_date)
        total_days = period.total_days

        guests = [g for g in await self.store.guests.find_all() if g.stay.overlaps(period)]
        total_guests = len({g.guest_id for g in guests})

        total_revenue = sum(
            (i.total_amount for i in await self.store.invoices.find_all() if period.contains(i.issue_date)),
            Decimal("0")
        )

        occupancy = []
        for room in await self.store.rooms.find_all():
            # Overlapping stays in one room add up; the clamp keeps free days non-negative
            occupied = sum(g.stay.days_within(period) for g in guests if g.room_id == room.room_id)
            occupied = min(occupied, total_days)
            occupancy.append(RoomOccupancy(
                room_id=room.room_id,
                room_number=room.room_number,
                floor=room.floor,
                category=room.category,
                occupied_days=occupied,
                free_days=total_days - occupied,
                total_days=total_days
            ))

        logger.info(
            "Quarterly report %s..%s: %d guest(s), revenue %s",
            period.start.isoformat(), period.end.isoformat(), total_guests, format(total_revenue, "f")
        )
        return QuarterlyReport(
            period_start=period.start,
            period_end=period.end,
            total_guests=total_guests,
            total_revenue=total_revenue,
            room_occupancy=occupancy
        )
