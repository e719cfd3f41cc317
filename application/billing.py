"""Billing & residency reconciliation

Billing is driven by guest dates rather than events: there is no scheduler.
Handlers that read or write guests call
``ReconciliationService.reconcile_and_bill()`` first, which flips lapsed
residents to non-resident and invoices them on the spot.
"""
import logging
from pydantic import BaseModel, Field
from datetime import date
from typing import Dict, List, Optional

from application.locks import KeyedLocks
from domain.clock import Clock
from domain.entities import Guest, Invoice
from domain.exceptions import DomainError, NotFound, InvalidState, DuplicateInvoice
from domain.repositories import EntityStore
from domain.value_objects import days_between

logger = logging.getLogger(__name__)

BILLING_WINDOW_DAYS = 30


class ResidencyReconciler:
    """Flips guests whose reservation has lapsed to non-resident"""

    def __init__(self, store: EntityStore, clock: Clock):
        self.store = store
        self.clock = clock

    async def reconcile(self) -> List[Guest]:
        """Persist resident=False for every lapsed guest and return them.

        A guest is lapsed when still flagged resident and the checkout date
        lies before today. Running twice in a row changes nothing the second
        time.
        """
        today = self.clock.today()
        changed: List[Guest] = []
        for guest in await self.store.guests.find_residents():
            if not guest.has_lapsed(today):
                continue
            guest.move_out()
            updated = await self.store.guests.update(guest)
            if updated is not None:
                changed.append(updated)

        if changed:
            logger.info("Marked %d guest(s) as non-resident on %s", len(changed), today.isoformat())
        return changed


class BackfillResult(BaseModel):
    created: List[Invoice] = Field(default_factory=list)
    failures: Dict[int, str] = Field(default_factory=dict)


class ReconciliationOutcome(BaseModel):
    churned: List[Guest] = Field(default_factory=list)
    backfill: BackfillResult = Field(default_factory=BackfillResult)


class BillingEngine:
    """Computes stay charges and issues invoices, one per billing window"""

    def __init__(
        self,
        store: EntityStore,
        clock: Clock,
        locks: Optional[KeyedLocks] = None,
        window_days: int = BILLING_WINDOW_DAYS
    ):
        self.store = store
        self.clock = clock
        self.locks = locks or KeyedLocks()
        self.window_days = window_days

    async def create_invoice_for_guest(self, guest_id: int, issue_date: Optional[date] = None) -> Invoice:
        """Invoice the guest's stay: room price per day times days reserved.

        Raises NotFound when the guest is missing, InvalidState when the guest
        has no room or the room no longer exists, DuplicateInvoice when
        another invoice for the guest lies within the billing window.
        """
        guest = await self.store.guests.find_by_id(guest_id)
        if guest is None:
            raise NotFound("Guest", guest_id)
        if guest.room_id is None:
            raise InvalidState(f"Guest {guest_id} has no assigned room")

        room = await self.store.rooms.find_by_id(guest.room_id)
        if room is None:
            raise InvalidState(f"Room {guest.room_id} of guest {guest_id} no longer exists")

        issue_date = issue_date or self.clock.today()

        async with self.locks.hold(("guest", guest_id)):
            await self._ensure_no_recent_invoice(guest_id, issue_date)
            invoice = await self.store.invoices.save(Invoice.issue(guest, room, issue_date))

        logger.info(
            "Invoice %s created for guest %s: %s",
            invoice.invoice_id, guest_id, format(invoice.total_amount, "f")
        )
        return invoice

    async def backfill_invoices_for_churned_guests(self, guests: List[Guest]) -> BackfillResult:
        """Best-effort invoicing of guests who just moved out.

        A failure for one guest is logged and recorded, never raised, so the
        remaining guests are still processed.
        """
        result = BackfillResult()
        for guest in guests:
            try:
                result.created.append(await self.create_invoice_for_guest(guest.guest_id))
            except DomainError as e:
                logger.warning("Skipped invoice backfill for guest %s: %s", guest.guest_id, e.message)
                result.failures[guest.guest_id] = e.message
            except Exception as e:
                logger.warning("Invoice backfill failed for guest %s", guest.guest_id, exc_info=True)
                result.failures[guest.guest_id] = str(e) or type(e).__name__
        return result

    async def _ensure_no_recent_invoice(self, guest_id: int, issue_date: date) -> None:
        for existing in await self.store.invoices.find_by_guest(guest_id):
            if days_between(existing.issue_date, issue_date) <= self.window_days:
                raise DuplicateInvoice(
                    guest_id=guest_id,
                    existing_invoice_id=existing.invoice_id,
                    existing_issue_date=existing.issue_date,
                    window_days=self.window_days
                )


class ReconciliationService:
    """Explicit entry point for the read-triggered reconcile-then-bill step"""

    def __init__(self, reconciler: ResidencyReconciler, billing: BillingEngine):
        self.reconciler = reconciler
        self.billing = billing

    async def reconcile_and_bill(self) -> ReconciliationOutcome:
        churned = await self.reconciler.reconcile()
        if not churned:
            return ReconciliationOutcome()
        backfill = await self.billing.backfill_invoices_for_churned_guests(churned)
        return ReconciliationOutcome(churned=churned, backfill=backfill)
