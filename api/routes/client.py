"""Self-service endpoints for hotel clients"""
from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_billing_engine, get_invoice_service, require_role
from api.responses import invoice_to_response
from api.schemas import InvoiceResponse
from application.billing import BillingEngine
from application.services import InvoiceService
from domain.auth import AccountInDB
from domain.enums import UserRole
from domain.exceptions import InvalidState

router = APIRouter(prefix="/client", tags=["Client"])

require_client = require_role(UserRole.CLIENT)


def _guest_id_of(user: AccountInDB) -> int:
    if user.guest_id is None:
        raise InvalidState(f"Account {user.username} is not linked to a guest")
    return user.guest_id


@router.get("/invoices", response_model=List[InvoiceResponse])
async def get_my_invoices(
    current_user: AccountInDB = Depends(require_client),
    service: InvoiceService = Depends(get_invoice_service)
):
    """Invoices of the logged-in client"""
    invoices = await service.get_guest_invoices(_guest_id_of(current_user))
    return [invoice_to_response(i) for i in invoices]


@router.post("/request-invoice", response_model=InvoiceResponse, status_code=201)
async def request_invoice(
    current_user: AccountInDB = Depends(require_client),
    billing: BillingEngine = Depends(get_billing_engine)
):
    """Issue an invoice for the client's own stay, dated today"""
    invoice = await billing.create_invoice_for_guest(_guest_id_of(current_user))
    return invoice_to_response(invoice)
