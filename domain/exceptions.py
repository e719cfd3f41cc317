"""Domain Exceptions

Errors raised by the domain and application layers. The API layer maps
each class to an HTTP status code, so handlers never inspect messages.
"""
from datetime import date
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for all business rule failures"""

    code = "DOMAIN_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> Dict[str, Any]:
        """Extra figures surfaced to API clients next to the message"""
        return {}


class NotFound(DomainError):
    """Referenced room, guest, invoice or other record is absent"""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidState(DomainError):
    """Record exists but cannot take part in the requested operation"""

    code = "INVALID_STATE"


class Conflict(DomainError):
    """Operation would break a uniqueness or capacity rule"""

    code = "CONFLICT"


class CapacityExceeded(Conflict):
    code = "CAPACITY_EXCEEDED"

    def __init__(self, room_number: int, category: str, capacity: int, current: int):
        super().__init__(
            f"Room {room_number} ({category}) is full: capacity {capacity}, current {current}"
        )
        self.room_number = room_number
        self.category = category
        self.capacity = capacity
        self.current = current

    def details(self) -> Dict[str, Any]:
        return {
            "room_number": self.room_number,
            "category": self.category,
            "capacity": self.capacity,
            "current": self.current,
        }


class DuplicateInvoice(Conflict):
    code = "DUPLICATE_INVOICE"

    def __init__(
        self,
        guest_id: int,
        existing_invoice_id: int,
        existing_issue_date: date,
        window_days: int
    ):
        super().__init__(
            f"Duplicate invoice: guest {guest_id} already has invoice {existing_invoice_id} "
            f"issued {existing_issue_date.isoformat()} (within {window_days} days)"
        )
        self.guest_id = guest_id
        self.existing_invoice_id = existing_invoice_id
        self.existing_issue_date = existing_issue_date
        self.window_days = window_days

    def details(self) -> Dict[str, Any]:
        return {
            "guest_id": self.guest_id,
            "existing_invoice_id": self.existing_invoice_id,
            "existing_issue_date": self.existing_issue_date.isoformat(),
            "window_days": self.window_days,
        }


class ValidationError(DomainError, ValueError):
    """Malformed input caught by entity validation"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def details(self) -> Dict[str, Any]:
        return {"field": self.field} if self.field else {}


class PermissionDenied(DomainError):
    code = "PERMISSION_DENIED"
