"""Error taxonomy for the booking ledger.

crud functions raise these; `main.py` turns them into JSON responses with the
status code carried by the class.
"""
from decimal import Decimal
from typing import Optional


class LedgerError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {"detail": self.detail}


class LedgerValidationError(LedgerError):
    """Rejected operation. Storage is left unchanged."""


class InvalidAmount(LedgerValidationError):
    pass


class ExceedsTotal(LedgerValidationError):
    pass


class ExceedsRemainingBalance(LedgerValidationError):
    def __init__(self, max_allowed: Decimal, detail: Optional[str] = None):
        super().__init__(detail or f"Payment amount exceeds remaining balance. Maximum allowed: {max_allowed}")
        self.max_allowed = max_allowed

    def to_dict(self) -> dict:
        return {"detail": self.detail, "max_allowed": str(self.max_allowed)}


class BookingCancelled(LedgerValidationError):
    pass


class NotFoundError(LedgerError):
    status_code = 404
    resource = "Record"

    def __init__(self, record_id=None):
        if record_id is None:
            super().__init__(f"{self.resource} not found")
        else:
            super().__init__(f"{self.resource} {record_id} not found")
        self.record_id = record_id


class BookingNotFound(NotFoundError):
    resource = "Booking"


class PaymentNotFound(NotFoundError):
    resource = "Payment"


class ProjectNotFound(NotFoundError):
    resource = "Project"


class CustomerNotFound(NotFoundError):
    resource = "Customer"


class BrokerNotFound(NotFoundError):
    resource = "Broker"


class BrokerPaymentNotFound(NotFoundError):
    resource = "Broker payment"


class DuplicateRecord(LedgerError):
    status_code = 409
