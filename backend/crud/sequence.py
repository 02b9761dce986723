"""Human-readable document numbers.

Every numbered family keeps its counter in a `document_sequences` row. The row
is locked, read and incremented inside the caller's transaction, so the number
and the row it labels commit or roll back together. Counters never reset and
never go backwards, so numbers are not reused after a soft delete.

Formats printed on receipts and slips:

    Booking         DS/{YY}/{MM}-{1001+N}    YY/MM from the booking date
    Payment         DSPAY/IN/{1001+N}
    Broker          BRK{YYYY}{N+1:05d}
    Broker payment  BRP{YYYY}{N+1:05d}
    Customer        CUST{YYYY}{N+1:05d}

N is the zero-based ordinal of the row among all rows ever created.
"""
import logging
from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.audit_mixin import now_ist
from models.booking import Booking
from models.broker import Broker
from models.broker_payment import BrokerPayment
from models.customer import Customer
from models.document_sequence import DocumentSequence
from models.payments import Payment

logger = logging.getLogger("sequence")

BOOKING_SEQUENCE = "booking"
PAYMENT_SEQUENCE = "payment"
BROKER_SEQUENCE = "broker"
BROKER_PAYMENT_SEQUENCE = "broker_payment"
CUSTOMER_SEQUENCE = "customer"

# name -> (model counted when the row is first seeded, first counter value)
SEQUENCES = {
    BOOKING_SEQUENCE: (Booking, 1001),
    PAYMENT_SEQUENCE: (Payment, 1001),
    BROKER_SEQUENCE: (Broker, 1),
    BROKER_PAYMENT_SEQUENCE: (BrokerPayment, 1),
    CUSTOMER_SEQUENCE: (Customer, 1),
}


def _seed_value(db: Session, name: str) -> int:
    model, start = SEQUENCES[name]
    # Soft-deleted rows count too
    existing = db.query(func.count(model.id)).execution_options(include_deleted=True).scalar() or 0
    return start + existing


def next_value(db: Session, name: str) -> int:
    """Return the next counter value for `name` and advance the counter.

    Must be called inside the transaction that inserts the numbered row.
    """
    if name not in SEQUENCES:
        raise KeyError(f"Unknown document sequence '{name}'")

    sequence = db.query(DocumentSequence).filter(DocumentSequence.name == name).with_for_update().first()
    if sequence is None:
        # Two first-ever creations racing here both insert; the primary key
        # rejects one of them and that request fails.
        sequence = DocumentSequence(name=name, next_value=_seed_value(db, name))
        db.add(sequence)
        db.flush()
        logger.info(f"Document sequence '{name}' seeded at {sequence.next_value}")

    value = sequence.next_value
    sequence.next_value = value + 1
    db.flush()
    return value


def format_booking_no(booking_date: date, counter: int) -> str:
    return f"DS/{booking_date.strftime('%y')}/{booking_date.strftime('%m')}-{counter:04d}"


def format_receipt_no(counter: int) -> str:
    return f"DSPAY/IN/{counter}"


def format_year_coded(prefix: str, year: int, counter: int) -> str:
    return f"{prefix}{year}{counter:05d}"


def generate_booking_no(db: Session, booking_date: date) -> str:
    return format_booking_no(booking_date, next_value(db, BOOKING_SEQUENCE))


def generate_receipt_no(db: Session) -> str:
    return format_receipt_no(next_value(db, PAYMENT_SEQUENCE))


def generate_broker_no(db: Session, year: Optional[int] = None) -> str:
    return format_year_coded("BRK", year or now_ist().year, next_value(db, BROKER_SEQUENCE))


def generate_broker_payment_no(db: Session, year: Optional[int] = None) -> str:
    return format_year_coded("BRP", year or now_ist().year, next_value(db, BROKER_PAYMENT_SEQUENCE))


def generate_customer_no(db: Session, year: Optional[int] = None) -> str:
    return format_year_coded("CUST", year or now_ist().year, next_value(db, CUSTOMER_SEQUENCE))
