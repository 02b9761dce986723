"""Payment ledger.

The paid and remaining amounts of a booking are never stored. They are summed
from the non-deleted payments on every read, and every write that adds to the
sum first locks the booking row so two concurrent payments cannot both pass
the remaining-balance check.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from crud.audit_log import log_change
from crud.sequence import generate_receipt_no
from exceptions import (
    BookingCancelled,
    BookingNotFound,
    ExceedsRemainingBalance,
    InvalidAmount,
    PaymentNotFound,
)
from models.audit_mixin import now_ist
from models.booking import Booking, BookingStatus
from models.payments import Payment, PaymentMode, PaymentType
from schemas.payments import PaymentCreate, PaymentUpdate
from utils import sqlalchemy_to_dict
from utils.valuation import to_decimal, two_places

logger = logging.getLogger("payments")


def sum_paid(db: Session, booking_id: int, exclude_payment_id: Optional[int] = None) -> Decimal:
    """Sum of non-deleted payment amounts for a booking, optionally leaving one out."""
    query = db.query(func.coalesce(func.sum(Payment.payment_amount), 0)).filter(
        Payment.booking_id == booking_id,
        Payment.is_deleted == False
    )
    if exclude_payment_id is not None:
        query = query.filter(Payment.id != exclude_payment_id)
    return to_decimal(query.scalar())


def payment_status_for(total_amount: Decimal, total_paid: Decimal) -> str:
    if total_paid <= 0:
        return "Unpaid"
    if total_paid >= total_amount:
        return "Paid"
    return "Partially Paid"


def lock_booking(db: Session, booking_id: int) -> Booking:
    """Load a non-deleted booking with a row lock held until commit/rollback."""
    db_booking = db.query(Booking).filter(Booking.id == booking_id).with_for_update().first()
    if db_booking is None:
        raise BookingNotFound(booking_id)
    return db_booking


def check_amount_fits(db: Session, db_booking: Booking, amount, exclude_payment_id: Optional[int] = None) -> Decimal:
    """Reject `amount` unless it fits into the booking's remaining balance.

    The remaining balance is computed against every other non-deleted payment
    on the booking. Returns the validated amount.
    """
    amount = two_places(amount, "Payment amount")
    if amount <= 0:
        raise InvalidAmount("Payment amount must be greater than 0")

    total_amount = db_booking.total_amount
    already_paid = sum_paid(db, db_booking.id, exclude_payment_id=exclude_payment_id)
    max_allowed = total_amount - already_paid
    if amount > max_allowed:
        logger.warning(
            f"Rejected payment of {amount} on booking {db_booking.booking_no}: "
            f"total {total_amount}, already paid {already_paid}, max allowed {max_allowed}"
        )
        raise ExceedsRemainingBalance(
            max_allowed=max_allowed,
            detail=f"Payment amount ({amount}) exceeds remaining balance ({max_allowed}) for booking {db_booking.booking_no}"
        )
    return amount


def add_payment(
    db: Session,
    db_booking: Booking,
    amount: Decimal,
    payment_mode: PaymentMode,
    user_identifier: str,
    receipt_date: Optional[date] = None,
    payment_type: PaymentType = PaymentType.INSTALLMENT,
    **details,
) -> Payment:
    """Number and insert a payment without committing.

    The caller must already have validated `amount` with `check_amount_fits`
    (or against a freshly computed total) in the same transaction.
    """
    db_payment = Payment(
        receipt_no=generate_receipt_no(db),
        receipt_date=receipt_date or now_ist().date(),
        booking_id=db_booking.id,
        payment_amount=amount,
        payment_mode=payment_mode,
        payment_type=payment_type,
        created_by=user_identifier,
        **details,
    )
    db.add(db_payment)
    db.flush()
    log_change(db, 'payments', db_payment.id, user_identifier, 'CREATE', new_obj=db_payment)
    return db_payment


def get_payment(db: Session, payment_id: int, include_deleted: bool = False):
    return db.query(Payment).filter(Payment.id == payment_id).execution_options(include_deleted=include_deleted).first()


def get_payment_or_404(db: Session, payment_id: int, include_deleted: bool = False) -> Payment:
    db_payment = get_payment(db, payment_id, include_deleted=include_deleted)
    if db_payment is None:
        raise PaymentNotFound(payment_id)
    return db_payment


def get_payments(
    db: Session,
    booking_id: Optional[int] = None,
    payment_mode: Optional[PaymentMode] = None,
    payment_type: Optional[PaymentType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
):
    query = db.query(Payment)
    if booking_id:
        query = query.filter(Payment.booking_id == booking_id)
    if payment_mode:
        query = query.filter(Payment.payment_mode == payment_mode)
    if payment_type:
        query = query.filter(Payment.payment_type == payment_type)
    if start_date:
        query = query.filter(Payment.receipt_date >= start_date)
    if end_date:
        query = query.filter(Payment.receipt_date <= end_date)
    return query.order_by(Payment.receipt_date.desc(), Payment.id.desc()).offset(skip).limit(limit).all()


def get_booking_payments(db: Session, booking_id: int):
    return db.query(Payment).filter(Payment.booking_id == booking_id).order_by(
        Payment.receipt_date.asc(), Payment.id.asc()
    ).all()


def record_payment(db: Session, payment: PaymentCreate, user_identifier: str) -> Payment:
    """Record a payment against a booking, enforcing the remaining balance."""
    try:
        db_booking = lock_booking(db, payment.booking_id)
        if db_booking.status == BookingStatus.CANCELLED:
            raise BookingCancelled(f"Booking {db_booking.booking_no} is cancelled and cannot accept payments")

        amount = check_amount_fits(db, db_booking, payment.payment_amount)
        details = payment.model_dump(exclude={"booking_id", "payment_amount", "payment_mode", "receipt_date", "payment_type"})
        db_payment = add_payment(
            db,
            db_booking,
            amount,
            payment.payment_mode,
            user_identifier,
            receipt_date=payment.receipt_date,
            payment_type=payment.payment_type,
            **details,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_payment)
    logger.info(f"Payment {db_payment.receipt_no} of {amount} recorded for booking ID {payment.booking_id} by {user_identifier}")
    return db_payment


def update_payment(db: Session, payment_id: int, payment_update: PaymentUpdate, user_identifier: str) -> Payment:
    """Edit a payment; a new amount is validated against the other payments only."""
    try:
        db_payment = get_payment_or_404(db, payment_id)
        db_booking = lock_booking(db, db_payment.booking_id)

        update_data = payment_update.model_dump(exclude_unset=True)
        if update_data.get("payment_amount") is not None:
            update_data["payment_amount"] = check_amount_fits(
                db, db_booking, update_data["payment_amount"], exclude_payment_id=payment_id
            )
        else:
            update_data.pop("payment_amount", None)

        old_values = sqlalchemy_to_dict(db_payment)
        for key, value in update_data.items():
            setattr(db_payment, key, value)
        db_payment.updated_by = user_identifier
        db.flush()
        log_change(db, 'payments', payment_id, user_identifier, 'UPDATE', old_values, db_payment)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_payment)
    logger.info(f"Payment ID {payment_id} updated for booking ID {db_payment.booking_id} by {user_identifier}")
    return db_payment


def delete_payment(db: Session, payment_id: int, user_identifier: str):
    """Soft delete a payment. Balances pick the change up on the next read."""
    try:
        db_payment = get_payment_or_404(db, payment_id)
        # Serialize with concurrent adds and restores on the same booking
        lock_booking(db, db_payment.booking_id)
        old_values = sqlalchemy_to_dict(db_payment)
        db_payment.mark_deleted(user_identifier)
        log_change(db, 'payments', payment_id, user_identifier, 'DELETE', old_values, db_payment)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Payment ID {payment_id} soft deleted for booking ID {db_payment.booking_id} by {user_identifier}")


def restore_payment(db: Session, payment_id: int, user_identifier: str) -> Payment:
    """Un-delete a payment if it still fits into its booking's balance."""
    try:
        db_payment = get_payment_or_404(db, payment_id, include_deleted=True)
        if not db_payment.is_deleted:
            return db_payment
        db_booking = lock_booking(db, db_payment.booking_id)
        check_amount_fits(db, db_booking, db_payment.payment_amount, exclude_payment_id=payment_id)
        db_payment.mark_restored(user_identifier)
        log_change(db, 'payments', payment_id, user_identifier, 'RESTORE', new_obj=db_payment)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_payment)
    logger.info(f"Payment ID {payment_id} restored by {user_identifier}")
    return db_payment
