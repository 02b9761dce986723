import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from crud.audit_log import log_change
from crud.brokers import get_broker_or_404
from crud.customers import add_customer, get_customer_or_404
from crud.payments import add_payment, lock_booking, payment_status_for, sum_paid
from crud.sequence import generate_booking_no
from exceptions import BookingNotFound, ExceedsTotal, ProjectNotFound
from models.audit_mixin import now_ist
from models.booking import Booking, BookingStatus
from models.payments import Payment, PaymentType
from models.project import Project
from schemas.bookings import BookingBalance, BookingCreate, BookingUpdate
from utils import sqlalchemy_to_dict
from utils.valuation import compute_valuation, validate_initial_payment

logger = logging.getLogger("bookings")

VALUATION_FIELDS = ("area", "rate", "discount", "plc", "associate_rate", "broker_id")


def get_booking(db: Session, booking_id: int, include_deleted: bool = False):
    return db.query(Booking).options(
        selectinload(Booking.customer),
        selectinload(Booking.project),
    ).filter(Booking.id == booking_id).execution_options(include_deleted=include_deleted).first()


def get_booking_or_404(db: Session, booking_id: int, include_deleted: bool = False) -> Booking:
    db_booking = get_booking(db, booking_id, include_deleted=include_deleted)
    if db_booking is None:
        raise BookingNotFound(booking_id)
    return db_booking


def get_bookings(
    db: Session,
    project_id: Optional[int] = None,
    customer_id: Optional[int] = None,
    broker_id: Optional[int] = None,
    status: Optional[BookingStatus] = None,
    registry_completed: Optional[bool] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
):
    query = db.query(Booking)
    if project_id:
        query = query.filter(Booking.project_id == project_id)
    if customer_id:
        query = query.filter(Booking.customer_id == customer_id)
    if broker_id:
        query = query.filter(Booking.broker_id == broker_id)
    if status:
        query = query.filter(Booking.status == status)
    if registry_completed is not None:
        query = query.filter(Booking.registry_completed == registry_completed)
    if start_date:
        query = query.filter(Booking.booking_date >= start_date)
    if end_date:
        query = query.filter(Booking.booking_date <= end_date)
    return query.order_by(Booking.booking_date.desc(), Booking.id.desc()).offset(skip).limit(limit).all()


def get_booking_balance(db: Session, booking_id: int) -> BookingBalance:
    """Total, paid and remaining amounts, computed from the ledger on every call."""
    db_booking = get_booking_or_404(db, booking_id)
    return balance_for(db, db_booking)


def balance_for(db: Session, db_booking: Booking) -> BookingBalance:
    total_amount = db_booking.total_amount
    total_paid = sum_paid(db, db_booking.id)
    return BookingBalance(
        booking_id=db_booking.id,
        total_amount=total_amount,
        total_paid=total_paid,
        remaining_amount=total_amount - total_paid,
        payment_status=payment_status_for(total_amount, total_paid),
    )


def create_booking(db: Session, booking: BookingCreate, user_identifier: str):
    """Create a booking and its optional initial payment as one unit.

    The valuation and the initial payment are validated before anything is
    written. Returns ``(booking, initial_payment_or_None)``.
    """
    db_project = db.query(Project).filter(Project.id == booking.project_id).first()
    if db_project is None:
        raise ProjectNotFound(booking.project_id)
    if booking.broker_id is not None:
        get_broker_or_404(db, booking.broker_id)
    if booking.customer_id is not None:
        get_customer_or_404(db, booking.customer_id)

    valuation = compute_valuation(
        booking.area,
        booking.rate,
        discount=booking.discount,
        plc=booking.plc,
        associate_rate=booking.associate_rate,
        broker_id=booking.broker_id,
    )
    initial_amount = None
    if booking.booking_amount is not None:
        initial_amount = validate_initial_payment(booking.booking_amount, valuation.total_amount)

    booking_date = booking.booking_date or now_ist().date()

    try:
        customer_id = booking.customer_id
        if booking.customer is not None:
            customer_id = add_customer(db, booking.customer, user_identifier).id

        db_booking = Booking(
            booking_no=generate_booking_no(db, booking_date),
            booking_date=booking_date,
            customer_id=customer_id,
            project_id=booking.project_id,
            plot_no=booking.plot_no,
            area=booking.area,
            plc=booking.plc,
            rate=booking.rate,
            associate_rate=booking.associate_rate,
            discount=booking.discount,
            effective_rate=valuation.effective_rate,
            legal_details=booking.legal_details or db_project.legal_details,
            expected_registry_date=booking.expected_registry_date,
            loan=booking.loan,
            broker_id=booking.broker_id,
            status=BookingStatus.ACTIVE,
            created_by=user_identifier,
        )
        db.add(db_booking)
        db.flush()
        log_change(db, 'bookings', db_booking.id, user_identifier, 'CREATE', new_obj=db_booking)

        db_payment = None
        if initial_amount is not None:
            db_payment = add_payment(
                db,
                db_booking,
                initial_amount,
                booking.payment_mode,
                user_identifier,
                receipt_date=booking_date,
                payment_type=PaymentType.BOOKING,
                transaction_no=booking.transaction_no,
                remarks=booking.remarks,
            )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_booking)
    if db_payment is not None:
        db.refresh(db_payment)
    logger.info(
        f"Booking {db_booking.booking_no} (ID: {db_booking.id}) created for plot {db_booking.plot_no} "
        f"total {valuation.total_amount}, initial payment {initial_amount} by {user_identifier}"
    )
    return db_booking, db_payment


def update_booking(db: Session, booking_id: int, booking_update: BookingUpdate, user_identifier: str) -> Booking:
    """Apply an edit and recompute the valuation.

    An edit that would bring the total below what has already been paid is
    rejected, so the ledger never ends up over-paid.
    """
    try:
        db_booking = lock_booking(db, booking_id)
        update_data = booking_update.model_dump(exclude_unset=True)

        if update_data.get("project_id") is not None:
            if db.query(Project).filter(Project.id == update_data["project_id"]).first() is None:
                raise ProjectNotFound(update_data["project_id"])
        if update_data.get("customer_id") is not None:
            get_customer_or_404(db, update_data["customer_id"])
        if update_data.get("broker_id") is not None:
            get_broker_or_404(db, update_data["broker_id"])

        # Required numeric inputs cannot be cleared
        for key in ("area", "rate", "discount", "plc", "project_id", "customer_id", "booking_date", "plot_no"):
            if key in update_data and update_data[key] is None:
                update_data.pop(key)

        merged = {key: update_data.get(key, getattr(db_booking, key)) for key in VALUATION_FIELDS}
        valuation = compute_valuation(
            merged["area"],
            merged["rate"],
            discount=merged["discount"],
            plc=merged["plc"],
            associate_rate=merged["associate_rate"],
            broker_id=merged["broker_id"],
        )
        already_paid = sum_paid(db, booking_id)
        if valuation.total_amount < already_paid:
            raise ExceedsTotal(
                f"New total amount ({valuation.total_amount}) is less than the amount already paid ({already_paid})"
            )

        old_values = sqlalchemy_to_dict(db_booking)
        for key, value in update_data.items():
            setattr(db_booking, key, value)
        db_booking.effective_rate = valuation.effective_rate
        db_booking.updated_by = user_identifier
        db.flush()
        log_change(db, 'bookings', booking_id, user_identifier, 'UPDATE', old_values, db_booking)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_booking)
    logger.info(f"Booking ID {booking_id} updated by {user_identifier}; total now {db_booking.total_amount}")
    return db_booking


def mark_registry(db: Session, booking_id: int, registry_completed: bool, registry_date: Optional[date], user_identifier: str) -> Booking:
    db_booking = get_booking_or_404(db, booking_id)
    old_values = sqlalchemy_to_dict(db_booking)
    db_booking.registry_completed = registry_completed
    if registry_completed:
        db_booking.registry_date = registry_date or now_ist().date()
    else:
        db_booking.registry_date = None
    db_booking.updated_by = user_identifier
    try:
        db.flush()
        log_change(db, 'bookings', booking_id, user_identifier, 'UPDATE', old_values, db_booking)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_booking)
    logger.info(f"Booking ID {booking_id} registry set to {registry_completed} by {user_identifier}")
    return db_booking


def cancel_booking(db: Session, booking_id: int, user_identifier: str) -> Booking:
    # Payments already received stay on the ledger
    db_booking = get_booking_or_404(db, booking_id)
    if db_booking.status == BookingStatus.CANCELLED:
        return db_booking
    old_values = sqlalchemy_to_dict(db_booking)
    db_booking.status = BookingStatus.CANCELLED
    db_booking.updated_by = user_identifier
    try:
        db.flush()
        log_change(db, 'bookings', booking_id, user_identifier, 'UPDATE', old_values, db_booking)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_booking)
    logger.info(f"Booking ID {booking_id} cancelled by {user_identifier}")
    return db_booking


def soft_delete_booking_rows(db: Session, db_booking: Booking, user_identifier: str) -> int:
    """Mark a booking and all of its payments deleted without committing.

    Returns the number of payments marked.
    """
    old_values = sqlalchemy_to_dict(db_booking)
    db_booking.mark_deleted(user_identifier)
    payments = db.query(Payment).filter(Payment.booking_id == db_booking.id).all()
    for db_payment in payments:
        db_payment.mark_deleted(user_identifier)
    log_change(db, 'bookings', db_booking.id, user_identifier, 'DELETE', old_values, db_booking)
    return len(payments)


def delete_booking(db: Session, booking_id: int, user_identifier: str) -> int:
    """Soft delete a booking and its payments in one transaction."""
    try:
        db_booking = lock_booking(db, booking_id)
        payment_count = soft_delete_booking_rows(db, db_booking, user_identifier)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Booking ID {booking_id} soft deleted with {payment_count} payments by {user_identifier}")
    return payment_count


def restore_booking(db: Session, booking_id: int, user_identifier: str) -> Booking:
    """Un-delete the booking row only; its payments stay deleted."""
    db_booking = get_booking_or_404(db, booking_id, include_deleted=True)
    if not db_booking.is_deleted:
        return db_booking
    db_booking.mark_restored(user_identifier)
    try:
        log_change(db, 'bookings', booking_id, user_identifier, 'RESTORE', new_obj=db_booking)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_booking)
    logger.info(f"Booking ID {booking_id} restored by {user_identifier}")
    return db_booking
