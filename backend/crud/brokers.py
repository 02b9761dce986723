import logging
from decimal import Decimal
from sqlalchemy import func
from sqlalchemy.orm import Session

from crud.audit_log import log_change
from crud.sequence import generate_broker_no
from exceptions import BrokerNotFound
from models.booking import Booking
from models.broker import Broker
from models.broker_payment import BrokerPayment
from schemas.brokers import BrokerCreate, BrokerUpdate, BrokerCommissionSummary
from utils import sqlalchemy_to_dict

logger = logging.getLogger("brokers")


def get_broker(db: Session, broker_id: int, include_deleted: bool = False):
    return db.query(Broker).filter(Broker.id == broker_id).execution_options(include_deleted=include_deleted).first()


def get_broker_or_404(db: Session, broker_id: int, include_deleted: bool = False) -> Broker:
    db_broker = get_broker(db, broker_id, include_deleted=include_deleted)
    if db_broker is None:
        raise BrokerNotFound(broker_id)
    return db_broker


def get_brokers(db: Session, active_only: bool = False, skip: int = 0, limit: int = 100):
    query = db.query(Broker)
    if active_only:
        query = query.filter(Broker.is_active == True)
    return query.order_by(Broker.name.asc()).offset(skip).limit(limit).all()


def create_broker(db: Session, broker: BrokerCreate, user_identifier: str) -> Broker:
    try:
        db_broker = Broker(**broker.model_dump(), broker_no=generate_broker_no(db), created_by=user_identifier)
        db.add(db_broker)
        db.flush()
        log_change(db, 'brokers', db_broker.id, user_identifier, 'CREATE', new_obj=db_broker)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_broker)
    logger.info(f"Broker {db_broker.broker_no} created by {user_identifier}")
    return db_broker


def update_broker(db: Session, broker_id: int, broker: BrokerUpdate, user_identifier: str) -> Broker:
    db_broker = get_broker_or_404(db, broker_id)
    old_values = sqlalchemy_to_dict(db_broker)
    for key, value in broker.model_dump(exclude_unset=True).items():
        setattr(db_broker, key, value)
    db_broker.updated_by = user_identifier
    try:
        db.flush()
        log_change(db, 'brokers', broker_id, user_identifier, 'UPDATE', old_values, db_broker)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_broker)
    logger.info(f"Broker ID {broker_id} updated by {user_identifier}")
    return db_broker


def delete_broker(db: Session, broker_id: int, user_identifier: str):
    """Soft delete the broker row only.

    Bookings and broker payments stay visible so commissions remain auditable.
    """
    db_broker = get_broker_or_404(db, broker_id)
    old_values = sqlalchemy_to_dict(db_broker)
    db_broker.mark_deleted(user_identifier)
    db_broker.is_active = False
    try:
        log_change(db, 'brokers', broker_id, user_identifier, 'DELETE', old_values, db_broker)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Broker ID {broker_id} soft deleted by {user_identifier}")


def restore_broker(db: Session, broker_id: int, user_identifier: str) -> Broker:
    db_broker = get_broker_or_404(db, broker_id, include_deleted=True)
    if not db_broker.is_deleted:
        return db_broker
    db_broker.mark_restored(user_identifier)
    db_broker.is_active = True
    try:
        log_change(db, 'brokers', broker_id, user_identifier, 'RESTORE', new_obj=db_broker)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_broker)
    logger.info(f"Broker ID {broker_id} restored by {user_identifier}")
    return db_broker


def get_broker_commission_summary(db: Session, broker_id: int) -> BrokerCommissionSummary:
    """Commission earned across the broker's bookings against payouts made.

    Payouts are not tied to bookings, so the paid amount is subtracted from
    both the overall and the registered-only totals.
    """
    # Deleted brokers still have a summary
    get_broker_or_404(db, broker_id, include_deleted=True)

    bookings = db.query(Booking).filter(Booking.broker_id == broker_id).all()
    registered = [b for b in bookings if b.registry_completed]
    non_registered = [b for b in bookings if not b.registry_completed]

    total_commission = sum((b.broker_commission for b in bookings), Decimal("0"))
    total_registered = sum((b.broker_commission for b in registered), Decimal("0"))
    total_non_registered = sum((b.broker_commission for b in non_registered), Decimal("0"))

    total_paid = db.query(func.coalesce(func.sum(BrokerPayment.payment_amount), 0)).filter(
        BrokerPayment.broker_id == broker_id,
        BrokerPayment.is_deleted == False
    ).scalar()
    total_paid = Decimal(str(total_paid))

    return BrokerCommissionSummary(
        broker_id=broker_id,
        total_bookings=len(bookings),
        registered_bookings=len(registered),
        non_registered_bookings=len(non_registered),
        total_commission=total_commission,
        total_commission_registered=total_registered,
        total_commission_non_registered=total_non_registered,
        total_commission_paid=total_paid,
        commission_remaining=total_commission - total_paid,
        commission_remaining_registered=total_registered - total_paid,
    )
