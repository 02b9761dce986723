import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from crud.audit_log import log_change
from crud.brokers import get_broker_or_404
from crud.sequence import generate_broker_payment_no
from exceptions import BrokerPaymentNotFound, InvalidAmount
from models.audit_mixin import now_ist
from models.broker_payment import BrokerPayment
from schemas.broker_payments import BrokerPaymentCreate, BrokerPaymentUpdate
from utils import sqlalchemy_to_dict
from utils.valuation import two_places

logger = logging.getLogger("broker_payments")


def _check_amount(amount):
    if amount is None or two_places(amount, "Payment amount") <= 0:
        raise InvalidAmount("Payment amount must be greater than 0")


def get_broker_payment_or_404(db: Session, payment_id: int) -> BrokerPayment:
    db_payment = db.query(BrokerPayment).filter(BrokerPayment.id == payment_id).first()
    if db_payment is None:
        raise BrokerPaymentNotFound(payment_id)
    return db_payment


def get_broker_payments(
    db: Session,
    broker_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
):
    query = db.query(BrokerPayment)
    if broker_id:
        query = query.filter(BrokerPayment.broker_id == broker_id)
    if start_date:
        query = query.filter(BrokerPayment.payment_date >= start_date)
    if end_date:
        query = query.filter(BrokerPayment.payment_date <= end_date)
    return query.order_by(BrokerPayment.payment_date.desc(), BrokerPayment.id.desc()).offset(skip).limit(limit).all()


def create_broker_payment(db: Session, payment: BrokerPaymentCreate, user_identifier: str) -> BrokerPayment:
    """Record a payout against the broker's accumulated commission.

    Payouts are not tied to any booking and are not capped by the commission
    earned.
    """
    get_broker_or_404(db, payment.broker_id)
    _check_amount(payment.payment_amount)
    data = payment.model_dump()
    data["payment_date"] = data.get("payment_date") or now_ist().date()
    try:
        db_payment = BrokerPayment(**data, payment_no=generate_broker_payment_no(db), created_by=user_identifier)
        db.add(db_payment)
        db.flush()
        log_change(db, 'broker_payments', db_payment.id, user_identifier, 'CREATE', new_obj=db_payment)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_payment)
    logger.info(f"Broker payment {db_payment.payment_no} of {db_payment.payment_amount} to broker ID {payment.broker_id} by {user_identifier}")
    return db_payment


def update_broker_payment(db: Session, payment_id: int, payment: BrokerPaymentUpdate, user_identifier: str) -> BrokerPayment:
    db_payment = get_broker_payment_or_404(db, payment_id)
    update_data = payment.model_dump(exclude_unset=True)
    if "payment_amount" in update_data:
        _check_amount(update_data["payment_amount"])
    old_values = sqlalchemy_to_dict(db_payment)
    for key, value in update_data.items():
        if value is not None or key in ("transaction_no", "remarks"):
            setattr(db_payment, key, value)
    db_payment.updated_by = user_identifier
    try:
        db.flush()
        log_change(db, 'broker_payments', payment_id, user_identifier, 'UPDATE', old_values, db_payment)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_payment)
    logger.info(f"Broker payment ID {payment_id} updated by {user_identifier}")
    return db_payment


def delete_broker_payment(db: Session, payment_id: int, user_identifier: str):
    db_payment = get_broker_payment_or_404(db, payment_id)
    old_values = sqlalchemy_to_dict(db_payment)
    db_payment.mark_deleted(user_identifier)
    try:
        log_change(db, 'broker_payments', payment_id, user_identifier, 'DELETE', old_values, db_payment)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Broker payment ID {payment_id} soft deleted by {user_identifier}")
