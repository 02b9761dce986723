from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from database import get_db
import crud.broker_payments as crud_broker_payments
from schemas.broker_payments import BrokerPayment, BrokerPaymentCreate, BrokerPaymentUpdate
from utils.auth_utils import ADMIN_ROLES, ALL_ROLES, WRITE_ROLES, get_user_identifier, require_role

router = APIRouter(prefix="/broker-payments", tags=["Broker Payments"])
logger = logging.getLogger("broker_payments")


@router.post("/", response_model=BrokerPayment, status_code=status.HTTP_201_CREATED)
def create_broker_payment(
    payment: BrokerPaymentCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES)),
):
    """Record a commission payout to a broker."""
    return crud_broker_payments.create_broker_payment(db, payment, get_user_identifier(user))


@router.get("/", response_model=List[BrokerPayment])
def list_broker_payments(
    broker_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    return crud_broker_payments.get_broker_payments(
        db, broker_id=broker_id, start_date=start_date, end_date=end_date, skip=skip, limit=limit
    )


@router.get("/{payment_id}", response_model=BrokerPayment)
def read_broker_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    return crud_broker_payments.get_broker_payment_or_404(db, payment_id)


@router.patch("/{payment_id}", response_model=BrokerPayment)
def update_broker_payment(
    payment_id: int,
    payment: BrokerPaymentUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES)),
):
    return crud_broker_payments.update_broker_payment(db, payment_id, payment, get_user_identifier(user))


@router.delete("/{payment_id}")
def delete_broker_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ADMIN_ROLES)),
):
    crud_broker_payments.delete_broker_payment(db, payment_id, get_user_identifier(user))
    return {"message": "Broker payment deleted successfully"}
