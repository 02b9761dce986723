from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
import crud.brokers as crud_brokers
from schemas.brokers import Broker, BrokerCommissionSummary, BrokerCreate, BrokerUpdate
from utils.auth_utils import ADMIN_ROLES, ALL_ROLES, WRITE_ROLES, get_user_identifier, require_role

router = APIRouter(prefix="/brokers", tags=["Brokers"])
logger = logging.getLogger("brokers")


@router.post("/", response_model=Broker, status_code=status.HTTP_201_CREATED)
def create_broker(
    broker: BrokerCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES)),
):
    return crud_brokers.create_broker(db, broker, get_user_identifier(user))


@router.get("/", response_model=List[Broker])
def list_brokers(
    active_only: bool = False,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    return crud_brokers.get_brokers(db, active_only=active_only, skip=skip, limit=limit)


@router.get("/{broker_id}", response_model=Broker)
def read_broker(
    broker_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    return crud_brokers.get_broker_or_404(db, broker_id)


@router.get("/{broker_id}/commission", response_model=BrokerCommissionSummary)
def read_broker_commission(
    broker_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    """Commission earned on the broker's bookings, split by registry status, against payouts."""
    return crud_brokers.get_broker_commission_summary(db, broker_id)


@router.patch("/{broker_id}", response_model=Broker)
def update_broker(
    broker_id: int,
    broker: BrokerUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES)),
):
    return crud_brokers.update_broker(db, broker_id, broker, get_user_identifier(user))


@router.delete("/{broker_id}")
def delete_broker(
    broker_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ADMIN_ROLES)),
):
    crud_brokers.delete_broker(db, broker_id, get_user_identifier(user))
    return {"message": "Broker deleted successfully"}


@router.post("/{broker_id}/restore", response_model=Broker)
def restore_broker(
    broker_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ADMIN_ROLES)),
):
    return crud_brokers.restore_broker(db, broker_id, get_user_identifier(user))
