from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from database import get_db
import crud.payments as crud_payments
from models.payments import PaymentMode, PaymentType
from schemas.payments import Payment, PaymentCreate, PaymentUpdate
from utils.auth_utils import ADMIN_ROLES, ALL_ROLES, WRITE_ROLES, get_user_identifier, require_role
from utils.receipt_utils import generate_payment_receipt

router = APIRouter(prefix="/payments", tags=["Payments"])
logger = logging.getLogger("payments")


@router.post("/", response_model=Payment, status_code=status.HTTP_201_CREATED)
def create_payment(
    payment: PaymentCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES)),
):
    """Record a payment for a booking. Rejected when it exceeds the remaining balance."""
    return crud_payments.record_payment(db, payment, get_user_identifier(user))


@router.get("/", response_model=List[Payment])
def list_payments(
    booking_id: Optional[int] = None,
    payment_mode: Optional[PaymentMode] = None,
    payment_type: Optional[PaymentType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    return crud_payments.get_payments(
        db,
        booking_id=booking_id,
        payment_mode=payment_mode,
        payment_type=payment_type,
        start_date=start_date,
        end_date=end_date,
        skip=skip,
        limit=limit,
    )


@router.get("/{payment_id}", response_model=Payment)
def read_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    return crud_payments.get_payment_or_404(db, payment_id)


@router.get("/{payment_id}/receipt")
def download_receipt(
    payment_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    pdf_bytes = generate_payment_receipt(db, payment_id)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=receipt_{payment_id}.pdf"},
    )


@router.patch("/{payment_id}", response_model=Payment)
def update_payment(
    payment_id: int,
    payment: PaymentUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES)),
):
    return crud_payments.update_payment(db, payment_id, payment, get_user_identifier(user))


@router.delete("/{payment_id}")
def delete_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ADMIN_ROLES)),
):
    crud_payments.delete_payment(db, payment_id, get_user_identifier(user))
    return {"message": "Payment deleted successfully"}


@router.post("/{payment_id}/restore", response_model=Payment)
def restore_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ADMIN_ROLES)),
):
    return crud_payments.restore_payment(db, payment_id, get_user_identifier(user))
