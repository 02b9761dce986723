from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from database import get_db
import crud.bookings as crud_bookings
import crud.payments as crud_payments
from models.booking import BookingStatus
from schemas.bookings import (
    Booking,
    BookingBalance,
    BookingCreate,
    BookingCreated,
    BookingDetail,
    BookingUpdate,
    RegistryUpdate,
)
from schemas.payments import Payment
from utils.auth_utils import ADMIN_ROLES, ALL_ROLES, WRITE_ROLES, get_user_identifier, require_role
from utils.excel_export import export_bookings
from utils.receipt_utils import generate_booking_slip

router = APIRouter(prefix="/bookings", tags=["Bookings"])
logger = logging.getLogger("bookings")


@router.post("/", response_model=BookingCreated, status_code=status.HTTP_201_CREATED)
def create_booking(
    booking: BookingCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES)),
):
    """
    Create a booking, optionally with a new customer and an initial payment.

    The booking number, the customer and the initial payment receipt are all
    written in one transaction.
    """
    db_booking, db_payment = crud_bookings.create_booking(db, booking, get_user_identifier(user))
    return BookingCreated(
        booking=Booking.model_validate(db_booking),
        initial_payment=Payment.model_validate(db_payment) if db_payment else None,
    )


@router.get("/", response_model=List[Booking])
def list_bookings(
    project_id: Optional[int] = None,
    customer_id: Optional[int] = None,
    broker_id: Optional[int] = None,
    booking_status: Optional[BookingStatus] = None,
    registry_completed: Optional[bool] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    return crud_bookings.get_bookings(
        db,
        project_id=project_id,
        customer_id=customer_id,
        broker_id=broker_id,
        status=booking_status,
        registry_completed=registry_completed,
        start_date=start_date,
        end_date=end_date,
        skip=skip,
        limit=limit,
    )


@router.get("/export")
def export_bookings_excel(
    project_id: Optional[int] = None,
    broker_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    bookings = crud_bookings.get_bookings(
        db, project_id=project_id, broker_id=broker_id, start_date=start_date, end_date=end_date, limit=None
    )
    output = export_bookings(db, bookings)
    logger.info(f"Exported {len(bookings)} bookings for {get_user_identifier(user)}")
    return StreamingResponse(
        output,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=bookings.xlsx"},
    )


@router.get("/{booking_id}", response_model=BookingDetail)
def read_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    db_booking = crud_bookings.get_booking_or_404(db, booking_id)
    detail = BookingDetail.model_validate(db_booking)
    detail.balance = crud_bookings.balance_for(db, db_booking)
    detail.payments = [Payment.model_validate(p) for p in crud_payments.get_booking_payments(db, booking_id)]
    return detail


@router.patch("/{booking_id}", response_model=Booking)
def update_booking(
    booking_id: int,
    booking: BookingUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES)),
):
    return crud_bookings.update_booking(db, booking_id, booking, get_user_identifier(user))


@router.get("/{booking_id}/balance", response_model=BookingBalance)
def read_booking_balance(
    booking_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    return crud_bookings.get_booking_balance(db, booking_id)


@router.get("/{booking_id}/payments", response_model=List[Payment])
def read_booking_payments(
    booking_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    crud_bookings.get_booking_or_404(db, booking_id)
    return crud_payments.get_booking_payments(db, booking_id)


@router.get("/{booking_id}/slip")
def download_booking_slip(
    booking_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ALL_ROLES)),
):
    db_booking = crud_bookings.get_booking_or_404(db, booking_id)
    pdf_bytes = generate_booking_slip(db, db_booking)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=booking_{db_booking.id}.pdf"},
    )


@router.post("/{booking_id}/registry", response_model=Booking)
def update_registry(
    booking_id: int,
    registry: RegistryUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES)),
):
    return crud_bookings.mark_registry(
        db, booking_id, registry.registry_completed, registry.registry_date, get_user_identifier(user)
    )


@router.post("/{booking_id}/cancel", response_model=Booking)
def cancel_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES)),
):
    return crud_bookings.cancel_booking(db, booking_id, get_user_identifier(user))


@router.post("/{booking_id}/restore", response_model=Booking)
def restore_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ADMIN_ROLES)),
):
    """Restore a deleted booking. Its payments stay deleted."""
    return crud_bookings.restore_booking(db, booking_id, get_user_identifier(user))


@router.delete("/{booking_id}")
def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ADMIN_ROLES)),
):
    payment_count = crud_bookings.delete_booking(db, booking_id, get_user_identifier(user))
    return {"message": "Booking deleted successfully", "payments_deleted": payment_count}
