from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from models.payments import PaymentMode, PaymentType


class PaymentBase(BaseModel):
    payment_amount: Decimal = Field(..., decimal_places=2)
    payment_mode: PaymentMode
    receipt_date: Optional[date] = None
    transaction_no: Optional[str] = None
    remarks: Optional[str] = None
    payment_type: PaymentType = PaymentType.INSTALLMENT
    is_recurring: bool = False
    installment_number: Optional[int] = Field(None, ge=1)


class PaymentCreate(PaymentBase):
    booking_id: int


class PaymentUpdate(BaseModel):
    payment_amount: Optional[Decimal] = Field(None, decimal_places=2)
    payment_mode: Optional[PaymentMode] = None
    receipt_date: Optional[date] = None
    transaction_no: Optional[str] = None
    remarks: Optional[str] = None
    payment_type: Optional[PaymentType] = None
    is_recurring: Optional[bool] = None
    installment_number: Optional[int] = Field(None, ge=1)


class Payment(PaymentBase):
    id: int
    booking_id: int
    receipt_no: str
    receipt_date: date
    is_deleted: bool
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
