from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from models.broker_payment import BrokerPaymentMode


class BrokerPaymentBase(BaseModel):
    broker_id: int
    payment_amount: Decimal = Field(..., decimal_places=2)
    payment_date: Optional[date] = None
    payment_mode: BrokerPaymentMode = BrokerPaymentMode.CASH
    transaction_no: Optional[str] = None
    remarks: Optional[str] = None


class BrokerPaymentCreate(BrokerPaymentBase):
    pass


class BrokerPaymentUpdate(BaseModel):
    payment_amount: Optional[Decimal] = Field(None, decimal_places=2)
    payment_date: Optional[date] = None
    payment_mode: Optional[BrokerPaymentMode] = None
    transaction_no: Optional[str] = None
    remarks: Optional[str] = None


class BrokerPayment(BrokerPaymentBase):
    id: int
    payment_no: str
    payment_date: date
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
