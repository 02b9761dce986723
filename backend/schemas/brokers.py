from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class BrokerBase(BaseModel):
    name: str = Field(..., min_length=1)
    mobile_no: str = Field(..., min_length=10, max_length=15)
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    aadhaar_no: Optional[str] = Field(None, min_length=12, max_length=12)
    pan_no: Optional[str] = Field(None, min_length=10, max_length=10)


class BrokerCreate(BrokerBase):
    pass


class BrokerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    mobile_no: Optional[str] = Field(None, min_length=10, max_length=15)
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    aadhaar_no: Optional[str] = Field(None, min_length=12, max_length=12)
    pan_no: Optional[str] = Field(None, min_length=10, max_length=10)
    is_active: Optional[bool] = None


class Broker(BrokerBase):
    id: int
    broker_no: str
    is_active: bool
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BrokerCommissionSummary(BaseModel):
    broker_id: int
    total_bookings: int
    registered_bookings: int
    non_registered_bookings: int
    total_commission: Decimal
    total_commission_registered: Decimal
    total_commission_non_registered: Decimal
    total_commission_paid: Decimal
    commission_remaining: Decimal
    commission_remaining_registered: Decimal
