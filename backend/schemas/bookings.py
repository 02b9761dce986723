from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from models.booking import BookingStatus, LoanStatus
from models.payments import PaymentMode
from schemas.customers import CustomerCreate
from schemas.payments import Payment as PaymentSchema


class BookingBase(BaseModel):
    project_id: int
    plot_no: str = Field(..., min_length=1)
    area: Decimal = Field(..., decimal_places=2)
    rate: Decimal = Field(..., decimal_places=2)
    discount: Decimal = Field(Decimal("0"), decimal_places=2)
    plc: Decimal = Field(Decimal("0"), decimal_places=2)
    associate_rate: Optional[Decimal] = Field(None, decimal_places=2)
    broker_id: Optional[int] = None
    legal_details: Optional[str] = None
    expected_registry_date: Optional[date] = None
    loan: LoanStatus = LoanStatus.NOT_APPLICABLE


class BookingCreate(BookingBase):
    booking_date: Optional[date] = None
    # Either an existing customer or the details of a new one
    customer_id: Optional[int] = None
    customer: Optional[CustomerCreate] = None
    # Optional initial payment recorded in the same transaction
    booking_amount: Optional[Decimal] = Field(None, decimal_places=2)
    payment_mode: PaymentMode = PaymentMode.CASH
    transaction_no: Optional[str] = None
    remarks: Optional[str] = None

    @model_validator(mode="after")
    def check_customer(self):
        if self.customer_id is None and self.customer is None:
            raise ValueError("Either customer_id or customer details are required")
        if self.customer_id is not None and self.customer is not None:
            raise ValueError("Provide customer_id or customer details, not both")
        return self


class BookingUpdate(BaseModel):
    booking_date: Optional[date] = None
    customer_id: Optional[int] = None
    project_id: Optional[int] = None
    plot_no: Optional[str] = Field(None, min_length=1)
    area: Optional[Decimal] = Field(None, decimal_places=2)
    rate: Optional[Decimal] = Field(None, decimal_places=2)
    discount: Optional[Decimal] = Field(None, decimal_places=2)
    plc: Optional[Decimal] = Field(None, decimal_places=2)
    associate_rate: Optional[Decimal] = Field(None, decimal_places=2)
    broker_id: Optional[int] = None
    legal_details: Optional[str] = None
    status: Optional[BookingStatus] = None
    expected_registry_date: Optional[date] = None
    loan: Optional[LoanStatus] = None


class RegistryUpdate(BaseModel):
    registry_completed: bool = True
    registry_date: Optional[date] = None


class BookingBalance(BaseModel):
    booking_id: int
    total_amount: Decimal
    total_paid: Decimal
    remaining_amount: Decimal
    payment_status: str


class Booking(BookingBase):
    id: int
    booking_no: str
    booking_date: date
    customer_id: int
    effective_rate: Decimal
    total_amount: Decimal
    broker_commission: Decimal
    status: BookingStatus
    registry_completed: bool
    registry_date: Optional[date] = None
    is_deleted: bool
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BookingDetail(Booking):
    balance: Optional[BookingBalance] = None
    payments: List[PaymentSchema] = []


class BookingCreated(BaseModel):
    booking: Booking
    initial_payment: Optional[PaymentSchema] = None
