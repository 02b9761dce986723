from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class CustomerBase(BaseModel):
    applicant_name: str = Field(..., min_length=1)
    father_or_husband_name: Optional[str] = None
    address: Optional[str] = None
    aadhaar_no: Optional[str] = Field(None, min_length=12, max_length=12)
    mobile_no: Optional[str] = Field(None, min_length=10, max_length=15)
    email: Optional[EmailStr] = None


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(BaseModel):
    applicant_name: Optional[str] = Field(None, min_length=1)
    father_or_husband_name: Optional[str] = None
    address: Optional[str] = None
    aadhaar_no: Optional[str] = Field(None, min_length=12, max_length=12)
    mobile_no: Optional[str] = Field(None, min_length=10, max_length=15)
    email: Optional[EmailStr] = None
    is_active: Optional[bool] = None


class Customer(CustomerBase):
    id: int
    customer_no: str
    is_active: bool
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
