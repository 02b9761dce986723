from sqlalchemy import Boolean, Column, Integer, String, Text
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin


class Customer(Base, AuditMixin):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    customer_no = Column(String, unique=True, nullable=False, index=True)
    applicant_name = Column(String, nullable=False)
    father_or_husband_name = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    aadhaar_no = Column(String(12), unique=True, nullable=True)
    mobile_no = Column(String(15), nullable=True)
    email = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    bookings = relationship("Booking", back_populates="customer")
