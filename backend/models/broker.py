from sqlalchemy import Boolean, Column, Integer, String, Text
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin


class Broker(Base, AuditMixin):
    __tablename__ = "brokers"

    id = Column(Integer, primary_key=True, index=True)
    broker_no = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    mobile_no = Column(String(15), nullable=False)
    email = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    aadhaar_no = Column(String(12), nullable=True)
    pan_no = Column(String(10), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    # Deleting a broker leaves its bookings and payouts in place
    bookings = relationship("Booking", back_populates="broker")
    payments = relationship("BrokerPayment", back_populates="broker")
