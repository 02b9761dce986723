from sqlalchemy import Boolean, Column, Date, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import AuditMixin


class PaymentMode(enum.Enum):
    CASH = "Cash"
    CHEQUE = "Cheque"
    ONLINE_TRANSFER = "Online Transfer"
    UPI = "UPI"
    CARD = "Card"
    EMI = "EMI"


class PaymentType(enum.Enum):
    BOOKING = "Booking"
    INSTALLMENT = "Installment"
    FINAL = "Final"
    OTHER = "Other"


class Payment(Base, AuditMixin):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    receipt_no = Column(String, unique=True, nullable=False, index=True)
    receipt_date = Column(Date, nullable=False)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    payment_amount = Column(Numeric(15, 2), nullable=False)
    payment_mode = Column(Enum(PaymentMode), nullable=False)
    transaction_no = Column(String, nullable=True)
    remarks = Column(Text, nullable=True)
    payment_type = Column(Enum(PaymentType), default=PaymentType.INSTALLMENT, nullable=False)
    is_recurring = Column(Boolean, default=False, nullable=False)
    installment_number = Column(Integer, nullable=True)

    # Relationships
    booking = relationship("Booking")
