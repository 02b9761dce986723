from sqlalchemy import Column, Date, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import AuditMixin


class BrokerPaymentMode(enum.Enum):
    CASH = "Cash"
    CHEQUE = "Cheque"
    ONLINE_TRANSFER = "Online Transfer"
    NEFT_RTGS = "NEFT/RTGS"
    UPI = "UPI"
    OTHER = "Other"


class BrokerPayment(Base, AuditMixin):
    __tablename__ = "broker_payments"

    id = Column(Integer, primary_key=True, index=True)
    payment_no = Column(String, unique=True, nullable=False, index=True)
    payment_date = Column(Date, nullable=False)
    broker_id = Column(Integer, ForeignKey("brokers.id"), nullable=False, index=True)
    payment_amount = Column(Numeric(15, 2), nullable=False)
    payment_mode = Column(Enum(BrokerPaymentMode), default=BrokerPaymentMode.CASH, nullable=False)
    transaction_no = Column(String, nullable=True)
    remarks = Column(Text, nullable=True)

    # Relationships
    broker = relationship("Broker", back_populates="payments")
