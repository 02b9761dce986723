from sqlalchemy import Boolean, Column, Date, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import AuditMixin
from utils.valuation import broker_commission_for, total_amount_for


class BookingStatus(enum.Enum):
    ACTIVE = "Active"
    CANCELLED = "Cancelled"


class LoanStatus(enum.Enum):
    NOT_APPLICABLE = "N/A"
    YES = "Yes"
    NO = "No"


class Booking(Base, AuditMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    booking_no = Column(String, unique=True, nullable=False, index=True)
    booking_date = Column(Date, nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    plot_no = Column(String, nullable=False)
    area = Column(Numeric(10, 2), nullable=False)
    plc = Column(Numeric(15, 2), default=0, nullable=False)
    rate = Column(Numeric(10, 2), nullable=False)
    associate_rate = Column(Numeric(10, 2), default=0, nullable=True)
    discount = Column(Numeric(10, 2), default=0, nullable=False)
    effective_rate = Column(Numeric(10, 2), nullable=False)
    legal_details = Column(Text, nullable=True)
    status = Column(Enum(BookingStatus), default=BookingStatus.ACTIVE, nullable=False)
    registry_completed = Column(Boolean, default=False, nullable=False)
    registry_date = Column(Date, nullable=True)
    expected_registry_date = Column(Date, nullable=True)
    loan = Column(Enum(LoanStatus), default=LoanStatus.NOT_APPLICABLE, nullable=False)
    broker_id = Column(Integer, ForeignKey("brokers.id"), nullable=True)

    # Relationships
    customer = relationship("Customer", back_populates="bookings")
    project = relationship("Project", back_populates="bookings")
    broker = relationship("Broker", back_populates="bookings")
    # Live ledger entries only; payments are always inserted through crud.payments
    payments = relationship(
        "Payment",
        primaryjoin="and_(Booking.id == Payment.booking_id, Payment.is_deleted == False)",
        order_by="Payment.receipt_date",
        viewonly=True,
    )

    # total_amount and broker_commission are derived on every read, never stored

    @property
    def total_amount(self):
        return total_amount_for(self.area, self.effective_rate, self.plc)

    @property
    def broker_commission(self):
        return broker_commission_for(self.area, self.rate, self.associate_rate, self.broker_id)
