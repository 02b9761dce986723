from models.audit_log import AuditLog
from models.booking import Booking, BookingStatus, LoanStatus
from models.broker import Broker
from models.broker_payment import BrokerPayment, BrokerPaymentMode
from models.customer import Customer
from models.document_sequence import DocumentSequence
from models.payments import Payment, PaymentMode, PaymentType
from models.project import Project
from models.users import User, UserRole

__all__ = ['AuditLog', 'Booking', 'BookingStatus', 'Broker', 'BrokerPayment', 'BrokerPaymentMode', 'Customer', 'DocumentSequence', 'LoanStatus', 'Payment', 'PaymentMode', 'PaymentType', 'Project', 'User', 'UserRole',]
