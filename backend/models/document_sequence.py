from sqlalchemy import Column, Integer, String
from database import Base
from models.audit_mixin import TimestampMixin


class DocumentSequence(Base, TimestampMixin):
    """Counter row for one family of generated document numbers.

    `next_value` is read and incremented under a row lock inside the same
    transaction as the insert it numbers.
    """
    __tablename__ = "document_sequences"

    name = Column(String(50), primary_key=True)
    next_value = Column(Integer, nullable=False)
