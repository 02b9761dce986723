from sqlalchemy import Boolean, Column, Integer, String, Text
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin


class Project(Base, AuditMixin):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    legal_details = Column(Text, nullable=True)  # default legal text copied onto bookings
    total_plots = Column(Integer, default=0, nullable=False)
    available_plots = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    bookings = relationship("Booking", back_populates="project")
