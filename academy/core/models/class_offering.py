"""Class offerings (e.g. Elementary Robotics). Model named ClassOffering to avoid Python 'class' keyword."""
import uuid
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID

from academy.db.session import Base


class ClassOffering(Base):
    """A class running weekly from start_date to end_date. Soft delete via status."""

    __tablename__ = "classes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    max_capacity = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default="Active")  # Active | Archived
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
