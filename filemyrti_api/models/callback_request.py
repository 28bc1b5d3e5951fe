from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from filemyrti_api.database import Base

class CallbackRequest(Base):
    __tablename__ = "callback_requests"

    id = Column(Integer, primary_key=True, index=True)
    phone = Column(String(20), nullable=False)
    state_slug = Column(String(100), nullable=True, index=True)
    status = Column(String(20), nullable=False, default="pending")
    notes = Column(Text, nullable=True)
    called_at = Column(DateTime(timezone=True), nullable=True)  # Set when status becomes "called"

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
