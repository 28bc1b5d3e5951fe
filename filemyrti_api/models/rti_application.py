from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from filemyrti_api.database import Base

APPLICATION_STATUSES = ("pending", "submitted", "in_progress", "completed", "rejected")

class RTIApplication(Base):
    __tablename__ = "rti_applications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)  # Null for public submissions
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)
    state_id = Column(Integer, ForeignKey("states.id"), nullable=False, index=True)
    full_name = Column(String(100), nullable=False)
    mobile = Column(String(20), nullable=False)
    email = Column(String(100), nullable=False)
    rti_query = Column(Text, nullable=False, default="")
    address = Column(Text, nullable=False)
    pincode = Column(String(10), nullable=False)
    payment_id = Column(String(255), nullable=True, index=True)
    order_id = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default="pending")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User")
    service = relationship("Service")
    state = relationship("State")
