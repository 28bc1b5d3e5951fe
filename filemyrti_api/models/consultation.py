from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from filemyrti_api.database import Base

class Consultation(Base):
    __tablename__ = "consultations"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=False, index=True)
    mobile = Column(String(20), nullable=False)
    address = Column(Text, nullable=False, default="")
    pincode = Column(String(10), nullable=False, default="")
    state_slug = Column(String(100), nullable=True, index=True)
    source = Column(String(50), nullable=False, default="hero_section")
    status = Column(String(20), nullable=False, default="pending")
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
