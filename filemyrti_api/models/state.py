from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from filemyrti_api.database import Base

class State(Base):
    __tablename__ = "states"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    slug = Column(String(100), unique=True, index=True, nullable=False)  # Looked up case-insensitively
    description = Column(Text, nullable=True)
    rti_portal_url = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
