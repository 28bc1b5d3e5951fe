from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime
from sqlalchemy.sql import func
from filemyrti_api.database import Base

class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    slug = Column(String(200), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    full_description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=True)  # Rupees
    original_price = Column(Numeric(10, 2), nullable=True)
    button_text = Column(String(100), nullable=True)
    icon = Column(String(100), nullable=True)
    icon_text = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
