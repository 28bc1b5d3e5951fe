from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from filemyrti_api.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # argon2 hash, never serialized
    phone = Column(String(20), nullable=True)
    role = Column(String(20), nullable=False, default="user")  # user, admin

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
