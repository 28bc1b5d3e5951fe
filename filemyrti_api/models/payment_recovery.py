from sqlalchemy import Column, Integer, String, Text, JSON, DateTime
from sqlalchemy.sql import func
from filemyrti_api.database import Base

RECOVERY_STATUSES = ("pending", "processed", "failed")

class PaymentRecovery(Base):
    """
    A captured payment whose RTI application failed to persist.

    Written once per failed attempt and reconciled manually by an admin.
    payment_id is deliberately not unique: a retried request that fails
    again produces another row.
    """
    __tablename__ = "payment_recoveries"

    id = Column(Integer, primary_key=True, index=True)
    payment_id = Column(String(255), nullable=False, index=True)
    order_id = Column(String(255), nullable=False)
    service_id = Column(Integer, nullable=False)
    state_id = Column(Integer, nullable=False)
    full_name = Column(String(100), nullable=False)
    mobile = Column(String(20), nullable=False)
    email = Column(String(100), nullable=False)
    rti_query = Column(Text, nullable=False)
    address = Column(Text, nullable=False)
    pincode = Column(String(10), nullable=False)
    error_message = Column(Text, nullable=True)
    request_body = Column(JSON, nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    application_id = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
