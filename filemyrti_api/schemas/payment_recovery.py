from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, Literal, Optional

RecoveryStatus = Literal["pending", "processed", "failed"]

class PaymentRecoveryResponse(BaseModel):
    id: int
    payment_id: str
    order_id: str
    service_id: int
    state_id: int
    full_name: str
    mobile: str
    email: str
    rti_query: str
    address: str
    pincode: str
    error_message: Optional[str] = None
    request_body: Optional[Any] = None
    status: str
    application_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PaymentRecoveryStatusUpdate(BaseModel):
    status: RecoveryStatus
    application_id: Optional[int] = Field(None, ge=1, description="RTI application created while reconciling")
