from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional

# Public form bodies keep every field optional; the routes report missing
# fields with their own messages.

class ConsultationCreate(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    address: Optional[str] = None
    pincode: Optional[str] = None
    state_slug: Optional[str] = None
    source: Optional[str] = None

class ConsultationResponse(BaseModel):
    id: int
    full_name: str
    email: str
    mobile: str
    address: str
    pincode: str
    state_slug: Optional[str] = None
    source: str
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CallbackRequestCreate(BaseModel):
    phone: Optional[str] = None
    state_slug: Optional[str] = None

class CallbackRequestResponse(BaseModel):
    id: int
    phone: str
    state_slug: Optional[str] = None
    status: str
    notes: Optional[str] = None
    called_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class StatusUpdate(BaseModel):
    status: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None

class NewsletterRequest(BaseModel):
    email: Optional[str] = None

class NewsletterResponse(BaseModel):
    id: int
    email: str
    status: str
    subscribed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ContactCreate(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    message: Optional[str] = None

class CareerApplicationCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[str] = None
    coverLetter: Optional[str] = None
