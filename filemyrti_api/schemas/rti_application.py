import re
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Literal, Optional

ApplicationStatus = Literal["pending", "submitted", "in_progress", "completed", "rejected"]

INDIAN_PINCODE = re.compile(r"^[1-9][0-9]{5}$")
RTI_QUERY_MAX_LENGTH = 5000


class RTIApplicationCreate(BaseModel):
    service_id: int = Field(..., ge=1, description="Service ID must be a valid integer")
    state_id: int = Field(..., ge=1, description="State ID must be a valid integer")
    full_name: str
    mobile: str
    email: EmailStr
    rti_query: Optional[str] = Field(None, description="Optional, at most 5000 characters")
    address: str
    pincode: str
    payment_id: Optional[str] = None
    order_id: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def full_name_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2 or len(value) > 100:
            raise ValueError("Full name must be between 2 and 100 characters")
        return value

    @field_validator("mobile")
    @classmethod
    def mobile_digits(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Mobile number is required")
        digits = re.sub(r"\D", "", value)
        if len(digits) < 10 or len(digits) > 13:
            raise ValueError("Mobile number must be between 10 and 13 digits")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("rti_query")
    @classmethod
    def rti_query_length(cls, value: Optional[str]) -> str:
        # Optional: any length including empty, never more than 5000 characters
        value = (value or "").strip()
        if len(value) > RTI_QUERY_MAX_LENGTH:
            raise ValueError("RTI query must not exceed 5000 characters")
        return value

    @field_validator("address")
    @classmethod
    def address_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 10 or len(value) > 500:
            raise ValueError("Address must be between 10 and 500 characters")
        return value

    @field_validator("pincode")
    @classmethod
    def indian_pincode(cls, value: str) -> str:
        value = value.strip()
        if not INDIAN_PINCODE.match(value):
            raise ValueError("Please provide a valid Indian pincode")
        return value

    @field_validator("payment_id", "order_id")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    class Config:
        json_schema_extra = {
            "example": {
                "service_id": 1,
                "state_id": 7,
                "full_name": "Ravi Kumar",
                "mobile": "9876543210",
                "email": "ravi@example.com",
                "rti_query": "Copies of the tender documents for road repair in Ward 12",
                "address": "12, MG Road, Indiranagar, Bengaluru",
                "pincode": "560038",
                "payment_id": "pay_Nx1qk0fU3b2Xy9",
                "order_id": "order_Nx1pQ8nF0aL2mT"
            }
        }

class RTIApplicationUpdate(BaseModel):
    rti_query: Optional[str] = Field(None, max_length=RTI_QUERY_MAX_LENGTH)
    address: Optional[str] = Field(None, min_length=10, max_length=500)
    pincode: Optional[str] = Field(None, pattern=r"^[1-9][0-9]{5}$")
    status: Optional[ApplicationStatus] = None

class RTIApplicationStatusUpdate(BaseModel):
    status: str

class RTIApplicationResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    service_id: int
    state_id: int
    full_name: str
    mobile: str
    email: str
    rti_query: str
    address: str
    pincode: str
    payment_id: Optional[str] = None
    order_id: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    service_name: Optional[str] = None
    state_name: Optional[str] = None
