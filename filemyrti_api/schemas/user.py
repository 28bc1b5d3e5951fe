import re
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def _validate_phone(value: Optional[str]) -> Optional[str]:
    if not value or not value.strip():
        return None
    digits = re.sub(r"\D", "", value)
    if len(digits) < 10 or len(digits) > 13:
        raise ValueError("Phone number must be between 10 and 13 digits")
    return value.strip()


class UserRegister(BaseModel):
    name: str = Field(..., description="Full name (2-100 characters)")
    email: EmailStr
    password: str = Field(..., min_length=6, description="At least 6 characters with upper, lower and a digit")
    phone: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2 or len(value) > 100:
            raise ValueError("Name must be between 2 and 100 characters")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        if not PASSWORD_PATTERN.match(value):
            raise ValueError("Password must contain at least one uppercase letter, one lowercase letter, and one number")
        return value

    @field_validator("phone")
    @classmethod
    def phone_digits(cls, value: Optional[str]) -> Optional[str]:
        return _validate_phone(value)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Asha Verma",
                "email": "asha@example.com",
                "password": "Secret123",
                "phone": "+91 98765 43210"
            }
        }

class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def phone_digits(cls, value: Optional[str]) -> Optional[str]:
        return _validate_phone(value)

class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
