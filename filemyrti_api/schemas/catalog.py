from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional

class ServiceBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    full_description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, description="Price in rupees")
    original_price: Optional[Decimal] = Field(None, ge=0)
    button_text: Optional[str] = Field(None, max_length=100)
    icon: Optional[str] = Field(None, max_length=100)
    icon_text: Optional[str] = Field(None, max_length=100)

class ServiceCreate(ServiceBase):
    slug: str = Field(..., min_length=1, max_length=200, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

class ServiceUpdate(ServiceBase):
    pass

class ServiceResponse(ServiceBase):
    id: int
    slug: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class StateBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    rti_portal_url: Optional[str] = Field(None, max_length=500)

class StateCreate(StateBase):
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

class StateUpdate(StateBase):
    pass

class StateResponse(StateBase):
    id: int
    slug: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
