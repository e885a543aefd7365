# app/domains/usr/schemas.py

from typing import Optional
from pydantic import BaseModel, Field

from .models import UserRole


class UserBase(BaseModel):
    uid: str = Field(..., max_length=128, description="ID 공급자의 사용자 고유 ID")
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=200)
    signature_url: Optional[str] = None
    role: UserRole = UserRole.TECHNICIAN
    status: str = "active"
    laboratory_id: Optional[int] = None


class UserCreate(UserBase):
    pass


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=200)
    signature_url: Optional[str] = None
    role: Optional[UserRole] = None
    status: Optional[str] = None


class UserRead(UserBase):
    id: int

    class Config:
        from_attributes = True
