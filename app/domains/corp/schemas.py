# app/domains/corp/schemas.py

from typing import Optional, Dict, Any
from pydantic import BaseModel, Field


class LaboratoryBase(BaseModel):
    """
    시험소 정보의 기본 속성을 정의하는 Pydantic Base 스키마입니다.
    """
    name: str = Field(..., max_length=200, description="시험소(회사) 이름")
    address: Optional[str] = Field(None, description="시험소 주소")
    email: Optional[str] = Field(None, max_length=200, description="대표 이메일")
    logo: Optional[str] = Field(None, description="로고 이미지 URL")
    location: Optional[str] = Field(None, max_length=200, description="시험소 위치 요약")
    company_details: Optional[Dict[str, Any]] = None
    address_details: Optional[Dict[str, Any]] = None
    contact_details: Optional[Dict[str, Any]] = None
    regulatory_details: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True  # ORM 모드 활성화


# --- API Schemas ---
class LaboratoryCreate(LaboratoryBase):
    pass


class LaboratoryRead(LaboratoryBase):
    id: int


class LaboratoryUpdate(BaseModel):
    """
    시험소 정보를 업데이트하기 위한 모델입니다. 모든 필드는 선택 사항입니다.
    """
    name: Optional[str] = Field(None, max_length=200)
    address: Optional[str] = None
    email: Optional[str] = Field(None, max_length=200)
    logo: Optional[str] = None
    location: Optional[str] = Field(None, max_length=200)
    company_details: Optional[Dict[str, Any]] = None
    address_details: Optional[Dict[str, Any]] = None
    contact_details: Optional[Dict[str, Any]] = None
    regulatory_details: Optional[Dict[str, Any]] = None
