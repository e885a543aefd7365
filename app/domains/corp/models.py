# app/domains/corp/models.py

"""
'corp' 도메인 (시험소 정보)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

시험소(Laboratory) 레코드는 인증서 머리말의 회사 정보(이름, 주소, 이메일, 로고)와
시험 장소(test location)의 원천 데이터입니다.
"""

from typing import Optional, Dict, Any
from datetime import datetime, UTC

from sqlalchemy import JSON
from sqlalchemy.types import TIMESTAMP
from sqlalchemy.sql import func
from sqlmodel import Field, SQLModel, Column


# =============================================================================
# 1. corp_laboratories 테이블 모델
# =============================================================================
class LaboratoryBase(SQLModel):
    name: str = Field(max_length=200, description="시험소(회사) 이름")
    address: Optional[str] = Field(default=None, description="시험소 주소 (인증서 머리말 및 시험 장소)")
    email: Optional[str] = Field(default=None, max_length=200, description="대표 이메일")
    logo: Optional[str] = Field(default=None, description="로고 이미지 URL")
    location: Optional[str] = Field(default=None, max_length=200, description="시험소 위치 요약 (도시 등)")


class Laboratory(LaboratoryBase, table=True):
    """
    시험소 정보 테이블 모델입니다.
    구조화된 하위 문서(company/address/contact/regulatory)는 JSON 컬럼에 보관합니다.
    """
    __tablename__ = "corp_laboratories"

    id: Optional[int] = Field(default=None, primary_key=True)

    company_details: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    address_details: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    contact_details: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    regulatory_details: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )
