# app/domains/usr/models.py

"""
'usr' 도메인 (사용자 프로필)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

인증은 외부 ID 공급자가 담당하며, 이 테이블은 인증서 서명에 필요한
프로필 필드(이름, 이메일, 서명 이미지 URL)만 보관합니다.
"""

from typing import Optional
from datetime import datetime, UTC
from enum import Enum

from sqlmodel import Field, SQLModel, Column
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


# =============================================================================
# 사용자 역할
# =============================================================================
class UserRole(str, Enum):
    """인증서 워크플로우에서의 역할입니다. (권한 정책은 외부에서 관리)"""
    TECHNICIAN = "technician"
    ENGINEER = "engineer"        # 1차 승인 (Checked by)
    MANAGER = "manager"          # 최종 승인 (Approved by)
    ADMIN = "admin"


# =============================================================================
# 1. usr_users 테이블 모델
# =============================================================================
class UserBase(SQLModel):
    uid: str = Field(max_length=128, unique=True, index=True, description="ID 공급자의 사용자 고유 ID")
    name: Optional[str] = Field(default=None, max_length=100, description="표시 이름")
    email: Optional[str] = Field(default=None, max_length=200, description="이메일")
    signature_url: Optional[str] = Field(default=None, description="서명 이미지 URL")
    role: UserRole = Field(default=UserRole.TECHNICIAN, description="워크플로우 역할")
    status: str = Field(default="active", max_length=20, description="계정 상태")


class User(UserBase, table=True):
    __tablename__ = "usr_users"

    id: Optional[int] = Field(default=None, primary_key=True)
    laboratory_id: Optional[int] = Field(default=None, foreign_key="corp_laboratories.id", index=True)
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
