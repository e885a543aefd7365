# app/domains/fms/models.py

"""
'fms' 도메인 (시험 장비)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

압축강도 시험기는 장비별 선형 보정계수(factor_m, factor_c)를 가지며,
보정 파괴하중은 `load * factor_m + factor_c` 로 계산됩니다.
"""

from typing import Optional
from datetime import datetime, UTC

from sqlalchemy.types import TIMESTAMP
from sqlalchemy.sql import func
from sqlmodel import Field, SQLModel, Column


# =============================================================================
# 1. fms_correction_factor_machines 테이블 모델
# =============================================================================
class CorrectionFactorMachineBase(SQLModel):
    name: str = Field(max_length=100, description="시험기 이름 (인증서의 Machine ID로 표시)")
    tag_id: Optional[str] = Field(default=None, max_length=50, description="자산 태그")
    factor_m: float = Field(default=1.0, description="보정 기울기 (factorM)")
    factor_c: float = Field(default=0.0, description="보정 절편 (factorC, kN)")
    is_active: bool = Field(default=True, nullable=False)


class CorrectionFactorMachine(CorrectionFactorMachineBase, table=True):
    __tablename__ = "fms_correction_factor_machines"

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
