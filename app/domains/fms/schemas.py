# app/domains/fms/schemas.py

"""
'fms' 도메인의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# 1. 보정계수 시험기 (CorrectionFactorMachine) 스키마
# =============================================================================
class CorrectionFactorMachineBase(BaseModel):
    name: str = Field(..., max_length=100, description="시험기 이름")
    tag_id: Optional[str] = Field(None, max_length=50, description="자산 태그")
    factor_m: float = Field(1.0, gt=0, description="보정 기울기")
    factor_c: float = Field(0.0, description="보정 절편 (kN)")
    is_active: bool = True
    laboratory_id: Optional[int] = None


class CorrectionFactorMachineCreate(CorrectionFactorMachineBase):
    pass


class CorrectionFactorMachineUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    tag_id: Optional[str] = Field(None, max_length=50)
    factor_m: Optional[float] = Field(None, gt=0)
    factor_c: Optional[float] = None
    is_active: Optional[bool] = None


class CorrectionFactorMachineRead(CorrectionFactorMachineBase):
    id: int

    class Config:
        from_attributes = True
