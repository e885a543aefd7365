# app/domains/lims/models.py

"""
'lims' 도메인 (시료 접수 및 시험 등록부)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- Receipt: 고객이 시료를 맡길 때 발행하는 접수증.
- RegisterEntry: 한 배치(batch)의 시편에 대한 시험 기록. 원시 측정값(results)과
  승인 워크플로우 상태를 가지며, 인증서는 이 레코드로부터 파생됩니다.
"""

from typing import Optional, List, Dict, Any
from datetime import date, datetime, UTC
from enum import Enum

from sqlalchemy import JSON
from sqlalchemy.types import TIMESTAMP
from sqlalchemy.sql import func
from sqlmodel import Field, SQLModel, Column

from app.domains.rpt.shapes import SpecimenShape


class RegisterEntryStatus(str, Enum):
    """
    등록부 워크플로우 상태입니다.
    Pending Test -> Pending Initial Approval -> Pending Final Approval -> Approved | Rejected
    (인증서 파이프라인은 상태를 읽기만 하고 전이시키지 않습니다.)
    """
    PENDING_TEST = "Pending Test"
    PENDING_INITIAL_APPROVAL = "Pending Initial Approval"
    PENDING_FINAL_APPROVAL = "Pending Final Approval"
    APPROVED = "Approved"
    REJECTED = "Rejected"


# =============================================================================
# 1. lims_receipts 테이블 모델
# =============================================================================
class Receipt(SQLModel, table=True):
    __tablename__ = "lims_receipts"

    id: Optional[int] = Field(default=None, primary_key=True)
    receipt_id: str = Field(max_length=50, unique=True, index=True, description="접수 번호")
    laboratory_id: Optional[int] = Field(default=None, foreign_key="corp_laboratories.id", index=True)
    receipt_date: Optional[date] = Field(default=None, description="접수일")
    form_data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON), description="접수 양식 데이터")
    selected_categories: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSON), description="재료 분류별 요청 시험"
    )
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )


# =============================================================================
# 2. lims_register_entries 테이블 모델
# =============================================================================
class RegisterEntry(SQLModel, table=True):
    __tablename__ = "lims_register_entries"

    id: Optional[int] = Field(default=None, primary_key=True)
    laboratory_id: Optional[int] = Field(default=None, foreign_key="corp_laboratories.id", index=True)
    receipt_id: Optional[str] = Field(default=None, max_length=50, index=True, description="접수 번호")
    shape: SpecimenShape = Field(default=SpecimenShape.CUBE, description="시편 형상")

    client: Optional[str] = Field(default=None, max_length=200)
    project: Optional[str] = Field(default=None, max_length=255)
    date_received: Optional[date] = None
    casting_date: Optional[date] = None
    testing_date: Optional[date] = None
    date_of_issue: Optional[date] = None
    age: Optional[int] = Field(default=None, description="재령 (일)")
    area_of_use: Optional[str] = None
    sample_ids: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    set_id: Optional[str] = Field(default=None, max_length=50)
    machine_id: Optional[int] = Field(default=None, foreign_key="fms_correction_factor_machines.id")
    machine_used: Optional[str] = Field(default=None, max_length=100, description="시험기 표시명 (자유 입력)")
    temperature: Optional[float] = Field(default=None, description="시험실 온도 (°C)")
    certificate_number: Optional[str] = Field(default=None, max_length=50, index=True)
    technician: Optional[str] = Field(default=None, max_length=100)
    sampling_report: Optional[str] = None
    attachments: Optional[str] = None

    status: RegisterEntryStatus = Field(default=RegisterEntryStatus.PENDING_TEST, index=True)
    approved_by_engineer: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    approved_by_manager: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    rejection_reason: Optional[str] = None

    results: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON), description="시편별 원시 측정값")

    # --- 형상별 필드 ---
    concrete_class: Optional[str] = Field(default=None, max_length=50)
    design_strength: Optional[str] = Field(default=None, max_length=50, description="설계 압축강도 (예: '25 MPa')")
    paver_type: Optional[str] = Field(default=None, max_length=100)
    paver_thickness: Optional[str] = Field(default=None, max_length=50)
    pavers_per_square_metre: Optional[float] = None
    brick_type: Optional[str] = Field(default=None, max_length=100)
    mode_of_compaction: Optional[str] = Field(default=None, max_length=100)

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
