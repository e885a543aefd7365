# app/domains/lims/schemas.py

"""
'lims' 도메인 (시료 접수 및 시험 등록부)의 Pydantic 스키마를 정의하는 모듈입니다.

이 스키마들은 API 요청(Request) 및 응답(Response) 데이터의 유효성을 검사하고,
등록부의 JSON 컬럼(시험 결과, 승인 기록)에 저장되는 중첩 문서의 형태를 정의합니다.
"""

from typing import List, Optional, Dict, Any
from datetime import date
from pydantic import BaseModel, Field as PydanticField  # Pydantic Field와 SQLModel Field 충돌 방지

from .models import RegisterEntryStatus
from app.domains.rpt.shapes import SpecimenShape


# =============================================================================
# 1. 시편 측정값 (SampleTestResult) - 등록부 results JSON 항목
# =============================================================================
class HoleDescriptor(BaseModel):
    """중공 블록의 구멍/노치 치수 (길이 mm, 폭 mm, 개수)."""
    l: Optional[float] = PydanticField(default=None, ge=0)
    w: Optional[float] = PydanticField(default=None, ge=0)
    no: Optional[int] = PydanticField(default=None, ge=0)


class SampleTestResult(BaseModel):
    """
    시편 1개의 원시 측정값입니다. sample_id를 제외한 모든 값은 누락될 수 있으며,
    누락 값의 처리(0 또는 오류)는 MeasurementValidator가 결정합니다.
    """
    sample_id: str = PydanticField(description="시편 번호")
    length: Optional[float] = PydanticField(default=None, ge=0, description="길이 (mm)")
    width: Optional[float] = PydanticField(default=None, ge=0, description="폭 (mm)")
    height: Optional[float] = PydanticField(default=None, ge=0, description="높이 (mm)")
    weight: Optional[float] = PydanticField(default=None, ge=0, description="무게 (kg)")
    load: Optional[float] = PydanticField(default=None, ge=0, description="파괴하중 (kN)")
    corrected_failure_load: Optional[float] = PydanticField(default=None, ge=0, description="보정 파괴하중 (kN)")
    mode_of_failure: Optional[str] = None

    # --- 인터로킹 블록 ---
    measured_thickness: Optional[float] = PydanticField(default=None, ge=0, description="실측 두께 (mm)")
    calculated_area: Optional[float] = PydanticField(default=None, ge=0, description="평면적 (mm²)")

    # --- 벽돌 / 중공 블록 ---
    hole_a: Optional[HoleDescriptor] = None
    hole_b: Optional[HoleDescriptor] = None
    notch: Optional[HoleDescriptor] = None


class ApproverStamp(BaseModel):
    """승인 기록 (1차: 엔지니어, 최종: 매니저). date는 ISO 문자열로 보관합니다."""
    uid: Optional[str] = None
    name: Optional[str] = None
    date: Optional[str] = None


# =============================================================================
# 2. 시료 접수증 (Receipt) 스키마
# =============================================================================
class ReceiptFormData(BaseModel):
    """접수 양식 데이터. 알려진 필드 외의 값도 그대로 보존합니다."""
    client_name: Optional[str] = None
    client_address: Optional[str] = None
    client_contact: Optional[str] = None
    client_email: Optional[str] = None
    project_title: Optional[str] = None
    delivered_by: Optional[str] = None
    received_by: Optional[str] = None
    billing_address: Optional[str] = None
    transmittal_modes: List[str] = PydanticField(default_factory=list)

    class Config:
        extra = "allow"


class ReceiptBase(BaseModel):
    receipt_id: str = PydanticField(..., max_length=50, description="접수 번호 (예: REC-2024-001)")
    laboratory_id: Optional[int] = None
    receipt_date: Optional[date] = None
    form_data: ReceiptFormData = PydanticField(default_factory=ReceiptFormData)
    selected_categories: Dict[str, List[str]] = PydanticField(
        default_factory=dict, description="재료 분류별 요청 시험 목록"
    )


class ReceiptCreate(ReceiptBase):
    pass


class ReceiptUpdate(BaseModel):
    receipt_date: Optional[date] = None
    form_data: Optional[ReceiptFormData] = None
    selected_categories: Optional[Dict[str, List[str]]] = None


class ReceiptRead(ReceiptBase):
    id: int

    class Config:
        from_attributes = True


# =============================================================================
# 3. 시험 등록부 (RegisterEntry) 스키마
# =============================================================================
class RegisterEntryBase(BaseModel):
    laboratory_id: Optional[int] = None
    receipt_id: Optional[str] = PydanticField(None, description="접수 번호 (Receipt.receipt_id)")
    shape: SpecimenShape = SpecimenShape.CUBE
    client: Optional[str] = None
    project: Optional[str] = None
    date_received: Optional[date] = None
    casting_date: Optional[date] = None
    testing_date: Optional[date] = None
    date_of_issue: Optional[date] = None
    age: Optional[int] = PydanticField(None, ge=0, description="재령 (일)")
    area_of_use: Optional[str] = None
    sample_ids: List[str] = PydanticField(default_factory=list)
    set_id: Optional[str] = None
    machine_id: Optional[int] = None
    machine_used: Optional[str] = None
    temperature: Optional[float] = None
    certificate_number: Optional[str] = None
    technician: Optional[str] = None
    sampling_report: Optional[str] = None
    attachments: Optional[str] = None
    status: RegisterEntryStatus = RegisterEntryStatus.PENDING_TEST
    approved_by_engineer: Optional[ApproverStamp] = None
    approved_by_manager: Optional[ApproverStamp] = None
    rejection_reason: Optional[str] = None
    results: List[SampleTestResult] = PydanticField(default_factory=list)

    # --- 형상별 필드 ---
    concrete_class: Optional[str] = None
    design_strength: Optional[str] = None
    paver_type: Optional[str] = None
    paver_thickness: Optional[str] = PydanticField(None, description="예: '80 mm Plain'")
    pavers_per_square_metre: Optional[float] = PydanticField(None, gt=0)
    brick_type: Optional[str] = None
    mode_of_compaction: Optional[str] = None


class RegisterEntryCreate(RegisterEntryBase):
    pass


class RegisterEntryUpdate(BaseModel):
    client: Optional[str] = None
    project: Optional[str] = None
    casting_date: Optional[date] = None
    testing_date: Optional[date] = None
    date_of_issue: Optional[date] = None
    age: Optional[int] = PydanticField(None, ge=0)
    area_of_use: Optional[str] = None
    machine_id: Optional[int] = None
    machine_used: Optional[str] = None
    temperature: Optional[float] = None
    certificate_number: Optional[str] = None
    technician: Optional[str] = None
    status: Optional[RegisterEntryStatus] = None
    approved_by_engineer: Optional[ApproverStamp] = None
    approved_by_manager: Optional[ApproverStamp] = None
    rejection_reason: Optional[str] = None
    results: Optional[List[SampleTestResult]] = None
    concrete_class: Optional[str] = None
    design_strength: Optional[str] = None
    paver_type: Optional[str] = None
    paver_thickness: Optional[str] = None
    pavers_per_square_metre: Optional[float] = PydanticField(None, gt=0)
    brick_type: Optional[str] = None
    mode_of_compaction: Optional[str] = None


class RegisterEntryRead(RegisterEntryBase):
    id: int

    class Config:
        from_attributes = True
