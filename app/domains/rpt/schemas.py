# app/domains/rpt/schemas.py

"""
인증서 렌더링 모델(CertificateData)과 계산 API의 Pydantic 스키마입니다.

CertificateData는 camelCase 별칭으로 직렬화되며, 별칭 이름이 곧
HTML 템플릿의 `{{token}}` 이름입니다. (예: certificate_no -> {{certificateNo}})
"""

from typing import List, Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from app.domains.lims.schemas import SampleTestResult
from .shapes import SpecimenShape


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# =============================================================================
# 1. 결과표 행 / 시험 조건
# =============================================================================
class SpecimenMetrics(CamelModel):
    """인증서 결과표 한 행에 표시되는 파생 수치입니다."""
    sample_id: str = ""
    length: float = 0.0
    width: float = 0.0
    height: float = 0.0
    area: float = 0.0
    weight: float = 0.0
    density: float = 0.0
    load: float = 0.0
    corrected_load: float = 0.0
    strength: float = 0.0
    correction_factor: Optional[float] = None
    mode_of_failure: Optional[str] = None


class TestCondition(CamelModel):
    """형상별 시험 조건 라벨/값 쌍 (예: 'Class of Concrete' / 'C25')."""
    __test__ = False  # pytest 수집 대상에서 제외

    label: str
    value: str


# =============================================================================
# 2. 인증서 데이터 (CertificateData)
# =============================================================================
class CertificateData(CamelModel):
    """
    완전히 해석된 인증서 렌더링 모델입니다.
    등록부 + 접수증 + 시험소 + 시험기 + 승인자 레코드로부터 매번 새로 만들어지며 저장되지 않습니다.
    """
    shape: SpecimenShape = SpecimenShape.CUBE

    # --- 회사 정보 ---
    logo_url: str = ""
    company_name: str = ""
    company_address: str = ""
    company_email: str = ""

    # --- 인증서 식별 ---
    certificate_no: str = "N/A"
    date_of_issue: str = "N/A"
    version: str = "01"

    # --- 고객 / 프로젝트 ---
    client_name: str = "N/A"
    client_address: str = "N/A"
    client_contact: str = "N/A"
    project_title: str = "N/A"
    condition_at_receipt: str = "Satisfactory"
    date_of_receipt: str = "N/A"
    sampling_report: Optional[str] = None
    nature_of_test: str = ""
    tested_by: str = "N/A"
    test_methods: str = ""
    test_location: str = "N/A"
    attachments: Optional[str] = None

    # --- 시료 설명 ---
    sample_count_text: str = ""
    sample_description: str = ""
    results_title: str = ""

    # --- 시험 조건 ---
    sample_type: str = ""
    testing_age: str = ""
    compressive_testing_machine_id: str = "N/A"
    curing_condition: Optional[str] = None
    curing_period: Optional[str] = None
    facility_temperature: str = ""
    type_of_failure: Optional[str] = None
    shape_conditions: List[TestCondition] = Field(default_factory=list)

    # --- 결과 ---
    results: List[SpecimenMetrics] = Field(default_factory=list)
    date_of_casting: str = "N/A"
    date_of_testing: str = "N/A"
    average_compressive_strength: Optional[str] = None
    repeatability_exceeded: bool = False

    # --- 서명 / 비고 ---
    engineer_name: str = "N/A"
    engineer_signature_url: Optional[str] = None
    manager_name: Optional[str] = None
    manager_signature_url: Optional[str] = None
    remarks: List[str] = Field(default_factory=list)
    status: Optional[str] = None


# =============================================================================
# 3. 단일 시편 계산 API
# =============================================================================
class SpecimenCalculationRequest(CamelModel):
    shape: SpecimenShape
    result: SampleTestResult
    machine_id: Optional[int] = Field(None, description="등록된 시험기 ID (보정계수 조회)")
    factor_m: Optional[float] = Field(None, gt=0, description="시험기 없이 직접 지정하는 보정 기울기")
    factor_c: Optional[float] = None
    paver_thickness: Optional[str] = None
    pavers_per_square_metre: Optional[float] = Field(None, gt=0)
    strict: Optional[bool] = Field(None, description="누락 측정값을 오류로 처리할지 여부 (기본값: 설정)")
