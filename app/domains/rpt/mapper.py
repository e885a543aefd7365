# app/domains/rpt/mapper.py

"""
외부 레코드(시험소, 접수증, 등록부, 시험기, 승인자)를 CertificateData로 변환하는 매퍼입니다.

형상별로 복제된 매퍼 대신 하나의 함수가 ShapeDescriptor를 받아
결과표 컬럼, 시험 조건 라벨, 시험 방법, 비고만 바꿔 끼웁니다.
모든 입력은 순수 데이터이며, DB 조회는 certificate_service가 담당합니다.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, List, Optional

from app.domains.lims.schemas import SampleTestResult
from . import calculations as calc
from .schemas import CertificateData, SpecimenMetrics, TestCondition
from .shapes import (
    REPEATABILITY_REMARK,
    ShapeDescriptor,
    SpecimenShape,
    get_descriptor,
    standard_remarks,
)

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"


# =============================================================================
# 1. 값 포맷 헬퍼
# =============================================================================
def format_date(value: Any) -> str:
    """date/datetime/ISO 문자열을 dd/MM/yyyy로 변환합니다. 누락되거나 해석할 수 없으면 'N/A'."""
    if value is None or value == "":
        return NOT_AVAILABLE
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).strftime("%d/%m/%Y")
        except ValueError:
            logger.debug("Unparsable date value: %r", value)
            return NOT_AVAILABLE
    return NOT_AVAILABLE


def _text(value: Any, default: str = NOT_AVAILABLE) -> str:
    if value is None:
        return default
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, float):
        # 지수 표기 없이 불필요한 0만 제거 (50.0 -> '50', 1234567.0 -> '1234567')
        return format(Decimal(str(value)).normalize(), "f")
    text = str(value).strip()
    return text or default


def get_field(record: Any, name: str) -> Any:
    """dict와 ORM/Pydantic 객체 모두에서 필드를 꺼냅니다."""
    if record is None:
        return None
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def signature_name(stamp: Any, user: Any) -> str:
    """서명자 이름: 저장된 승인자 이름 -> 사용자 이름 -> 사용자 이메일 -> 'N/A'."""
    for candidate in (get_field(stamp, "name"), get_field(user, "name"), get_field(user, "email")):
        if candidate and str(candidate).strip():
            return str(candidate).strip()
    return NOT_AVAILABLE


def sample_description(count: int, descriptor: ShapeDescriptor) -> str:
    return f"{calc.sample_count_text(count)} {descriptor.noun} were delivered to the laboratory for testing"


# =============================================================================
# 2. 결과 계산
# =============================================================================
def compute_results(
    entry: Any,
    descriptor: ShapeDescriptor,
    *,
    machine: Any = None,
    validator: Optional[calc.MeasurementValidator] = None,
    legacy_factor: float = calc.DEFAULT_LEGACY_CORRECTION_FACTOR,
) -> List[SpecimenMetrics]:
    raw_results: Iterable[Any] = get_field(entry, "results") or []
    metrics = []
    for raw in raw_results:
        result = SampleTestResult.model_validate(raw)
        metrics.append(
            calc.compute_specimen_metrics(
                result,
                descriptor.shape,
                machine=machine,
                paver_thickness=get_field(entry, "paver_thickness"),
                pavers_per_square_metre=get_field(entry, "pavers_per_square_metre"),
                validator=validator,
                legacy_factor=legacy_factor,
            )
        )
    return metrics


def _shape_conditions(entry: Any, descriptor: ShapeDescriptor) -> List[TestCondition]:
    return [
        TestCondition(label=field.label, value=_text(get_field(entry, field.source), field.default))
        for field in descriptor.conditions
    ]


def _sample_type(entry: Any, descriptor: ShapeDescriptor) -> str:
    if descriptor.shape == SpecimenShape.BRICK:
        return _text(get_field(entry, "brick_type"), descriptor.default_sample_type)
    return descriptor.default_sample_type


# =============================================================================
# 3. 인증서 데이터 매핑
# =============================================================================
def map_certificate_data(
    entry: Any,
    *,
    receipt: Any = None,
    laboratory: Any = None,
    machine: Any = None,
    engineer: Any = None,
    manager: Any = None,
    validator: Optional[calc.MeasurementValidator] = None,
    legacy_factor: float = calc.DEFAULT_LEGACY_CORRECTION_FACTOR,
    repeatability_threshold: float = calc.DEFAULT_REPEATABILITY_THRESHOLD,
    today: Optional[date] = None,
) -> CertificateData:
    """
    등록부 항목과 주변 레코드로부터 CertificateData를 조립합니다.

    Args:
        entry: 등록부 항목 (RegisterEntry 모델, 스키마 또는 dict).
        receipt: 접수증. form_data에서 고객 주소/연락처를 가져옵니다.
        laboratory: 시험소. 회사 정보와 시험 장소의 원천입니다.
        machine: 보정계수를 가진 시험기. 없으면 고정 배율로 보정합니다.
        engineer, manager: 승인자 사용자 프로필 (서명 이름/이미지).
        validator: 누락 측정값 처리 정책 (기본: lenient).
        today: 발행일이 없을 때 사용할 날짜 (기본: 오늘).

    Returns:
        CertificateData: 템플릿에 바로 채울 수 있는 렌더링 모델.

    Raises:
        MeasurementValidationError: strict 모드에서 측정값이 누락된 경우.
    """
    descriptor = get_descriptor(get_field(entry, "shape") or SpecimenShape.CUBE)
    form_data = get_field(receipt, "form_data") or {}

    metrics = compute_results(
        entry, descriptor, machine=machine, validator=validator, legacy_factor=legacy_factor
    )
    # 평균과 반복성은 반올림 전 강도로 판정합니다.
    strengths = [row.strength for row in metrics]
    repeatability_exceeded = calc.exceeds_repeatability(strengths, repeatability_threshold)

    remarks = list(standard_remarks(descriptor))
    if repeatability_exceeded:
        remarks.append(REPEATABILITY_REMARK.format(threshold=repeatability_threshold))
        average = NOT_AVAILABLE
        logger.info(
            "Register entry %s exceeds repeatability (r = %g%%); average withheld",
            get_field(entry, "id"), repeatability_threshold,
        )
    else:
        average = calc.average_compressive_strength(strengths)

    count = len(metrics) or len(get_field(entry, "sample_ids") or [])
    first_failure = metrics[0].mode_of_failure if metrics else None
    temperature = get_field(entry, "temperature")
    age = get_field(entry, "age")
    engineer_stamp = get_field(entry, "approved_by_engineer")
    manager_stamp = get_field(entry, "approved_by_manager")

    return CertificateData(
        shape=descriptor.shape,
        logo_url=_text(get_field(laboratory, "logo"), ""),
        company_name=_text(get_field(laboratory, "name"), ""),
        company_address=_text(get_field(laboratory, "address"), ""),
        company_email=_text(get_field(laboratory, "email"), ""),
        certificate_no=_text(get_field(entry, "certificate_number")),
        date_of_issue=format_date(get_field(entry, "date_of_issue") or today or date.today()),
        version="01",
        client_name=_text(get_field(form_data, "client_name") or get_field(entry, "client")),
        client_address=_text(get_field(form_data, "client_address")),
        client_contact=_text(get_field(form_data, "client_contact")),
        project_title=_text(get_field(form_data, "project_title") or get_field(entry, "project")),
        date_of_receipt=format_date(get_field(receipt, "receipt_date") or get_field(entry, "date_received")),
        sampling_report=get_field(entry, "sampling_report"),
        nature_of_test=descriptor.nature_of_test,
        tested_by=_text(get_field(entry, "technician")),
        test_methods=descriptor.test_method,
        test_location=_text(get_field(laboratory, "address")),
        attachments=get_field(entry, "attachments"),
        sample_count_text=calc.sample_count_text(count),
        sample_description=sample_description(count, descriptor),
        results_title=descriptor.results_title,
        sample_type=_sample_type(entry, descriptor),
        testing_age=f"{age if age is not None else '>28'} Days",
        compressive_testing_machine_id=_text(get_field(machine, "name") or get_field(entry, "machine_used")),
        curing_condition="Tested as Received",
        facility_temperature=f"{_text(temperature, '24')} Degrees Celsius",
        type_of_failure=first_failure,
        shape_conditions=_shape_conditions(entry, descriptor),
        results=metrics,
        date_of_casting=format_date(get_field(entry, "casting_date")),
        date_of_testing=format_date(get_field(entry, "testing_date")),
        average_compressive_strength=average,
        repeatability_exceeded=repeatability_exceeded,
        engineer_name=signature_name(engineer_stamp, engineer),
        engineer_signature_url=get_field(engineer, "signature_url"),
        manager_name=signature_name(manager_stamp, manager),
        manager_signature_url=get_field(manager, "signature_url"),
        remarks=remarks,
        status=_text(get_field(entry, "status"), "") or None,
    )
