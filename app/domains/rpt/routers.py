# app/domains/rpt/routers.py

"""
'rpt' 도메인 (시험 성적서/인증서) 관련 API 엔드포인트를 정의하는 모듈입니다.

미리보기(HTML)와 내보내기(PDF)는 같은 HTML 생성 함수를 사용합니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.config import settings
from app.domains.fms import crud as fms_crud
from app.domains.fms.models import CorrectionFactorMachine
from app.services.certificate_service import CertificateService, certificate_filename
from app.services.pdf_renderer import PdfRenderer
from . import calculations as calc
from . import schemas

router = APIRouter(
    tags=["Report Management (보고서 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 등록부 항목 기반 인증서
# =============================================================================
@router.get("/register-entries/{entry_id}/certificate", response_model=schemas.CertificateData, response_model_by_alias=True)
async def read_certificate_data(
    entry_id: int,
    strict: Optional[bool] = Query(None, description="누락 측정값을 오류(422)로 처리"),
    session: AsyncSession = Depends(deps.get_db_session),
):
    """
    등록부 항목으로부터 인증서 렌더링 데이터(CertificateData)를 만들어 반환합니다.
    키 이름은 템플릿 토큰과 같은 camelCase입니다.
    """
    return await CertificateService(session).build_certificate_data(entry_id, strict=strict)


@router.get("/register-entries/{entry_id}/certificate/preview", response_class=HTMLResponse)
async def preview_certificate(
    entry_id: int,
    strict: Optional[bool] = None,
    session: AsyncSession = Depends(deps.get_db_session),
):
    """인증서 HTML 미리보기. PDF 내보내기와 같은 HTML입니다."""
    service = CertificateService(session)
    data = await service.build_certificate_data(entry_id, strict=strict)
    return HTMLResponse(content=await service.certificate_html(data))


@router.get("/register-entries/{entry_id}/certificate/pdf")
async def export_certificate_pdf(
    entry_id: int,
    fallback: bool = Query(True, description="서버 렌더링 실패 시 HTML을 반환하여 클라이언트에서 인쇄"),
    save: bool = Query(False, description="생성된 PDF를 CERTIFICATE_OUTPUT_DIR에 저장"),
    strict: Optional[bool] = None,
    session: AsyncSession = Depends(deps.get_db_session),
    renderer: PdfRenderer = Depends(deps.get_pdf_renderer),
):
    """
    인증서를 PDF로 내보냅니다.
    서버 렌더링이 실패하면 `X-Render-Fallback: client` 헤더와 함께 HTML을 반환합니다.
    """
    service = CertificateService(session, renderer)
    data = await service.build_certificate_data(entry_id, strict=strict)
    html = await service.certificate_html(data)
    return await service.pdf_response(
        html, certificate_filename(data, entry_id), fallback=fallback, save=save
    )


# =============================================================================
# 2. 클라이언트가 조립한 CertificateData 기반 렌더링
# =============================================================================
@router.post("/certificates/preview", response_class=HTMLResponse)
async def preview_certificate_data(
    data: schemas.CertificateData,
    session: AsyncSession = Depends(deps.get_db_session),
):
    return HTMLResponse(content=await CertificateService(session).certificate_html(data))


@router.post("/certificates/pdf")
async def export_certificate_data_pdf(
    data: schemas.CertificateData,
    fallback: bool = True,
    session: AsyncSession = Depends(deps.get_db_session),
    renderer: PdfRenderer = Depends(deps.get_pdf_renderer),
):
    service = CertificateService(session, renderer)
    html = await service.certificate_html(data)
    return await service.pdf_response(html, certificate_filename(data, 0), fallback=fallback)


# =============================================================================
# 3. 단일 시편 계산
# =============================================================================
@router.post("/calculations/specimen", response_model=schemas.SpecimenMetrics, response_model_by_alias=True)
async def calculate_specimen(
    request_in: schemas.SpecimenCalculationRequest,
    session: AsyncSession = Depends(deps.get_db_session),
):
    """
    등록부 입력 화면에서 시편 1개의 파생 수치(면적, 밀도, 보정 하중, 강도)를 계산합니다.
    machine_id가 있으면 등록된 보정계수를, 없으면 factor_m/factor_c를 사용합니다.
    """
    machine = None
    if request_in.machine_id is not None:
        machine = await fms_crud.machine.get_or_404(session, request_in.machine_id)
    elif request_in.factor_m is not None:
        machine = CorrectionFactorMachine(
            name="ad-hoc", factor_m=request_in.factor_m, factor_c=request_in.factor_c or 0.0
        )

    strict = settings.STRICT_MEASUREMENTS if request_in.strict is None else request_in.strict
    return calc.compute_specimen_metrics(
        request_in.result,
        request_in.shape,
        machine=machine,
        paver_thickness=request_in.paver_thickness,
        pavers_per_square_metre=request_in.pavers_per_square_metre,
        validator=calc.MeasurementValidator(strict=strict),
        legacy_factor=settings.LEGACY_CORRECTION_FACTOR,
    )
