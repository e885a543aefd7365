# app/domains/lims/routers.py

"""
'lims' 도메인 (시료 접수 및 시험 등록부) 관련 API 엔드포인트를 정의하는 모듈입니다.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import HTMLResponse
from sqlmodel.ext.asyncio.session import AsyncSession

# 중앙 의존성 관리 모듈 임포트
from app.core import dependencies as deps
from app.domains.rpt.shapes import SpecimenShape
from app.services.certificate_service import CertificateService
from app.services.pdf_renderer import PdfRenderer

# 도메인 관련 모듈 임포트
from . import crud as lims_crud
from . import schemas as lims_schemas
from .models import RegisterEntryStatus

router = APIRouter(
    tags=["Laboratory Information Management (실험실 정보 관리)"],  # Swagger UI에 표시될 태그
    responses={404: {"description": "Not found"}},  # 이 라우터의 공통 응답 정의
)


# =============================================================================
# 1. 시료 접수증 (Receipt) 라우터
# =============================================================================
@router.post("/receipts", response_model=lims_schemas.ReceiptRead, status_code=status.HTTP_201_CREATED, summary="새 접수증 생성")
async def create_receipt(
    receipt_in: lims_schemas.ReceiptCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """새로운 시료 접수증을 생성합니다. 접수 번호가 중복되면 400을 반환합니다."""
    return await lims_crud.receipt.create(db=db, obj_in=receipt_in)


@router.get("/receipts", response_model=List[lims_schemas.ReceiptRead], summary="접수증 목록 조회")
async def read_receipts(
    skip: int = 0,
    limit: int = 100,
    laboratory_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await lims_crud.receipt.get_multi(db, skip=skip, limit=limit, laboratory_id=laboratory_id)


@router.get("/receipts/{receipt_id}", response_model=lims_schemas.ReceiptRead, summary="접수 번호로 접수증 조회")
async def read_receipt(receipt_id: str, db: AsyncSession = Depends(deps.get_db_session)):
    service = CertificateService(db)
    return await service.get_receipt_or_404(receipt_id)


@router.patch("/receipts/{receipt_id}", response_model=lims_schemas.ReceiptRead, summary="접수증 업데이트")
async def update_receipt(
    receipt_id: str,
    receipt_in: lims_schemas.ReceiptUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_obj = await CertificateService(db).get_receipt_or_404(receipt_id)
    return await lims_crud.receipt.update(db=db, db_obj=db_obj, obj_in=receipt_in)


@router.get(
    "/receipts/{receipt_id}/register-entries",
    response_model=List[lims_schemas.RegisterEntryRead],
    summary="접수증에 속한 등록부 항목 조회",
)
async def read_receipt_register_entries(
    receipt_id: str,
    shape: Optional[SpecimenShape] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await lims_crud.register_entry.get_by_receipt(db, receipt_id=receipt_id, shape=shape)


@router.get("/receipts/{receipt_id}/preview", response_class=HTMLResponse, summary="접수증 HTML 미리보기")
async def preview_receipt(receipt_id: str, db: AsyncSession = Depends(deps.get_db_session)):
    """PDF 내보내기와 동일한 HTML을 반환합니다."""
    html = await CertificateService(db).receipt_html(receipt_id)
    return HTMLResponse(content=html)


@router.get("/receipts/{receipt_id}/pdf", summary="접수증 PDF 내보내기")
async def export_receipt_pdf(
    receipt_id: str,
    fallback: bool = Query(True, description="서버 렌더링 실패 시 HTML을 반환하여 클라이언트에서 인쇄"),
    db: AsyncSession = Depends(deps.get_db_session),
    renderer: PdfRenderer = Depends(deps.get_pdf_renderer),
):
    service = CertificateService(db, renderer)
    html = await service.receipt_html(receipt_id)
    return await service.pdf_response(html, f"receipt-{receipt_id}.pdf", fallback=fallback)


# =============================================================================
# 2. 시험 등록부 (RegisterEntry) 라우터
# =============================================================================
@router.post("/register-entries", response_model=lims_schemas.RegisterEntryRead, status_code=status.HTTP_201_CREATED, summary="새 등록부 항목 생성")
async def create_register_entry(
    entry_in: lims_schemas.RegisterEntryCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await lims_crud.register_entry.create(db=db, obj_in=entry_in)


@router.get("/register-entries", response_model=List[lims_schemas.RegisterEntryRead], summary="등록부 항목 목록 조회")
async def read_register_entries(
    skip: int = 0,
    limit: int = 100,
    shape: Optional[SpecimenShape] = None,
    status_filter: Optional[RegisterEntryStatus] = Query(None, alias="status"),
    laboratory_id: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """형상, 상태, 시험소로 필터링할 수 있습니다."""
    return await lims_crud.register_entry.get_multi(
        db, skip=skip, limit=limit, shape=shape, status=status_filter, laboratory_id=laboratory_id
    )


@router.get("/register-entries/{entry_id}", response_model=lims_schemas.RegisterEntryRead, summary="특정 등록부 항목 조회")
async def read_register_entry(entry_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await lims_crud.register_entry.get_or_404(db, entry_id)


@router.patch("/register-entries/{entry_id}", response_model=lims_schemas.RegisterEntryRead, summary="등록부 항목 업데이트")
async def update_register_entry(
    entry_id: int,
    entry_in: lims_schemas.RegisterEntryUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """측정값, 승인 기록, 상태 등을 부분 업데이트합니다."""
    db_obj = await lims_crud.register_entry.get_or_404(db, entry_id)
    return await lims_crud.register_entry.update(db=db, db_obj=db_obj, obj_in=entry_in)


@router.delete("/register-entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT, summary="등록부 항목 삭제")
async def delete_register_entry(entry_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await lims_crud.register_entry.get_or_404(db, entry_id)
    await lims_crud.register_entry.delete(db, id=entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
