# app/services/certificate_service.py

"""
등록부 항목 하나로부터 인증서(HTML/PDF)를 만드는 상위 서비스 모듈입니다.

여러 도메인(lims, corp, fms, usr)의 CRUD를 조합하여 관련 레코드를 순서대로 조회한 뒤,
순수 함수인 매퍼와 템플릿 모듈에 넘기고, 필요한 경우 PdfRenderer로 PDF를 만듭니다.
"""

import logging
from datetime import date
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from fastapi.responses import HTMLResponse, JSONResponse, Response
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.exceptions import CertificateRenderError
from app.domains.corp import crud as corp_crud
from app.domains.fms import crud as fms_crud
from app.domains.lims import crud as lims_crud
from app.domains.rpt import calculations as calc
from app.domains.rpt import templates as rpt_templates
from app.domains.rpt.mapper import get_field, map_certificate_data
from app.domains.rpt.schemas import CertificateData
from app.domains.usr import crud as usr_crud
from app.services.pdf_renderer import PdfRenderer
from app.utils.files import save_pdf_bytes

logger = logging.getLogger(__name__)

FALLBACK_HEADER = "X-Render-Fallback"
BOTH_PATHS_FAILED = "Both server-side and client-side PDF generation failed"


def _pdf_headers(filename: str) -> Dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


class CertificateService:
    """
    인증서 생성 흐름을 담당하는 서비스 클래스입니다.

    Args:
        db (AsyncSession): 데이터베이스 세션.
        renderer (Optional[PdfRenderer]): PDF 변환기. HTML만 필요한 경우 생략할 수 있습니다.
    """

    def __init__(self, db: AsyncSession, renderer: Optional[PdfRenderer] = None):
        self.db = db
        self.renderer = renderer

    # =========================================================================
    # 1. 레코드 조회
    # =========================================================================
    async def _load_related(self, entry: Any) -> Dict[str, Any]:
        """
        인증서에 필요한 주변 레코드를 조회합니다.
        등록부 항목 외의 레코드는 없어도 인증서를 만들 수 있으므로 경고만 기록합니다.
        """
        related: Dict[str, Any] = {}

        receipt_id = get_field(entry, "receipt_id")
        related["receipt"] = (
            await lims_crud.receipt.get_by_receipt_id(self.db, receipt_id=receipt_id) if receipt_id else None
        )
        if related["receipt"] is None:
            logger.warning("Receipt '%s' not found for register entry %s", receipt_id, entry.id)

        laboratory_id = get_field(entry, "laboratory_id") or get_field(related["receipt"], "laboratory_id")
        related["laboratory"] = (
            await corp_crud.laboratory.get(self.db, laboratory_id) if laboratory_id else None
        )
        if related["laboratory"] is None:
            logger.warning("Laboratory not found for register entry %s", entry.id)

        machine_id = get_field(entry, "machine_id")
        related["machine"] = await fms_crud.machine.get(self.db, machine_id) if machine_id else None

        for role, stamp_field in (("engineer", "approved_by_engineer"), ("manager", "approved_by_manager")):
            uid = get_field(get_field(entry, stamp_field), "uid")
            related[role] = await usr_crud.user.get_by_uid(self.db, uid=uid) if uid else None
            if uid and related[role] is None:
                logger.warning("Approver '%s' (%s) not found; using stamped name", uid, role)

        return related

    # =========================================================================
    # 2. 인증서 데이터 / HTML
    # =========================================================================
    async def build_certificate_data(
        self, entry_id: int, *, strict: Optional[bool] = None, today: Optional[date] = None
    ) -> CertificateData:
        """
        등록부 항목 ID로부터 CertificateData를 만듭니다.

        Raises:
            HTTPException(404): 등록부 항목이 없는 경우.
            MeasurementValidationError: strict 모드에서 측정값이 누락된 경우.
        """
        entry = await lims_crud.register_entry.get_or_404(self.db, entry_id)
        related = await self._load_related(entry)
        validator = calc.MeasurementValidator(
            strict=settings.STRICT_MEASUREMENTS if strict is None else strict
        )
        data = map_certificate_data(
            entry,
            validator=validator,
            legacy_factor=settings.LEGACY_CORRECTION_FACTOR,
            repeatability_threshold=settings.REPEATABILITY_THRESHOLD_PERCENT,
            today=today,
            **related,
        )
        logger.info("Certificate data mapped for register entry %s (%s)", entry_id, data.shape.value)
        return data

    async def certificate_html(self, data: CertificateData) -> str:
        template = await rpt_templates.load_template(rpt_templates.CERTIFICATE_TEMPLATE)
        return rpt_templates.render_certificate_html(data, template)

    async def get_receipt_or_404(self, receipt_id: str) -> Any:
        receipt = await lims_crud.receipt.get_by_receipt_id(self.db, receipt_id=receipt_id)
        if receipt is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Receipt '{receipt_id}' not found.",
            )
        return receipt

    async def receipt_html(self, receipt_id: str) -> str:
        receipt = await self.get_receipt_or_404(receipt_id)
        laboratory = (
            await corp_crud.laboratory.get(self.db, receipt.laboratory_id) if receipt.laboratory_id else None
        )
        template = await rpt_templates.load_template(rpt_templates.RECEIPT_TEMPLATE)
        return rpt_templates.render_receipt_html(receipt, template, laboratory)

    # =========================================================================
    # 3. PDF 응답 (서버 렌더링 + 클라이언트 렌더링 대체 경로)
    # =========================================================================
    async def pdf_response(
        self, html: str, filename: str, *, fallback: bool = True, save: bool = False
    ) -> Response:
        """
        HTML을 PDF로 변환하여 응답을 만듭니다.

        - 서버 렌더링 성공: application/pdf 첨부 응답.
        - 서버 렌더링 실패 + fallback: 같은 HTML을 `X-Render-Fallback: client` 헤더와 함께 반환하여
          클라이언트가 직접 인쇄/변환하도록 합니다.
        - 두 경로 모두 사용할 수 없으면 500 JSON 오류를 반환합니다.
        """
        try:
            if self.renderer is None:
                raise CertificateRenderError("launch", "No PDF renderer is configured.")
            pdf_bytes = await self.renderer.render_pdf(html)
        except CertificateRenderError as exc:
            logger.error("Server-side PDF generation failed for %s: %s", filename, exc)
            if fallback and html:
                logger.info("Falling back to client-side rendering for %s", filename)
                return HTMLResponse(content=html, headers={FALLBACK_HEADER: "client"})
            return JSONResponse(
                status_code=500,
                content={"error": BOTH_PATHS_FAILED, "stage": exc.stage, "detail": str(exc)},
            )

        if save:
            path = await save_pdf_bytes(filename, pdf_bytes)
            logger.info("Certificate saved to %s", path)
        return Response(content=pdf_bytes, media_type="application/pdf", headers=_pdf_headers(filename))


def certificate_filename(data: CertificateData, entry_id: int) -> str:
    """다운로드 파일명. 인증서 번호가 없으면 등록부 ID를 사용합니다."""
    number = data.certificate_no if data.certificate_no and data.certificate_no != "N/A" else f"entry-{entry_id}"
    safe = "".join(ch if ch.isalnum() or ch in "-_" else "-" for ch in number)
    return f"certificate-{safe}.pdf"
