# app/domains/rpt/templates.py

"""
`{{token}}` 형식의 HTML 템플릿을 채우는 모듈입니다.

- 미리보기(HTML)와 내보내기(PDF)는 같은 함수로 HTML을 만들기 때문에 출력이 동일합니다.
- 값은 HTML 이스케이프되며, 결과표처럼 이 모듈이 만든 조각(SafeHtml)만 그대로 삽입됩니다.
- 치환 후 해석되지 않은 토큰이 남으면 TemplatePopulationError를 발생시킵니다.
"""

import html
import logging
import os
import re
from typing import Any, Dict, List, Mapping, Optional

import aiofiles

from app.core.config import settings
from app.core.exceptions import TemplatePopulationError
from .calculations import format_fixed
from .mapper import format_date, get_field
from .schemas import CertificateData
from .shapes import get_descriptor

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")

CERTIFICATE_TEMPLATE = "certificate.html"
RECEIPT_TEMPLATE = "receipt.html"

# 값이 비어 있을 때 사용하는 필드별 기본 문구 (그 외 필드는 빈 문자열)
FIELD_FALLBACKS: Dict[str, str] = {
    "attachments": "None",
    "samplingReport": "N/A",
    "curingCondition": "Tested as Received",
    "curingPeriod": "N/A",
    "typeOfFailure": "Satisfactory",
    "version": "01",
    "managerName": "N/A",
    "averageCompressiveStrength": "0.0",
}


class SafeHtml(str):
    """이미 이스케이프된 HTML 조각. populate_template이 그대로 삽입합니다."""


# =============================================================================
# 1. 템플릿 치환
# =============================================================================
def _render_value(name: str, value: Any) -> str:
    if isinstance(value, SafeHtml):
        return str(value)
    if value is None or (isinstance(value, str) and not value.strip()):
        return html.escape(FIELD_FALLBACKS.get(name, ""))
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return html.escape(str(value))


def find_tokens(template: str) -> List[str]:
    """템플릿이 요구하는 토큰 이름 목록 (중복 제거, 등장 순서)."""
    seen: Dict[str, None] = {}
    for match in TOKEN_PATTERN.finditer(template):
        seen.setdefault(match.group(1), None)
    return list(seen)


def populate_template(template: str, context: Mapping[str, Any]) -> str:
    """
    템플릿의 모든 `{{token}}`을 context 값으로 치환합니다.

    - context에 키가 있으나 값이 비어 있으면 FIELD_FALLBACKS 또는 빈 문자열을 사용합니다.
    - context에 키가 없고 기본 문구도 없는 토큰은 해석 불가로 간주합니다.
    - 치환은 한 번만 수행되므로 값 안의 중괄호는 다시 해석되지 않습니다.

    Raises:
        TemplatePopulationError: 해석되지 않은 토큰이 하나라도 있는 경우.
    """
    unresolved: List[str] = []

    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name in context:
            return _render_value(name, context[name])
        if name in FIELD_FALLBACKS:
            return html.escape(FIELD_FALLBACKS[name])
        unresolved.append(name)
        return match.group(0)

    populated = TOKEN_PATTERN.sub(_replace, template)
    if unresolved:
        raise TemplatePopulationError(unresolved)
    return populated


# =============================================================================
# 2. 인증서 조각 생성
# =============================================================================
def _cell(value: Any, decimals: Optional[int]) -> str:
    if decimals is None:
        text = "" if value is None else str(value)
        return html.escape(text) if text else "-"
    if value is None:
        return "-"
    return format_fixed(value, decimals)


def generate_result_header(data: CertificateData) -> SafeHtml:
    descriptor = get_descriptor(data.shape)
    cells = ["<th>DATE OF<br>CASTING</th>", "<th>DATE OF<br>TESTING</th>"]
    cells.extend(f"<th>{html.escape(column.header)}</th>" for column in descriptor.columns)
    return SafeHtml("<tr>" + "".join(cells) + "</tr>")


def generate_result_rows(data: CertificateData) -> SafeHtml:
    """
    시편 1개당 1행을 만듭니다. 첫 행에만 배치 공통 타설일/시험일 셀이 rowspan으로 들어갑니다.
    소수 자릿수: 길이/하중/강도 1, 무게 2, 면적/밀도 0, 보정계수 2.
    """
    descriptor = get_descriptor(data.shape)
    rows: List[str] = []
    row_span = len(data.results)
    for index, metrics in enumerate(data.results):
        cells: List[str] = []
        if index == 0:
            cells.append(f'<td rowspan="{row_span}">{html.escape(data.date_of_casting)}</td>')
            cells.append(f'<td rowspan="{row_span}">{html.escape(data.date_of_testing)}</td>')
        for column in descriptor.columns:
            cells.append(f"<td>{_cell(getattr(metrics, column.key), column.decimals)}</td>")
        rows.append("<tr>" + "".join(cells) + "</tr>")
    if not rows:
        colspan = len(descriptor.columns) + 2
        rows.append(f'<tr><td colspan="{colspan}" class="no-results">No test results recorded</td></tr>')
    return SafeHtml("\n".join(rows))


def generate_condition_rows(data: CertificateData) -> SafeHtml:
    items = [
        '<div class="test-result-item"><span class="test-result-label">{label}:</span>'
        '<span class="test-result-value">{value}</span></div>'.format(
            label=html.escape(condition.label), value=html.escape(condition.value)
        )
        for condition in data.shape_conditions
    ]
    return SafeHtml("\n".join(items))


def generate_remarks(data: CertificateData, section: int = 15) -> SafeHtml:
    items = [
        f"<li>{section}.{number} {html.escape(remark)}</li>"
        for number, remark in enumerate(data.remarks, start=1)
    ]
    return SafeHtml("\n".join(items))


def _image(url: Optional[str], css_class: str, alt: str) -> SafeHtml:
    if not url:
        return SafeHtml("")
    return SafeHtml(f'<img class="{css_class}" src="{html.escape(url, quote=True)}" alt="{html.escape(alt)}">')


def build_certificate_context(data: CertificateData) -> Dict[str, Any]:
    """CertificateData를 camelCase 토큰 이름의 context로 펼치고 HTML 조각을 추가합니다."""
    context: Dict[str, Any] = data.model_dump(
        by_alias=True, exclude={"results", "remarks", "shape_conditions"}, mode="json"
    )
    context.update(
        resultHeaderRow=generate_result_header(data),
        resultRows=generate_result_rows(data),
        averageColspan=len(get_descriptor(data.shape).columns) + 1,
        shapeConditionRows=generate_condition_rows(data),
        remarksList=generate_remarks(data),
        logoImage=_image(data.logo_url, "company-logo", data.company_name or "Logo"),
        engineerSignature=_image(data.engineer_signature_url, "signature-image", "Engineer signature"),
        managerSignature=_image(data.manager_signature_url, "signature-image", "Manager signature"),
    )
    return context


def render_certificate_html(data: CertificateData, template: str) -> str:
    """인증서 HTML을 만듭니다. 같은 입력에 대해 항상 같은 문자열을 반환합니다."""
    return populate_template(template, build_certificate_context(data))


# =============================================================================
# 3. 접수증 조각 생성
# =============================================================================
def build_receipt_context(receipt: Any, laboratory: Any = None) -> Dict[str, Any]:
    form_data = get_field(receipt, "form_data") or {}
    categories: Dict[str, List[str]] = get_field(receipt, "selected_categories") or {}
    category_rows = []
    for category, tests in categories.items():
        category_rows.append(
            "<tr><td>{category}</td><td>{tests}</td></tr>".format(
                category=html.escape(str(category)),
                tests=html.escape(", ".join(str(test) for test in tests)) if tests else "-",
            )
        )
    if not category_rows:
        category_rows.append('<tr><td colspan="2">No tests requested</td></tr>')

    modes = get_field(form_data, "transmittal_modes") or []
    return {
        "logoImage": _image(get_field(laboratory, "logo"), "company-logo", get_field(laboratory, "name") or "Logo"),
        "companyName": get_field(laboratory, "name"),
        "companyAddress": get_field(laboratory, "address"),
        "companyEmail": get_field(laboratory, "email"),
        "receiptId": get_field(receipt, "receipt_id"),
        "receiptDate": format_date(get_field(receipt, "receipt_date")),
        "clientName": get_field(form_data, "client_name") or "N/A",
        "clientAddress": get_field(form_data, "client_address") or "N/A",
        "clientContact": get_field(form_data, "client_contact") or "N/A",
        "clientEmail": get_field(form_data, "client_email") or "N/A",
        "projectTitle": get_field(form_data, "project_title") or "N/A",
        "deliveredBy": get_field(form_data, "delivered_by") or "N/A",
        "receivedBy": get_field(form_data, "received_by") or "N/A",
        "transmittalModes": ", ".join(modes) if modes else "N/A",
        "categoryRows": SafeHtml("\n".join(category_rows)),
    }


def render_receipt_html(receipt: Any, template: str, laboratory: Any = None) -> str:
    return populate_template(template, build_receipt_context(receipt, laboratory))


# =============================================================================
# 4. 템플릿 파일 로드
# =============================================================================
_template_cache: Dict[str, str] = {}


async def load_template(name: str, template_dir: Optional[str] = None) -> str:
    """
    템플릿 파일을 비동기로 읽어 캐시합니다.
    template_dir를 지정하지 않으면 settings.TEMPLATE_DIR을 사용합니다.
    """
    path = os.path.join(template_dir or settings.TEMPLATE_DIR, name)
    if path not in _template_cache:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            _template_cache[path] = await f.read()
        logger.debug("Template loaded: %s", path)
    return _template_cache[path]
