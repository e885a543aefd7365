# tests/domains/test_rpt_templates_n.py

"""
'rpt' 도메인의 템플릿 치환 및 결과표 생성(templates.py)에 대한 단위 테스트 모듈입니다.

- `{{token}}` 치환, 필드별 기본 문구, HTML 이스케이프를 검증합니다.
- 해석되지 않은 토큰이 남으면 TemplatePopulationError가 발생하는지 검증합니다.
- 실제 인증서/접수증 템플릿 파일이 모든 토큰을 해석하는지 검증합니다.
"""

from datetime import date

import pytest

from app.core.exceptions import TemplatePopulationError
from app.domains.lims.schemas import SampleTestResult
from app.domains.rpt import templates as rpt_templates
from app.domains.rpt.calculations import compute_specimen_metrics
from app.domains.rpt.schemas import CertificateData, SpecimenMetrics, TestCondition
from app.domains.rpt.shapes import SpecimenShape


def _certificate_data(**overrides) -> CertificateData:
    values = dict(
        shape=SpecimenShape.CUBE,
        company_name="Acme Lab",
        certificate_no="CERT/2024/001",
        date_of_casting="02/02/2024",
        date_of_testing="01/03/2024",
        results=[
            SpecimenMetrics(sample_id="S-1", length=150, width=150, height=150, area=22500, weight=8.5,
                            density=2519, load=450, corrected_load=450, strength=20.0),
            SpecimenMetrics(sample_id="S-2", length=150.04, width=150, height=150, area=22506, weight=8.456,
                            density=2505.5, load=455, corrected_load=455, strength=20.2),
        ],
        average_compressive_strength="20.1",
        shape_conditions=[TestCondition(label="Class of Concrete", value="C25")],
        remarks=["This report relates only to the samples tested.", "Second remark"],
    )
    values.update(overrides)
    return CertificateData(**values)


# =============================================================================
# 1. 토큰 치환
# =============================================================================
def test_populate_template_replaces_tokens_and_escapes_values():
    html = rpt_templates.populate_template(
        "<p>{{ clientName }} / {{projectTitle}}</p>",
        {"clientName": "Smith & Sons <Ltd>", "projectTitle": "Bridge"},
    )
    assert html == "<p>Smith &amp; Sons &lt;Ltd&gt; / Bridge</p>"


def test_populate_template_field_fallbacks():
    """[성공] 값이 비어 있으면 필드별 기본 문구, 그 외에는 빈 문자열을 사용합니다."""
    template = "{{attachments}}|{{samplingReport}}|{{curingCondition}}|{{typeOfFailure}}|{{clientContact}}"
    html = rpt_templates.populate_template(
        template,
        {"attachments": None, "samplingReport": "", "curingCondition": None, "clientContact": None},
    )
    # typeOfFailure는 context에 없지만 기본 문구가 정의되어 있습니다.
    assert html == "None|N/A|Tested as Received|Satisfactory|"


def test_populate_template_raises_on_unresolved_tokens():
    """[실패] 매핑되지 않은 토큰은 그대로 남지 않고 예외로 보고됩니다."""
    with pytest.raises(TemplatePopulationError) as exc_info:
        rpt_templates.populate_template("{{clientName}} {{unknownField}} {{anotherOne}}", {"clientName": "X"})
    assert exc_info.value.unresolved_tokens == ["anotherOne", "unknownField"]


def test_populate_template_does_not_reinterpret_values():
    html = rpt_templates.populate_template("{{a}}", {"a": "{{b}}"})
    assert html == "{{b}}"


def test_find_tokens_preserves_first_occurrence_order():
    assert rpt_templates.find_tokens("{{b}} {{a}} {{b}}") == ["b", "a"]


# =============================================================================
# 2. 결과표 / 비고 생성
# =============================================================================
def test_generate_result_rows_precision_and_rowspan():
    data = _certificate_data()
    rows = rpt_templates.generate_result_rows(data).split("\n")

    assert len(rows) == 2
    assert rows[0].count('rowspan="2"') == 2
    assert "02/02/2024" in rows[0]
    assert "rowspan" not in rows[1]
    # 길이 1자리, 무게 2자리, 면적/밀도 0자리 (반올림)
    assert "<td>150.0</td>" in rows[1]
    assert "<td>8.46</td>" in rows[1]
    assert "<td>22506</td>" in rows[1]
    assert "<td>2506</td>" in rows[1]
    assert "<td>20.2</td>" in rows[1]


def test_generate_result_rows_for_missing_fields():
    """[성공] 측정값이 없는 시편도 '-' 또는 0 기반 값으로 행이 만들어집니다."""
    data = _certificate_data(results=[SpecimenMetrics()])
    row = rpt_templates.generate_result_rows(data)
    assert "<td>-</td>" in row  # 시편 번호 없음
    assert "<td>0.0</td>" in row
    assert "<td>0.00</td>" in row


def test_generate_result_rows_for_cube_without_dimensions():
    """[성공] 치수가 기록되지 않은 큐브는 공칭 150mm 치수와 반올림된 강도로 표시됩니다."""
    result = SampleTestResult(sample_id="S-1", weight=8.5, corrected_failure_load=450.9)
    metrics = compute_specimen_metrics(result, SpecimenShape.CUBE)

    row = rpt_templates.generate_result_rows(_certificate_data(results=[metrics]))

    assert row.count("<td>150.0</td>") == 3
    assert "<td>22500</td>" in row
    assert "<td>2519</td>" in row
    assert "<td>20.0</td>" in row  # 20.04


def test_generate_result_rows_empty_batch():
    data = _certificate_data(results=[])
    assert "No test results recorded" in rpt_templates.generate_result_rows(data)


def test_paver_rows_include_correction_factor():
    data = _certificate_data(
        shape=SpecimenShape.PAVER,
        results=[SpecimenMetrics(sample_id="P-1", height=80, correction_factor=1.12, area=20000,
                                 weight=3.6, density=2250, load=500, corrected_load=500, strength=25.0)],
    )
    header = rpt_templates.generate_result_header(data)
    row = rpt_templates.generate_result_rows(data)
    assert "CORRECTION FACTOR" in header
    assert "<td>1.12</td>" in row


def test_generate_remarks_numbering():
    remarks = rpt_templates.generate_remarks(_certificate_data())
    assert "<li>15.1 This report relates only to the samples tested.</li>" in remarks
    assert "<li>15.2 Second remark</li>" in remarks


# =============================================================================
# 3. 실제 템플릿 파일
# =============================================================================
@pytest.mark.asyncio
async def test_certificate_template_resolves_every_token():
    template = await rpt_templates.load_template(rpt_templates.CERTIFICATE_TEMPLATE)
    context = rpt_templates.build_certificate_context(_certificate_data())

    missing = [
        token for token in rpt_templates.find_tokens(template)
        if token not in context and token not in rpt_templates.FIELD_FALLBACKS
    ]
    assert missing == []


@pytest.mark.asyncio
async def test_render_certificate_html_is_deterministic():
    """[성공] 같은 입력으로 두 번 렌더링하면 바이트 단위로 같은 HTML이 나옵니다."""
    template = await rpt_templates.load_template(rpt_templates.CERTIFICATE_TEMPLATE)
    data = _certificate_data()

    first = rpt_templates.render_certificate_html(data, template)
    second = rpt_templates.render_certificate_html(data.model_copy(deep=True), template)

    assert first == second
    assert "{{" not in first
    assert "CERT/2024/001" in first
    assert "Class of Concrete" in first
    assert "<strong>20.1</strong>" in first


@pytest.mark.asyncio
async def test_render_receipt_html():
    template = await rpt_templates.load_template(rpt_templates.RECEIPT_TEMPLATE)
    receipt = {
        "receipt_id": "REC-1",
        "receipt_date": date(2024, 3, 1),
        "form_data": {"client_name": "Builders Ltd", "transmittal_modes": ["Email"]},
        "selected_categories": {"Concrete": ["Compressive strength", "Density"]},
    }

    html = rpt_templates.render_receipt_html(receipt, template, {"name": "Acme Lab"})

    assert "{{" not in html
    assert "01/03/2024" in html
    assert "Compressive strength, Density" in html
    assert "Acme Lab" in html
