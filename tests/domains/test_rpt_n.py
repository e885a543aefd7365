# tests/domains/test_rpt_n.py

"""
'rpt' 도메인 (인증서) API 엔드포인트에 대한 통합 테스트 모듈입니다.

- 등록부 항목 -> CertificateData JSON / HTML 미리보기 / PDF 내보내기 흐름을 검증합니다.
- 서버 PDF 렌더링 실패 시 클라이언트 렌더링 대체 경로(HTML)와 최종 실패 응답을 검증합니다.
- strict 모드에서 누락 측정값이 422로 보고되는지 검증합니다.
- 단일 시편 계산 API를 검증합니다.
"""

import pytest
from httpx import AsyncClient

from app.core.config import settings
from app.domains.lims import models as lims_models
from app.domains.rpt import calculations as calc
from app.domains.rpt.schemas import CertificateData, SpecimenMetrics
from app.domains.rpt.shapes import SpecimenShape

RPT_PREFIX = "/api/v1/rpt"


# =============================================================================
# 1. CertificateData 조회
# =============================================================================
@pytest.mark.asyncio
async def test_read_certificate_data(client: AsyncClient, test_cube_entry: lims_models.RegisterEntry):
    """
    [성공] 등록부 항목과 주변 레코드(시험소, 접수증, 시험기, 승인자)로 인증서 데이터를 만듭니다.
    """
    # When
    response = await client.get(f"{RPT_PREFIX}/register-entries/{test_cube_entry.id}/certificate")

    # Then
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["certificateNo"] == "CERT/2024/001"
    assert data["dateOfIssue"] == "04/03/2024"
    assert data["companyName"] == "Acme Materials Lab"
    assert data["clientContact"] == "+254 700 000000"
    assert data["dateOfReceipt"] == "01/03/2024"
    assert data["compressiveTestingMachineId"] == "CTM-01"
    assert data["facilityTemperature"] == "23.5 Degrees Celsius"
    assert data["sampleCountText"] == "Three (03)"
    assert data["engineerName"] == "Grace Engineer"
    assert data["engineerSignatureUrl"] == "https://cdn.acme.test/sig-grace.png"
    assert data["managerName"] == "manager@acme.test"
    assert data["status"] == "Approved"

    # 보정 하중 = load * 1.02 - 0.5, 강도 = 보정 하중 * 1000 / 22500
    strengths = [row["strength"] for row in data["results"]]
    assert strengths == pytest.approx([688.0 / 22.5, 693.1 / 22.5, 703.3 / 22.5])
    assert [calc.format_fixed(value, 1) for value in strengths] == ["30.6", "30.8", "31.3"]
    assert data["results"][0]["correctedLoad"] == pytest.approx(688.0)
    assert data["results"][0]["density"] == 2519
    assert data["averageCompressiveStrength"] == "30.9"


@pytest.mark.asyncio
async def test_read_certificate_data_not_found(client: AsyncClient):
    response = await client.get(f"{RPT_PREFIX}/register-entries/9999/certificate")
    assert response.status_code == 404
    assert response.json()["detail"] == "RegisterEntry with ID 9999 not found."


@pytest.mark.asyncio
async def test_certificate_without_related_records(client: AsyncClient):
    """[성공] 시험소/접수증/시험기 없이도 기본값으로 인증서 데이터를 만듭니다."""
    # Given
    payload = {
        "shape": "cube",
        "results": [{"sample_id": "S-1", "length": 150, "width": 150, "height": 150, "weight": 8.5, "load": 450}],
    }
    created = await client.post("/api/v1/lims/register-entries", json=payload)
    assert created.status_code == 201, created.text

    # When
    response = await client.get(f"{RPT_PREFIX}/register-entries/{created.json()['id']}/certificate")

    # Then
    assert response.status_code == 200
    data = response.json()
    assert data["companyName"] == ""
    assert data["clientName"] == "N/A"
    assert data["compressiveTestingMachineId"] == "N/A"
    # 시험기 보정계수가 없으면 고정 배율 0.9937이 적용됩니다.
    assert data["results"][0]["correctedLoad"] == pytest.approx(450 * 0.9937)


@pytest.mark.asyncio
async def test_strict_mode_reports_missing_measurements(client: AsyncClient):
    """[실패] strict=true이면 누락 측정값이 있는 시편 때문에 422를 반환합니다."""
    payload = {"shape": "cube", "results": [{"sample_id": "S-1", "length": 150}]}
    created = await client.post("/api/v1/lims/register-entries", json=payload)
    entry_id = created.json()["id"]

    lenient = await client.get(f"{RPT_PREFIX}/register-entries/{entry_id}/certificate")
    strict = await client.get(f"{RPT_PREFIX}/register-entries/{entry_id}/certificate", params={"strict": True})

    assert lenient.status_code == 200
    assert strict.status_code == 422
    assert strict.json()["sample_id"] == "S-1"
    assert strict.json()["missing_fields"] == ["width", "height", "weight", "load"]


# =============================================================================
# 2. HTML 미리보기 / PDF 내보내기
# =============================================================================
@pytest.mark.asyncio
async def test_preview_and_pdf_use_identical_html(client: AsyncClient, test_cube_entry, fake_renderer):
    """[성공] 미리보기 HTML과 PDF 렌더러에 전달된 HTML은 바이트 단위로 같습니다."""
    base = f"{RPT_PREFIX}/register-entries/{test_cube_entry.id}/certificate"

    preview = await client.get(f"{base}/preview")
    pdf = await client.get(f"{base}/pdf")

    assert preview.status_code == 200
    assert preview.headers["content-type"].startswith("text/html")
    assert "{{" not in preview.text
    assert "TEST RESULTS FOR CONCRETE CUBES" in preview.text

    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.headers["content-disposition"] == 'attachment; filename="certificate-CERT-2024-001.pdf"'
    assert pdf.content.startswith(b"%PDF-")
    assert fake_renderer.rendered == [preview.text]


@pytest.mark.asyncio
async def test_pdf_falls_back_to_client_rendering(client: AsyncClient, test_cube_entry, fake_renderer):
    """[성공] 서버 렌더링이 실패하면 HTML을 X-Render-Fallback 헤더와 함께 반환합니다."""
    fake_renderer.fail = True

    response = await client.get(f"{RPT_PREFIX}/register-entries/{test_cube_entry.id}/certificate/pdf")

    assert response.status_code == 200
    assert response.headers["x-render-fallback"] == "client"
    assert response.headers["content-type"].startswith("text/html")
    assert "CERT/2024/001" in response.text


@pytest.mark.asyncio
async def test_pdf_reports_failure_when_fallback_disabled(client: AsyncClient, test_cube_entry, fake_renderer):
    """[실패] 대체 경로를 사용할 수 없으면 500과 결합된 오류 메시지를 반환합니다."""
    fake_renderer.fail = True

    response = await client.get(
        f"{RPT_PREFIX}/register-entries/{test_cube_entry.id}/certificate/pdf", params={"fallback": False}
    )

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Both server-side and client-side PDF generation failed"
    assert body["stage"] == "launch"


@pytest.mark.asyncio
async def test_pdf_save_writes_file(client: AsyncClient, test_cube_entry, monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "CERTIFICATE_OUTPUT_DIR", str(tmp_path))

    response = await client.get(
        f"{RPT_PREFIX}/register-entries/{test_cube_entry.id}/certificate/pdf", params={"save": True}
    )

    assert response.status_code == 200
    saved = list(tmp_path.glob("*-certificate-CERT-2024-001.pdf"))
    assert len(saved) == 1
    assert saved[0].read_bytes() == response.content


@pytest.mark.asyncio
async def test_preview_from_posted_certificate_data(client: AsyncClient, fake_renderer):
    """[성공] 클라이언트가 조립한 CertificateData로도 같은 HTML/PDF를 만듭니다."""
    data = CertificateData(
        shape=SpecimenShape.PAVER,
        certificate_no="PAV-01",
        results=[SpecimenMetrics(sample_id="P-1", height=80, correction_factor=1.12, area=20000,
                                 weight=3.6, density=2250, load=500, corrected_load=500, strength=25.0)],
        average_compressive_strength="25.0",
    )
    payload = data.model_dump(by_alias=True, mode="json")

    preview = await client.post(f"{RPT_PREFIX}/certificates/preview", json=payload)
    pdf = await client.post(f"{RPT_PREFIX}/certificates/pdf", json=payload)

    assert preview.status_code == 200
    assert "CORRECTION FACTOR" in preview.text
    assert "<td>1.12</td>" in preview.text
    assert pdf.status_code == 200
    assert pdf.headers["content-disposition"] == 'attachment; filename="certificate-PAV-01.pdf"'
    assert fake_renderer.rendered == [preview.text]


# =============================================================================
# 3. 단일 시편 계산
# =============================================================================
@pytest.mark.asyncio
async def test_calculate_specimen_with_ad_hoc_factor(client: AsyncClient):
    """[성공] factorM=0.98, factorC=1.5, load=100kN -> 보정 하중 99.5kN"""
    payload = {
        "shape": "cube",
        "factorM": 0.98,
        "factorC": 1.5,
        "result": {"sample_id": "S-1", "length": 150, "width": 150, "height": 150, "weight": 8.5, "load": 100},
    }

    response = await client.post(f"{RPT_PREFIX}/calculations/specimen", json=payload)

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["correctedLoad"] == pytest.approx(99.5)
    assert body["area"] == 22500
    assert body["density"] == 2519
    assert body["strength"] == pytest.approx(99.5 / 22.5)  # 4.4


@pytest.mark.asyncio
async def test_calculate_specimen_with_registered_machine(client: AsyncClient, test_machine):
    payload = {
        "shape": "cube",
        "machineId": test_machine.id,
        "result": {"sample_id": "S-1", "length": 150, "width": 150, "height": 150, "weight": 8.5, "load": 450},
    }

    response = await client.post(f"{RPT_PREFIX}/calculations/specimen", json=payload)

    assert response.status_code == 200
    # 450 * 1.02 - 0.5 = 458.5 kN -> 20.4 N/mm²
    assert response.json()["correctedLoad"] == pytest.approx(458.5)
    assert response.json()["strength"] == pytest.approx(458.5 / 22.5)  # 20.4


@pytest.mark.asyncio
async def test_calculate_specimen_unknown_machine(client: AsyncClient):
    payload = {"shape": "cube", "machineId": 404, "result": {"sample_id": "S-1"}}
    response = await client.post(f"{RPT_PREFIX}/calculations/specimen", json=payload)
    assert response.status_code == 404
