# tests/conftest.py

from typing import AsyncGenerator, List, Optional
from datetime import date

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# app.main을 임포트하여 FastAPI 앱 인스턴스에 접근합니다.
from app.main import app as main_app
from app.core import dependencies as deps
from app.core.database import get_session
from app.core.exceptions import CertificateRenderError
from app.domains.rpt import templates as rpt_templates

# --- 모델 임포트 ---
#  SQLModel.metadata.create_all()이 모든 테이블을 인식하려면 모든 모델이 임포트되어야 합니다.
from app.domains.corp import models as corp_models
from app.domains.fms import models as fms_models
from app.domains.lims import models as lims_models
from app.domains.usr import models as usr_models
from app.domains.rpt.shapes import SpecimenShape


# --- 테스트용 데이터베이스 설정 ---
# 인메모리 SQLite를 StaticPool로 공유하여 하나의 연결에서 모든 세션이 같은 DB를 보도록 합니다.
TEST_DATABASE_URL = "sqlite+aiosqlite://"


# --- 데이터베이스 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """
    테스트 함수마다 새 인메모리 DB를 만들고 모든 테이블을 생성합니다.
    테스트 종료 시 엔진을 정리합니다.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트 함수에 독립된 비동기 데이터베이스 세션을 제공합니다."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture(autouse=True)
def clear_template_cache():
    """템플릿 캐시가 테스트 간에 공유되지 않도록 비웁니다."""
    rpt_templates._template_cache.clear()
    yield
    rpt_templates._template_cache.clear()


# --- 가짜 PDF 렌더러 ---
class FakePdfRenderer:
    """PdfRenderer와 같은 인터페이스를 가진 테스트 대역입니다."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.rendered: List[str] = []
        self.closed = False

    async def render_pdf(self, html: str) -> bytes:
        if self.fail:
            raise CertificateRenderError("launch", "browser executable not found")
        self.rendered.append(html)
        return b"%PDF-1.4\n% fake certificate\n%%EOF"

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(scope="function")
def fake_renderer() -> FakePdfRenderer:
    return FakePdfRenderer()


# --- API 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession, fake_renderer: FakePdfRenderer) -> AsyncGenerator[AsyncClient, None]:
    """
    DB 세션과 PDF 렌더러를 테스트용으로 오버라이드한 AsyncClient를 반환합니다.
    테스트 안에서 fake_renderer.fail을 True로 바꾸면 서버 렌더링 실패를 흉내낼 수 있습니다.
    """
    def override_get_session():
        yield db_session

    def override_get_pdf_renderer():
        return fake_renderer

    original_overrides = main_app.dependency_overrides.copy()
    try:
        main_app.dependency_overrides.update({
            get_session: override_get_session,
            deps.get_db_session: override_get_session,
            deps.get_pdf_renderer: override_get_pdf_renderer,
        })
        transport = ASGITransport(app=main_app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


# --- 기본 데이터 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_laboratory(db_session: AsyncSession) -> corp_models.Laboratory:
    """테스트용 시험소를 생성합니다."""
    laboratory = corp_models.Laboratory(
        name="Acme Materials Lab",
        address="12 Quarry Road, Nairobi",
        email="lab@acme.test",
        logo="https://cdn.acme.test/logo.png",
    )
    db_session.add(laboratory)
    await db_session.commit()
    await db_session.refresh(laboratory)
    return laboratory


@pytest_asyncio.fixture(scope="function")
async def test_machine(db_session: AsyncSession, test_laboratory: corp_models.Laboratory) -> fms_models.CorrectionFactorMachine:
    """보정계수 factor_m=1.02, factor_c=-0.5 인 시험기를 생성합니다."""
    machine = fms_models.CorrectionFactorMachine(
        name="CTM-01", tag_id="AST-0001", factor_m=1.02, factor_c=-0.5, laboratory_id=test_laboratory.id
    )
    db_session.add(machine)
    await db_session.commit()
    await db_session.refresh(machine)
    return machine


@pytest_asyncio.fixture(scope="function")
async def test_engineer(db_session: AsyncSession, test_laboratory: corp_models.Laboratory) -> usr_models.User:
    user = usr_models.User(
        uid="eng-001", name="Grace Engineer", email="grace@acme.test",
        signature_url="https://cdn.acme.test/sig-grace.png",
        role=usr_models.UserRole.ENGINEER, laboratory_id=test_laboratory.id,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def test_manager(db_session: AsyncSession, test_laboratory: corp_models.Laboratory) -> usr_models.User:
    user = usr_models.User(
        uid="mgr-001", name=None, email="manager@acme.test",
        role=usr_models.UserRole.MANAGER, laboratory_id=test_laboratory.id,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def test_receipt(db_session: AsyncSession, test_laboratory: corp_models.Laboratory) -> lims_models.Receipt:
    receipt = lims_models.Receipt(
        receipt_id="REC-2024-001",
        laboratory_id=test_laboratory.id,
        receipt_date=date(2024, 3, 1),
        form_data={
            "client_name": "Builders Ltd",
            "client_address": "PO Box 100, Nairobi",
            "client_contact": "+254 700 000000",
            "client_email": "site@builders.test",
            "project_title": "Riverside Apartments",
            "delivered_by": "J. Driver",
            "received_by": "A. Clerk",
            "transmittal_modes": ["Email", "Hard copy"],
        },
        selected_categories={"Concrete": ["Compressive strength"], "Pavers": []},
    )
    db_session.add(receipt)
    await db_session.commit()
    await db_session.refresh(receipt)
    return receipt


def cube_results(loads: Optional[List[float]] = None) -> List[dict]:
    """150mm 큐브 시편 측정값 목록 (무게 8.5 kg)."""
    loads = loads or [675.0, 680.0, 690.0]
    return [
        {
            "sample_id": f"S-{index + 1}",
            "length": 150, "width": 150, "height": 150,
            "weight": 8.5, "load": load, "mode_of_failure": "Satisfactory",
        }
        for index, load in enumerate(loads)
    ]


@pytest_asyncio.fixture(scope="function")
async def test_cube_entry(
    db_session: AsyncSession,
    test_laboratory: corp_models.Laboratory,
    test_machine: fms_models.CorrectionFactorMachine,
    test_receipt: lims_models.Receipt,
    test_engineer: usr_models.User,
    test_manager: usr_models.User,
) -> lims_models.RegisterEntry:
    """승인 완료된 큐브 3개 배치의 등록부 항목을 생성합니다."""
    entry = lims_models.RegisterEntry(
        laboratory_id=test_laboratory.id,
        receipt_id=test_receipt.receipt_id,
        shape=SpecimenShape.CUBE,
        client="Builders Ltd",
        project="Riverside Apartments",
        casting_date=date(2024, 2, 2),
        testing_date=date(2024, 3, 1),
        date_of_issue=date(2024, 3, 4),
        age=28,
        area_of_use="Ground floor slab",
        concrete_class="C25",
        sample_ids=["S-1", "S-2", "S-3"],
        machine_id=test_machine.id,
        temperature=23.5,
        certificate_number="CERT/2024/001",
        technician="T. Tester",
        status=lims_models.RegisterEntryStatus.APPROVED,
        approved_by_engineer={"uid": test_engineer.uid, "name": None, "date": "2024-03-02"},
        approved_by_manager={"uid": test_manager.uid, "name": None, "date": "2024-03-03"},
        results=cube_results(),
    )
    db_session.add(entry)
    await db_session.commit()
    await db_session.refresh(entry)
    return entry
