# app/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 데이터베이스 세션 관리 (get_db_session).
- 애플리케이션 전역 PDF 렌더러 획득 (get_pdf_renderer).
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlmodel.ext.asyncio.session import AsyncSession

# 실제 데이터베이스 세션 제너레이터 임포트
from app.core.database import get_session as get_main_app_session
from app.services.pdf_renderer import PdfRenderer


# --- 데이터베이스 세션 의존성 주입 ---
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    app.core.database.get_session을 래핑하여 사용합니다.
    """
    async for session in get_main_app_session():
        yield session


# --- PDF 렌더러 의존성 주입 ---
def get_pdf_renderer(request: Request) -> PdfRenderer:
    """
    lifespan에서 생성한 공유 PdfRenderer를 반환합니다.
    (lifespan 없이 앱을 구동한 경우 최초 요청 시 생성합니다.)
    """
    renderer = getattr(request.app.state, "pdf_renderer", None)
    if renderer is None:
        renderer = PdfRenderer()
        request.app.state.pdf_renderer = renderer
    return renderer
