import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# 핵심 설정 및 데이터베이스 모듈 임포트
from app.core.config import settings
from app.core.database import create_db_and_tables, engine, get_session
from app.core.exceptions import (
    CertificateRenderError,
    MeasurementValidationError,
    TemplatePopulationError,
)
from app.services.pdf_renderer import PdfRenderer

from app import API_PREFIX

# 각 도메인의 라우터들을 임포트합니다.
from app.domains.corp.routers import router as corp_router
from app.domains.fms.routers import router as fms_router
from app.domains.usr.routers import router as usr_router
from app.domains.lims.routers import router as lims_router
from app.domains.rpt.routers import router as rpt_router

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """LOG_LEVEL / DEBUG_MODE 설정으로 루트 로거를 한 번만 구성합니다."""
    level = logging.DEBUG if settings.DEBUG_MODE else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    )


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
# 애플리케이션 시작 및 종료 시 실행될 비동기 작업을 정의합니다.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI 애플리케이션의 수명 주기 이벤트(데이터베이스, PDF 렌더러)를 함께 처리합니다.
    """
    configure_logging()
    logger.info("FastAPI 애플리케이션 시작 중...")
    try:
        # --- 시작 시 실행할 로직 ---
        # 1. 데이터베이스 테이블 생성
        await create_db_and_tables()

        # 2. 공유 PDF 렌더러 생성 (브라우저는 첫 PDF 요청 시 실행됩니다)
        app.state.pdf_renderer = PdfRenderer()
        logger.info("PDF 렌더러 준비 완료 (최대 동시 페이지: %d).", settings.PDF_MAX_CONCURRENT_PAGES)

    except Exception as e:
        logger.exception("애플리케이션 시작 중 오류 발생: %s", e)
        raise

    yield  # 애플리케이션 실행

    logger.info("FastAPI 애플리케이션 종료 중...")
    try:
        # --- 종료 시 실행할 로직 ---
        # 1. 헤드리스 브라우저 종료
        renderer = getattr(app.state, "pdf_renderer", None)
        if renderer is not None:
            await renderer.close()
            logger.info("PDF 렌더러 종료 완료.")

        # 2. 데이터베이스 연결 풀 종료
        await engine.dispose()
        logger.info("데이터베이스 연결 풀 종료 완료.")

    except Exception as e:
        logger.exception("애플리케이션 종료 중 오류 발생: %s", e)


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",       # Swagger UI (Interactive API documentation)
    redoc_url="/redoc",     # ReDoc (Alternative API documentation)
    lifespan=lifespan       # 위에서 정의한 수명 주기 이벤트 핸들러를 등록합니다.
)


# -- CORS (Cross-Origin Resource Sharing) 미들웨어 설정 --
# 프로덕션에서는 'allow_origins'를 실제 프론트엔드 도메인으로 제한해야 합니다.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Render-Fallback"],
)


# -- 도메인 예외 -> HTTP 응답 변환 --
@app.exception_handler(MeasurementValidationError)
async def measurement_validation_handler(request: Request, exc: MeasurementValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc), "sample_id": exc.sample_id, "missing_fields": exc.missing_fields},
    )


@app.exception_handler(TemplatePopulationError)
async def template_population_handler(request: Request, exc: TemplatePopulationError):
    logger.error("Template population failed: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "unresolved_tokens": exc.unresolved_tokens},
    )


@app.exception_handler(CertificateRenderError)
async def certificate_render_handler(request: Request, exc: CertificateRenderError):
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "stage": exc.stage},
    )


# -- 도메인 라우터 포함 --
app.include_router(corp_router, prefix=f"{API_PREFIX}/corp", tags=["Laboratory Management (시험소 관리)"])
app.include_router(fms_router, prefix=f"{API_PREFIX}/fms", tags=["Testing Machines (시험 장비 관리)"])
app.include_router(usr_router, prefix=f"{API_PREFIX}/usr", tags=["User Management (사용자 관리)"])
app.include_router(lims_router, prefix=f"{API_PREFIX}/lims", tags=["Laboratory Information Management (실험실 정보 관리)"])
app.include_router(rpt_router, prefix=f"{API_PREFIX}/rpt", tags=["Report Management (보고서 관리)"])


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    """
    API의 루트 엔드포인트입니다.
    API의 시작점을 알리고 문서 링크를 제공합니다.
    """
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
# 애플리케이션과 데이터베이스의 연결 상태를 확인하는 엔드포인트입니다.
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    애플리케이션의 헬스 체크 엔드포인트입니다.
    데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다.
    """
    try:
        result = await session.exec(select(1))
        if result.first():
            return {"status": "ok", "database_connection": "successful"}
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection error during health check: {e}"
        )
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Database health check failed: No result from test query"
    )


# -- Uvicorn 서버 직접 실행 (개발용) --
# if __name__ == "__main__":
#     import uvicorn
#     uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
