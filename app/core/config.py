# app/core/config.py

from typing import Any, List
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# 프로젝트의 루트 디렉토리 경로를 계산합니다.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드합니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # 프로젝트 루트의 .env 파일
        env_file_encoding='utf-8',
        extra='ignore',                      # 모델에 없는 변수는 무시
        case_sensitive=True
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "Materials LIMS Certificate API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Construction-materials LIMS: compressive-strength test certificate pipeline"
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Enable debug mode for detailed logging and SQL echo")
    LOG_LEVEL: str = Field("INFO", description="Root log level (DEBUG, INFO, WARNING, ...)")

    # --- 데이터베이스 설정 ---
    # 운영 환경에서는 postgresql+asyncpg://... 형식의 URL을 사용합니다.
    DATABASE_URL: SecretStr = Field(
        SecretStr("sqlite+aiosqlite:///./lims.db"),
        description="Async SQLAlchemy database connection URL"
    )

    # --- 템플릿 / 출력 경로 ---
    TEMPLATE_DIR: str = Field(
        os.path.join(BASE_DIR, "app", "templates"),
        description="Directory containing the certificate and receipt HTML templates"
    )
    CERTIFICATE_OUTPUT_DIR: str = Field(
        os.path.join(BASE_DIR, "data", "certificates"),
        description="Directory where exported PDFs are saved when requested"
    )

    # --- PDF 렌더러 (headless Chromium) 설정 ---
    PDF_BROWSER_ARGS: List[str] = Field(
        default_factory=lambda: ["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage"],
        description="Command-line flags passed to the Chromium launcher"
    )
    PDF_MAX_CONCURRENT_PAGES: int = Field(4, ge=1, description="Upper bound on pages rendered in parallel")
    PDF_PAGE_FORMAT: str = Field("A4", description="Paper size of exported PDFs")
    PDF_PAGE_MARGIN: str = Field("0.5in", description="Margin applied on all four sides")

    # --- 계산 규칙 ---
    LEGACY_CORRECTION_FACTOR: float = Field(
        0.9937, description="Scalar used when no machine correction factor is configured (deprecated)"
    )
    STRICT_MEASUREMENTS: bool = Field(
        False, description="Reject specimens with missing readings instead of rendering them as zero"
    )
    REPEATABILITY_THRESHOLD_PERCENT: float = Field(
        9.0, description="Maximum deviation from the batch mean before the average is withheld"
    )

    # Post-initialization validation (Pydantic v2 BaseSettings)
    def model_post_init(self, __context: Any) -> None:  # noqa: ANN001
        # 개발 환경에서는 상대 경로를 프로젝트 루트 기준으로 고정합니다.
        if self.APP_ENV == "development" and not os.path.isabs(self.CERTIFICATE_OUTPUT_DIR):
            self.CERTIFICATE_OUTPUT_DIR = os.path.join(BASE_DIR, self.CERTIFICATE_OUTPUT_DIR)


settings = Settings()
