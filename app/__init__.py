# app/__init__.py

"""
건설 재료 시험소(LIMS) 인증서 API의 메인 패키지입니다.

FastAPI 애플리케이션의 진입점 (main.py)과
공통 설정, 데이터베이스 연결, 예외를 담는 core 서브패키지,
각 비즈니스 도메인(corp, fms, usr, lims, rpt)을 대표하는 domains 서브패키지,
그리고 인증서 생성/PDF 변환을 담당하는 services 서브패키지로 구성됩니다.
"""

APP_NAME = "Materials LIMS Certificate API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Compressive-strength test certificate pipeline for a construction-materials laboratory."
__license__ = "MIT"
__all__ = []
