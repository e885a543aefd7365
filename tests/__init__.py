# tests/__init__.py

"""
LIMS 인증서 API의 테스트 스위트 패키지입니다.

- `domains/`: 각 비즈니스 도메인(corp, fms, usr, lims, rpt)에 대한 테스트.
- `services/`: 인증서 서비스 및 PDF 렌더러에 대한 테스트.
- `scripts/`: 인증서 내보내기 CLI에 대한 테스트.
- `conftest.py`: 인메모리 DB, 테스트 클라이언트, 기본 데이터 픽스처.
"""

__title__ = "LIMS Certificate API Tests"
__description__ = "Test suite for the LIMS certificate FastAPI application."
__version__ = "0.1.0"
__all__ = []
