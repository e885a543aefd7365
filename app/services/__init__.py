# app/services/__init__.py

"""
FastAPI 애플리케이션의 서비스 계층 패키지입니다.

CRUD 작업은 각 도메인의 `crud.py`에서 데이터베이스와 직접 상호 작용하는 반면,
`services` 계층은 여러 도메인의 CRUD를 조합하거나 외부 시스템(헤드리스 브라우저)과
통합하는 상위 수준의 로직을 담당합니다.

- `certificate_service.py`: 등록부 항목 -> 인증서 데이터 -> HTML/PDF 흐름 조정.
- `pdf_renderer.py`: Playwright Chromium 기반의 공유 PDF 렌더러.
"""

# 패키지 메타데이터 (선택 사항)
__title__ = "LIMS Certificate Services"
__description__ = "Cross-domain certificate generation and PDF rendering services."
__version__ = "0.1.0"
__all__ = []
