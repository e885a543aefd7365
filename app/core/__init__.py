# app/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

주요 서브모듈:

- `config.py`: 애플리케이션 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 비동기 엔진, 세션 관리, 테이블 생성 (SQLModel 및 AsyncSQLAlchemy).
- `crud_base.py`: 모든 도메인 CRUD 클래스가 상속하는 공통 CRUD 기본 클래스.
- `exceptions.py`: 측정값 검증, 템플릿 치환, PDF 렌더링 도메인 예외.
- `dependencies.py`: DB 세션과 PDF 렌더러 의존성 함수.
"""

# 패키지 메타데이터 (선택 사항)
__title__ = "LIMS Certificate Core"
__description__ = "Core components for the materials LIMS certificate service."
__version__ = "0.1.0"
__all__ = []  # 'from app.core import *' 시 내보낼 이름 목록. 일반적으로 비워둡니다.
