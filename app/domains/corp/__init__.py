# app/domains/corp/__init__.py

"""
FastAPI 애플리케이션의 'corp' 도메인 패키지입니다.

'corp' 도메인은 시험소(Laboratory) 정보를 관리합니다.
시험소 레코드는 인증서의 회사 정보(이름, 주소, 이메일, 로고)와
시험 장소(Test Location)를 채우는 데 사용됩니다.

주요 서브모듈:
- `models.py`: 시험소 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 유효성 검사를 위한 Pydantic 모델.
- `crud.py`: 시험소 테이블에 대한 비동기 CRUD 로직.
- `routers.py`: 시험소 정보 API 엔드포인트 정의.
"""

# 패키지 메타데이터
__title__ = "LIMS Laboratory Domain"
__description__ = "Manages laboratory identity used in certificate headers."
__version__ = "0.1.0"
__all__ = []
