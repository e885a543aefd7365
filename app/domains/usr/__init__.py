# app/domains/usr/__init__.py

"""
FastAPI 애플리케이션의 'usr' 도메인 패키지입니다.

인증은 외부 ID 공급자가 담당하며, 'usr' 도메인은 인증서 서명란에 필요한
사용자 프로필(이름, 이메일, 서명 이미지)만 관리합니다.

주요 서브모듈:
- `models.py`: 사용자 프로필 테이블 SQLModel 정의.
- `schemas.py`: 요청/응답 Pydantic 모델.
- `crud.py`: 사용자 프로필 CRUD 로직.
- `routers.py`: 사용자 프로필 API 엔드포인트.
"""

__title__ = "LIMS User Profile Domain"
__description__ = "Holds approver profile fields used for certificate signatures."
__version__ = "0.1.0"
__all__ = []
