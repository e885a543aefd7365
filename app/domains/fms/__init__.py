# app/domains/fms/__init__.py

"""
FastAPI 애플리케이션의 'fms' 도메인 패키지입니다.

'fms' 도메인은 압축강도 시험기(CorrectionFactorMachine)와
장비별 선형 보정계수(factor_m, factor_c)를 관리합니다.

주요 서브모듈:
- `models.py`: 시험기 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청 및 응답 유효성 검사를 위한 Pydantic 모델.
- `crud.py`: 시험기 테이블에 대한 비동기 CRUD 로직.
- `routers.py`: 시험기 API 엔드포인트 정의.
"""

# 패키지 메타데이터
__title__ = "LIMS Testing Machine Domain"
__description__ = "Manages compression machines and their linear correction factors."
__version__ = "0.1.0"
__all__ = []
