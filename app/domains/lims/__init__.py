# app/domains/lims/__init__.py

"""
FastAPI 애플리케이션의 'lims' 도메인 패키지입니다.

'lims' 도메인은 건설 재료 시험소의 시료 접수와 시험 기록을 관리합니다.
여기에는 시료 접수증(Receipt)과 시험 등록부(RegisterEntry)가 포함되며,
등록부 항목은 시편별 원시 측정값(SampleTestResult)과 승인 워크플로우 상태를 가집니다.
인증서는 이 레코드로부터 'rpt' 도메인에서 파생됩니다.

주요 서브모듈:
- `models.py`: 접수증/등록부 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 및 JSON 컬럼 문서(측정값, 승인 기록)의 Pydantic 모델.
- `crud.py`: 접수증/등록부에 대한 비동기 CRUD 로직.
- `routers.py`: 접수증/등록부 API 엔드포인트 (접수증 미리보기/PDF 포함).
"""

# 패키지 메타데이터 (선택 사항)
__title__ = "LIMS Receipts & Register Domain"
__description__ = "Manages sample receipts and test register entries."
__version__ = "0.1.0"  # lims 도메인 패키지의 버전
__all__ = []  # 'from app.domains.lims import *' 시 내보낼 이름 목록. 일반적으로 비워둡니다.
