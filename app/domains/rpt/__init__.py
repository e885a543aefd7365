# app/domains/rpt/__init__.py

"""
FastAPI 애플리케이션의 'rpt' (Report) 도메인 패키지입니다.

이 패키지는 시험 등록부(RegisterEntry)로부터 압축강도 시험 인증서를 만드는
파이프라인을 담당합니다: 원시 측정값 -> 파생 수치 -> 인증서 데이터 -> HTML / PDF.

주요 서브모듈:
- `shapes.py`: 시편 형상별 결과표 컬럼, 시험 조건 라벨, 시험 방법, 비고 정의.
- `calculations.py`: 면적, 밀도, 보정 하중, 압축강도, 평균 등 순수 계산 함수.
- `mapper.py`: 외부 레코드(시험소, 접수증, 등록부, 시험기, 승인자)를 CertificateData로 변환.
- `templates.py`: `{{token}}` 템플릿 치환 및 결과표 행 생성.
- `schemas.py`: CertificateData 등 Pydantic 모델 (camelCase 직렬화).
- `routers.py`: 인증서 조회/미리보기/PDF API 엔드포인트.
"""

# 패키지 메타데이터
__title__ = "LIMS Certificate Domain"
__description__ = "Computes specimen metrics and renders compressive-strength test certificates."
__version__ = "0.1.0"
__all__ = []
