# app/utils/__init__.py

"""
FastAPI 애플리케이션의 'utils' 패키지입니다.

특정 비즈니스 도메인에 속하지 않는 범용 유틸리티 함수들을 포함합니다.

주요 서브모듈:
- `files.py`: 생성된 인증서 PDF를 출력 폴더에 저장하는 파일 유틸리티.
"""

# flake8: noqa
from . import files

# 패키지 메타데이터
__title__ = "LIMS Certificate Utilities"
__description__ = "Provides common, reusable utility functions for the application."
__version__ = "0.1.0"
__all__ = ["files"]
