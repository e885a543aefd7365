# tests/domains/__init__.py

"""
도메인별 테스트 스위트 패키지입니다.

- `test_corp_n.py`: 시험소 (corp)
- `test_fms_n.py`: 보정계수 시험기 (fms)
- `test_usr_n.py`: 승인자 프로필 (usr)
- `test_lims_n.py`: 접수증 / 시험 등록부 (lims)
- `test_rpt_*.py`: 계산, 매퍼, 템플릿, 인증서 API (rpt)
"""

__title__ = "LIMS Domain Tests"
__description__ = "Categorized tests for each business domain."
__version__ = "0.1.0"
__all__ = []
