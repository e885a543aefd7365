# app/core/exceptions.py

"""
인증서 파이프라인 전용 예외 클래스 모듈입니다.

라우터 계층에서 HTTPException으로 변환되며,
순수 계산/템플릿 함수는 이 예외만 발생시킵니다.
"""

from typing import Iterable


class LimsError(Exception):
    """Base class for certificate pipeline errors."""


class MeasurementValidationError(LimsError):
    """Raised in strict mode when a specimen is missing required readings."""

    def __init__(self, sample_id: str, missing_fields: Iterable[str]):
        self.sample_id = sample_id
        self.missing_fields = list(missing_fields)
        super().__init__(
            f"Sample '{sample_id}' is missing required readings: {', '.join(self.missing_fields)}"
        )


class TemplatePopulationError(LimsError):
    """Raised when a template still contains placeholder tokens after population."""

    def __init__(self, unresolved_tokens: Iterable[str]):
        self.unresolved_tokens = sorted(set(unresolved_tokens))
        super().__init__(
            f"Unresolved template tokens: {', '.join(self.unresolved_tokens)}"
        )


class CertificateRenderError(LimsError):
    """Raised when the headless browser cannot produce a PDF."""

    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"PDF rendering failed during '{stage}': {message}")
