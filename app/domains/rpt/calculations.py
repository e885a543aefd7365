# app/domains/rpt/calculations.py

"""
시편 측정값으로부터 인증서에 표시되는 수치를 계산하는 순수 함수 모듈입니다.

- 입출력(I/O)이 없으며 모든 함수는 동기 함수입니다.
- 단위: 길이 mm, 무게 kg, 하중 kN, 강도 N/mm², 밀도 kg/m³
- 반올림은 절사(truncation)가 아닌 0.5 올림(half away from zero)입니다.
"""

import logging
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Sequence

from app.core.exceptions import MeasurementValidationError
from app.domains.lims.schemas import HoleDescriptor, SampleTestResult
from .schemas import SpecimenMetrics
from .shapes import SpecimenShape, get_descriptor

logger = logging.getLogger(__name__)

DEFAULT_LEGACY_CORRECTION_FACTOR = 0.9937
DEFAULT_REPEATABILITY_THRESHOLD = 9.0

_COUNT_WORDS = ["One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine", "Ten"]

# 인터로킹 블록 두께/형상별 보정계수 (BS 6717)
_PAVER_THICKNESS_FACTORS = {
    60: (1.00, 1.06),
    65: (1.00, 1.06),
    80: (1.12, 1.18),
    100: (1.18, 1.24),
}


# =============================================================================
# 1. 반올림 / 포맷 헬퍼
# =============================================================================
def round_half_up(value: float, decimals: int = 0) -> float:
    """부동소수 표현 오차 없이 10진수 기준으로 반올림합니다. (2.5 -> 3, -2.5 -> -3)"""
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_fixed(value: Optional[float], decimals: int) -> str:
    """고정 소수 자릿수 문자열. 누락 값은 0으로 표시합니다."""
    rounded = round_half_up(value or 0.0, decimals)
    return f"{rounded:.{decimals}f}"


# =============================================================================
# 2. 면적
# =============================================================================
def cross_sectional_area(length: Optional[float], width: Optional[float]) -> float:
    """큐브/실린더/벽돌의 단면적 (mm²) = L × W"""
    return (length or 0.0) * (width or 0.0)


def hollow_area(holes: Iterable[Optional[HoleDescriptor]]) -> float:
    """중공 블록의 구멍/노치 면적 합계 (mm²) = Σ l·w·개수"""
    total = 0.0
    for hole in holes:
        if hole is None:
            continue
        total += (hole.l or 0.0) * (hole.w or 0.0) * (hole.no or 0)
    return total


def effective_area(gross_area: float, holes: Iterable[Optional[HoleDescriptor]]) -> float:
    """총 단면적에서 구멍 면적을 뺀 유효 단면적. 음수가 되지 않도록 0에서 자릅니다."""
    return max(gross_area - hollow_area(holes), 0.0)


def paver_plan_area(calculated_area: Optional[float], pavers_per_square_metre: Optional[float]) -> float:
    """
    인터로킹 블록의 평면적 (mm²).
    상위에서 계산된 값이 있으면 그대로 쓰고, 없으면 1 m² 당 개수로부터 역산합니다.
    """
    if calculated_area:
        return calculated_area
    if pavers_per_square_metre and pavers_per_square_metre > 0:
        return 1_000_000 / pavers_per_square_metre
    return 0.0


# =============================================================================
# 3. 밀도
# =============================================================================
def cube_density(
    weight: Optional[float], length: Optional[float], width: Optional[float], height: Optional[float]
) -> float:
    """weight / (L·W·H·1e-9), 정수 반올림. 부피가 0이면 0을 반환합니다."""
    volume_m3 = (length or 0.0) * (width or 0.0) * (height or 0.0) * 1e-9
    if volume_m3 <= 0:
        return 0.0
    return round_half_up((weight or 0.0) / volume_m3, 0)


def paver_density(weight: Optional[float], thickness_mm: Optional[float], plan_area_mm2: Optional[float]) -> float:
    """weight / ((t/1000)·(A/1e6)), 정수 반올림. 두께나 면적이 0이면 0을 반환합니다."""
    thickness_m = (thickness_mm or 0.0) / 1000
    area_m2 = (plan_area_mm2 or 0.0) / 1_000_000
    if thickness_m <= 0 or area_m2 <= 0:
        return 0.0
    return round_half_up((weight or 0.0) / (thickness_m * area_m2), 0)


# =============================================================================
# 4. 하중 / 강도
# =============================================================================
def corrected_failure_load(
    load: Optional[float],
    machine: Optional[Any] = None,
    *,
    precomputed: Optional[float] = None,
    legacy_factor: float = DEFAULT_LEGACY_CORRECTION_FACTOR,
) -> float:
    """
    보정 파괴하중 (kN).

    우선순위:
    1. 등록부에 이미 기록된 보정 하중
    2. 시험기의 선형 보정계수: load * factor_m + factor_c
    3. (deprecated) 고정 배율 load * legacy_factor
    """
    if precomputed is not None:
        return precomputed
    raw = load or 0.0
    if machine is not None and getattr(machine, "factor_m", None) is not None:
        return raw * machine.factor_m + (getattr(machine, "factor_c", None) or 0.0)
    logger.warning(
        "No machine correction factor configured; applying legacy scalar %s (deprecated).", legacy_factor
    )
    return raw * legacy_factor


def compressive_strength(load_kn: Optional[float], area_mm2: Optional[float]) -> float:
    """
    (load_kN × 1000) / area_mm². 면적이 0이면 0.
    반올림하지 않은 값을 반환하며, 소수 1자리 반올림은 표시 단계에서만 합니다.
    """
    if not area_mm2 or area_mm2 <= 0:
        return 0.0
    return (load_kn or 0.0) * 1000 / area_mm2


def average_compressive_strength(strengths: Sequence[float]) -> str:
    """반올림 전 강도들의 평균을 소수 1자리 문자열로 반환합니다. 빈 배치는 '0.0'."""
    if not strengths:
        return "0.0"
    return format_fixed(sum(strengths) / len(strengths), 1)


def exceeds_repeatability(
    strengths: Sequence[float], threshold: float = DEFAULT_REPEATABILITY_THRESHOLD
) -> bool:
    """평균 대비 편차가 threshold(%)를 넘는 시편이 하나라도 있으면 True."""
    if len(strengths) < 2:
        return False
    mean = sum(strengths) / len(strengths)
    if mean == 0:
        return False
    return any(abs((value - mean) / mean) * 100 > threshold for value in strengths)


# =============================================================================
# 5. 인터로킹 블록 두께
# =============================================================================
def parse_thickness_mm(label: Optional[str]) -> Optional[int]:
    """'80 mm Plain' 형태의 라벨에서 첫 번째 정수를 추출합니다."""
    if not label:
        return None
    match = re.search(r"(\d+)", label)
    return int(match.group(1)) if match else None


def paver_thickness_correction_factor(label: Optional[str]) -> float:
    """두께(mm)와 모따기(Chamfered) 여부에 따른 보정계수. 표에 없으면 1.00."""
    thickness = parse_thickness_mm(label)
    if thickness not in _PAVER_THICKNESS_FACTORS:
        return 1.00
    plain, chamfered = _PAVER_THICKNESS_FACTORS[thickness]
    return chamfered if "chamfer" in label.lower() else plain


# =============================================================================
# 6. 시료 수량 문구
# =============================================================================
def sample_count_text(count: int) -> str:
    """1~10은 'One (01)' ~ 'Ten (10)', 그 외는 '<n> samples'."""
    if 1 <= count <= len(_COUNT_WORDS):
        return f"{_COUNT_WORDS[count - 1]} ({count:02d})"
    return f"{count} samples"


# =============================================================================
# 7. 측정값 검증 (strict / lenient)
# =============================================================================
_REQUIRED_FIELDS = {
    SpecimenShape.CUBE: ("length", "width", "height", "weight", "load"),
    SpecimenShape.CYLINDER: ("length", "width", "height", "weight", "load"),
    SpecimenShape.PAVER: ("weight", "load"),
    SpecimenShape.BRICK: ("length", "width", "height", "weight", "load"),
}


class MeasurementValidator:
    """
    누락된 측정값의 처리 정책입니다.

    - lenient (기본값): 누락 값은 0(큐브 치수는 공칭 치수)으로 간주하여 인증서를 그대로 렌더링합니다.
    - strict: 누락 값이 하나라도 있으면 MeasurementValidationError를 발생시킵니다.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def missing_fields(self, result: SampleTestResult, shape: SpecimenShape) -> List[str]:
        missing = [name for name in _REQUIRED_FIELDS[shape] if getattr(result, name) is None]
        # 하중은 보정 하중이 기록되어 있으면 충족된 것으로 봅니다.
        if "load" in missing and result.corrected_failure_load is not None:
            missing.remove("load")
        return missing

    def check(self, result: SampleTestResult, shape: SpecimenShape) -> None:
        missing = self.missing_fields(result, shape)
        if not missing:
            return
        if self.strict:
            raise MeasurementValidationError(result.sample_id or "?", missing)
        logger.debug("Sample %s rendered with default values for: %s", result.sample_id, ", ".join(missing))


# =============================================================================
# 8. 시편 1개의 파생 수치
# =============================================================================
def compute_specimen_metrics(
    result: SampleTestResult,
    shape: SpecimenShape,
    *,
    machine: Optional[Any] = None,
    paver_thickness: Optional[str] = None,
    pavers_per_square_metre: Optional[float] = None,
    validator: Optional[MeasurementValidator] = None,
    legacy_factor: float = DEFAULT_LEGACY_CORRECTION_FACTOR,
) -> SpecimenMetrics:
    """
    시편 1개의 원시 측정값을 형상별 공식에 따라 SpecimenMetrics로 변환합니다.
    압축강도는 보정 파괴하중으로 계산합니다.
    공칭 치수가 있는 형상(큐브)은 누락된 L/W/H를 공칭 치수로 채운 뒤 계산합니다.
    """
    shape = SpecimenShape(shape)
    (validator or MeasurementValidator()).check(result, shape)

    length, width, height = result.length, result.width, result.height
    nominal = get_descriptor(shape).nominal_dimensions
    if nominal is not None:
        length, width, height = (
            measured if measured is not None else default
            for measured, default in zip((length, width, height), nominal)
        )

    corrected = corrected_failure_load(
        result.load, machine, precomputed=result.corrected_failure_load, legacy_factor=legacy_factor
    )
    values: Dict[str, Any] = {
        "sample_id": result.sample_id or "",
        "length": length or 0.0,
        "width": width or 0.0,
        "height": height or 0.0,
        "weight": result.weight or 0.0,
        "load": result.load or 0.0,
        "corrected_load": corrected,
        "mode_of_failure": result.mode_of_failure,
    }

    if shape == SpecimenShape.PAVER:
        thickness = result.measured_thickness or height or parse_thickness_mm(paver_thickness) or 0.0
        area = paver_plan_area(result.calculated_area, pavers_per_square_metre)
        values.update(
            height=thickness,
            area=area,
            density=paver_density(result.weight, thickness, area),
            correction_factor=paver_thickness_correction_factor(paver_thickness),
        )
    else:
        area = cross_sectional_area(length, width)
        if shape == SpecimenShape.BRICK:
            area = effective_area(area, (result.hole_a, result.hole_b, result.notch))
        values.update(
            area=area,
            density=cube_density(result.weight, length, width, height),
        )

    values["strength"] = compressive_strength(corrected, values["area"])
    return SpecimenMetrics(**values)
