# app/domains/rpt/shapes.py

"""
시편 형상(SpecimenShape)별 인증서 스키마를 정의하는 모듈입니다.

제품 유형(큐브, 실린더, 인터로킹 블록, 벽돌/블록)마다 다른 것은
결과표 컬럼, 시험 조건 라벨, 시험 방법 문구, 비고(Remarks)뿐이므로
매퍼와 행 생성기는 이 디스크립터 하나로 모든 형상을 처리합니다.
"""

from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel


class SpecimenShape(str, Enum):
    CUBE = "cube"
    CYLINDER = "cylinder"
    PAVER = "paver"
    BRICK = "brick"


class ResultColumn(BaseModel):
    """결과표의 컬럼 하나. `key`는 SpecimenMetrics의 필드명입니다."""
    key: str
    header: str
    decimals: Optional[int] = None  # None이면 문자열 그대로 출력

    class Config:
        frozen = True


class ConditionField(BaseModel):
    """형상별 시험 조건 라벨과 등록부(RegisterEntry) 필드의 매핑."""
    label: str
    source: str
    default: str = "N/A"

    class Config:
        frozen = True


class ShapeDescriptor(BaseModel):
    shape: SpecimenShape
    noun: str                                   # 시료 수량 문장에 쓰이는 명사
    results_title: str
    nature_of_test: str
    test_method: str
    method_remark: str
    # 치수(L, W, H)가 누락된 시편에 대신 쓰는 공칭 치수 (mm). 큐브만 고정됩니다.
    nominal_dimensions: Optional[Tuple[float, float, float]] = None
    default_sample_type: str = "Not Specified"
    columns: Tuple[ResultColumn, ...]
    conditions: Tuple[ConditionField, ...]

    class Config:
        frozen = True


# =============================================================================
# 공통 상수
# =============================================================================
CONCRETE_TEST_METHOD = "BS EN 12390-3: 2019, BS EN 12390-1: 2019 & BS EN 12390-7: 2019"
PAVER_TEST_METHOD = "BS 6717: Part 1: 1993"

CONCRETE_METHOD_REMARK = (
    "The test was carried out according to BS EN 12390:2019, Testing of hardened concrete - "
    "Part 3: Compressive strength of test specimens"
)
PAVER_METHOD_REMARK = (
    "The test was carried out according to BS 6717: 1993, Precast concrete paving blocks - "
    "Part 1. Specification for paving blocks"
)

STANDARD_REMARKS_HEAD = (
    "This report relates only to the samples tested.",
    "All information about the specimen furnished by the client/ client representative.",
)
STANDARD_REMARKS_TAIL = (
    "All tested samples will be discarded immediately after the test.",
)
REPEATABILITY_REMARK = (
    "The average compressive strength value is not provided on this certificate because of the "
    "variability in the results which exceeds the repeatability condition (r = {threshold:g}%)"
)

_SOLID_COLUMNS = (
    ResultColumn(key="sample_id", header="SAMPLE NUMBER"),
    ResultColumn(key="length", header="L (mm)", decimals=1),
    ResultColumn(key="width", header="W (mm)", decimals=1),
    ResultColumn(key="height", header="H (mm)", decimals=1),
    ResultColumn(key="area", header="CROSS SECTIONAL AREA (mm²)", decimals=0),
    ResultColumn(key="weight", header="WEIGHT OF SAMPLE (kg)", decimals=2),
    ResultColumn(key="density", header="DENSITY OF SAMPLE (kg/m³)", decimals=0),
    ResultColumn(key="load", header="FAILURE LOAD (kN)", decimals=1),
    ResultColumn(key="corrected_load", header="CORRECTED FAILURE LOAD (kN)", decimals=1),
    ResultColumn(key="strength", header="COMPRESSIVE STRENGTH (N/mm²)", decimals=1),
)

_COMMON_CONDITIONS = (
    ConditionField(label="Area of use", source="area_of_use"),
)

_CONCRETE_CONDITIONS = (
    ConditionField(label="Class of Concrete", source="concrete_class"),
    ConditionField(label="Design compressive strength", source="design_strength"),
) + _COMMON_CONDITIONS


SHAPES: Dict[SpecimenShape, ShapeDescriptor] = {
    SpecimenShape.CUBE: ShapeDescriptor(
        shape=SpecimenShape.CUBE,
        noun="concrete cubes",
        results_title="TEST RESULTS FOR CONCRETE CUBES",
        nature_of_test="Compressive strength of test specimens",
        test_method=CONCRETE_TEST_METHOD,
        method_remark=CONCRETE_METHOD_REMARK,
        nominal_dimensions=(150.0, 150.0, 150.0),
        default_sample_type="Nominal size 150 x 150 x 150 mm",
        columns=_SOLID_COLUMNS,
        conditions=_CONCRETE_CONDITIONS,
    ),
    SpecimenShape.CYLINDER: ShapeDescriptor(
        shape=SpecimenShape.CYLINDER,
        noun="concrete cylinders",
        results_title="TEST RESULTS FOR CONCRETE CYLINDERS",
        nature_of_test="Compressive strength of test specimens",
        test_method=CONCRETE_TEST_METHOD,
        method_remark=CONCRETE_METHOD_REMARK,
        default_sample_type="Concrete Cylinders",
        columns=_SOLID_COLUMNS,
        conditions=_CONCRETE_CONDITIONS,
    ),
    SpecimenShape.PAVER: ShapeDescriptor(
        shape=SpecimenShape.PAVER,
        noun="concrete paving blocks",
        results_title="TEST RESULTS FOR CONCRETE PAVING BLOCKS",
        nature_of_test="Compressive strength of test specimens",
        test_method=PAVER_TEST_METHOD,
        method_remark=PAVER_METHOD_REMARK,
        default_sample_type="Concrete Paving Blocks",
        columns=(
            ResultColumn(key="sample_id", header="SAMPLE NUMBER"),
            ResultColumn(key="height", header="MEASURED THICKNESS H (mm)", decimals=1),
            ResultColumn(key="correction_factor", header="CORRECTION FACTOR", decimals=2),
            ResultColumn(key="area", header="COMPUTED PLAN AREA (mm²)", decimals=0),
            ResultColumn(key="weight", header="WEIGHT OF SAMPLE (kg)", decimals=2),
            ResultColumn(key="density", header="DENSITY OF SAMPLE (kg/m³)", decimals=0),
            ResultColumn(key="load", header="FAILURE LOAD (kN)", decimals=1),
            ResultColumn(key="corrected_load", header="CORRECTED FAILURE LOAD (kN)", decimals=1),
            ResultColumn(key="strength", header="COMPRESSIVE STRENGTH (N/mm²)", decimals=1),
        ),
        conditions=(
            ConditionField(label="Paver type/name", source="paver_type"),
            ConditionField(label="Paver thickness", source="paver_thickness"),
            ConditionField(label="Pavers per square metre", source="pavers_per_square_metre"),
        ) + _COMMON_CONDITIONS,
    ),
    SpecimenShape.BRICK: ShapeDescriptor(
        shape=SpecimenShape.BRICK,
        noun="bricks/blocks",
        results_title="TEST RESULTS FOR BRICKS AND BLOCKS",
        nature_of_test="Compressive strength of test specimens",
        test_method=CONCRETE_TEST_METHOD,
        method_remark=CONCRETE_METHOD_REMARK,
        columns=(
            ResultColumn(key="sample_id", header="SAMPLE NUMBER"),
            ResultColumn(key="length", header="L (mm)", decimals=1),
            ResultColumn(key="width", header="W (mm)", decimals=1),
            ResultColumn(key="height", header="H (mm)", decimals=1),
            ResultColumn(key="area", header="EFFECTIVE AREA (mm²)", decimals=0),
            ResultColumn(key="weight", header="WEIGHT OF SAMPLE (kg)", decimals=2),
            ResultColumn(key="density", header="DENSITY OF SAMPLE (kg/m³)", decimals=0),
            ResultColumn(key="load", header="FAILURE LOAD (kN)", decimals=1),
            ResultColumn(key="corrected_load", header="CORRECTED FAILURE LOAD (kN)", decimals=1),
            ResultColumn(key="strength", header="COMPRESSIVE STRENGTH (N/mm²)", decimals=1),
        ),
        conditions=(
            ConditionField(label="Brick / Block type", source="brick_type"),
            ConditionField(label="Mode of compaction", source="mode_of_compaction"),
        ) + _COMMON_CONDITIONS,
    ),
}


def get_descriptor(shape: SpecimenShape) -> ShapeDescriptor:
    return SHAPES[SpecimenShape(shape)]


def standard_remarks(descriptor: ShapeDescriptor) -> Tuple[str, ...]:
    """형상별 표준 비고 문구 (반복성 비고 제외)."""
    return STANDARD_REMARKS_HEAD + (descriptor.method_remark,) + STANDARD_REMARKS_TAIL
