# app/domains/fms/routers.py

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from . import crud as fms_crud
from . import schemas as fms_schemas

router = APIRouter(
    tags=["Testing Machines (시험 장비 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 보정계수 시험기 (CorrectionFactorMachine) 라우트
# =============================================================================
@router.post("/machines", response_model=fms_schemas.CorrectionFactorMachineRead, status_code=201)
async def create_machine(
    machine_in: fms_schemas.CorrectionFactorMachineCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """압축강도 시험기와 보정계수를 등록합니다."""
    return await fms_crud.machine.create(db=db, obj_in=machine_in)


@router.get("/machines", response_model=List[fms_schemas.CorrectionFactorMachineRead])
async def read_machines(
    laboratory_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await fms_crud.machine.get_multi(db, skip=skip, limit=limit, laboratory_id=laboratory_id)


@router.get("/machines/{machine_id}", response_model=fms_schemas.CorrectionFactorMachineRead)
async def read_machine(machine_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await fms_crud.machine.get_or_404(db, machine_id)


@router.patch("/machines/{machine_id}", response_model=fms_schemas.CorrectionFactorMachineRead)
async def update_machine(
    machine_id: int,
    machine_in: fms_schemas.CorrectionFactorMachineUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """보정계수를 갱신합니다. (교정 이후)"""
    db_machine = await fms_crud.machine.get_or_404(db, machine_id)
    return await fms_crud.machine.update(db=db, db_obj=db_machine, obj_in=machine_in)
