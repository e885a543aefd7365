# app/domains/corp/routers.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from . import schemas, crud


router = APIRouter(
    tags=["Laboratory Information (시험소 정보 관리)"],
    responses={404: {"description": "Not found"}},
)


@router.post("/laboratories", response_model=schemas.LaboratoryRead, status_code=201, summary="시험소 등록")
async def create_laboratory(
    *,
    session: AsyncSession = Depends(deps.get_db_session),
    lab_in: schemas.LaboratoryCreate,
):
    """
    인증서 머리말에 사용될 시험소 정보를 등록합니다.
    """
    return await crud.laboratory.create(db=session, obj_in=lab_in)


@router.get("/laboratories", response_model=List[schemas.LaboratoryRead], summary="시험소 목록 조회")
async def read_laboratories(
    skip: int = 0,
    limit: int = 100,
    session: AsyncSession = Depends(deps.get_db_session),
):
    return await crud.laboratory.get_multi(session, skip=skip, limit=limit)


@router.get("/laboratories/{lab_id}", response_model=schemas.LaboratoryRead, summary="시험소 정보 조회")
async def read_laboratory(
    lab_id: int,
    session: AsyncSession = Depends(deps.get_db_session),
):
    return await crud.laboratory.get_or_404(session, lab_id)


@router.patch("/laboratories/{lab_id}", response_model=schemas.LaboratoryRead, summary="시험소 정보 수정")
async def update_laboratory(
    lab_id: int,
    *,
    session: AsyncSession = Depends(deps.get_db_session),
    lab_in: schemas.LaboratoryUpdate,
):
    """
    시험소 정보를 수정합니다 (부분 업데이트 지원).
    """
    db_lab = await crud.laboratory.get_or_404(session, lab_id)
    if not lab_in.model_dump(exclude_unset=True):
        raise HTTPException(status_code=400, detail="수정할 데이터가 없습니다.")
    return await crud.laboratory.update(db=session, db_obj=db_lab, obj_in=lab_in)
