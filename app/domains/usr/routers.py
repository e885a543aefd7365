# app/domains/usr/routers.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from . import crud, schemas
from .models import UserRole

router = APIRouter(
    tags=["User Profiles (사용자 프로필 관리)"],
    responses={404: {"description": "Not found"}},
)


@router.post("/users", response_model=schemas.UserRead, status_code=201)
async def create_user_profile(
    user_in: schemas.UserCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    ID 공급자에서 인증된 사용자의 프로필(이름, 이메일, 서명)을 등록합니다.
    """
    return await crud.user.create(db, obj_in=user_in)


@router.get("/users", response_model=List[schemas.UserRead])
async def read_user_profiles(
    role: Optional[UserRole] = None,
    laboratory_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await crud.user.get_multi(db, skip=skip, limit=limit, role=role, laboratory_id=laboratory_id)


@router.get("/users/{uid}", response_model=schemas.UserRead)
async def read_user_profile(uid: str, db: AsyncSession = Depends(deps.get_db_session)):
    db_user = await crud.user.get_by_uid(db, uid=uid)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user


@router.patch("/users/{uid}", response_model=schemas.UserRead)
async def update_user_profile(
    uid: str,
    user_in: schemas.UserUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """서명 이미지 URL 등 프로필 정보를 수정합니다."""
    db_user = await crud.user.get_by_uid(db, uid=uid)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")
    return await crud.user.update(db, db_obj=db_user, obj_in=user_in)
