# app/domains/usr/crud.py

"""
'usr' 도메인의 CRUD 로직을 담당하는 모듈입니다.
"""

from typing import Optional

from fastapi import HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from . import models, schemas


class CRUDUser(CRUDBase[models.User, schemas.UserCreate, schemas.UserUpdate]):
    def __init__(self):
        super().__init__(model=models.User)

    async def get_by_uid(self, db: AsyncSession, *, uid: str) -> Optional[models.User]:
        """ID 공급자의 uid로 사용자를 조회합니다."""
        return await self.get_by_attribute(db, attribute="uid", value=uid)

    async def create(self, db: AsyncSession, *, obj_in: schemas.UserCreate) -> models.User:
        if await self.get_by_uid(db, uid=obj_in.uid):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User with this uid already exists.")
        return await super().create(db, obj_in=obj_in)


user = CRUDUser()
