# app/domains/fms/crud.py

"""
'fms' 도메인 (시험 장비)과 관련된 CRUD 로직을 담당하는 모듈입니다.
"""

from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fastapi import HTTPException, status

from app.core.crud_base import CRUDBase
from . import models as fms_models
from . import schemas as fms_schemas


# =============================================================================
# 1. 보정계수 시험기 (CorrectionFactorMachine) CRUD
# =============================================================================
class CRUDCorrectionFactorMachine(
    CRUDBase[
        fms_models.CorrectionFactorMachine,
        fms_schemas.CorrectionFactorMachineCreate,
        fms_schemas.CorrectionFactorMachineUpdate
    ]
):
    def __init__(self):
        super().__init__(model=fms_models.CorrectionFactorMachine)

    async def get_by_name(
        self, db: AsyncSession, *, name: str, laboratory_id: Optional[int] = None
    ) -> Optional[fms_models.CorrectionFactorMachine]:
        """시험기 이름으로 조회합니다. (시험소 범위 내)"""
        statement = select(self.model).where(self.model.name == name)
        if laboratory_id is not None:
            statement = statement.where(self.model.laboratory_id == laboratory_id)
        result = await db.execute(statement)
        return result.scalars().first()

    async def create(
        self, db: AsyncSession, *, obj_in: fms_schemas.CorrectionFactorMachineCreate
    ) -> fms_models.CorrectionFactorMachine:
        """같은 시험소 안에서 이름 중복을 확인하고 생성합니다."""
        if await self.get_by_name(db, name=obj_in.name, laboratory_id=obj_in.laboratory_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Machine with this name already exists in the laboratory."
            )
        return await super().create(db, obj_in=obj_in)


machine = CRUDCorrectionFactorMachine()
