# app/domains/lims/crud.py

"""
'lims' 도메인 (시료 접수 및 시험 등록부)과 관련된 CRUD 로직을 담당하는 모듈입니다.
"""

import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.domains.rpt.shapes import SpecimenShape
from . import models as lims_models
from . import schemas as lims_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 시료 접수증 (Receipt) CRUD
# =============================================================================
class CRUDReceipt(CRUDBase[lims_models.Receipt, lims_schemas.ReceiptCreate, lims_schemas.ReceiptUpdate]):
    def __init__(self):
        super().__init__(model=lims_models.Receipt)

    async def get_by_receipt_id(self, db: AsyncSession, *, receipt_id: str) -> Optional[lims_models.Receipt]:
        """접수 번호(예: REC-2024-001)로 접수증을 조회합니다."""
        return await self.get_by_attribute(db, attribute="receipt_id", value=receipt_id)

    async def create(self, db: AsyncSession, *, obj_in: lims_schemas.ReceiptCreate) -> lims_models.Receipt:
        """접수 번호 중복을 확인하고 생성합니다."""
        if await self.get_by_receipt_id(db, receipt_id=obj_in.receipt_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Receipt '{obj_in.receipt_id}' already exists."
            )
        return await super().create(db, obj_in=obj_in)


receipt = CRUDReceipt()


# =============================================================================
# 2. 시험 등록부 (RegisterEntry) CRUD
# =============================================================================
class CRUDRegisterEntry(
    CRUDBase[lims_models.RegisterEntry, lims_schemas.RegisterEntryCreate, lims_schemas.RegisterEntryUpdate]
):
    def __init__(self):
        super().__init__(model=lims_models.RegisterEntry)

    async def get_by_receipt(
        self,
        db: AsyncSession,
        *,
        receipt_id: str,
        shape: Optional[SpecimenShape] = None,
    ) -> List[lims_models.RegisterEntry]:
        """접수 번호에 속한 등록부 항목을 조회합니다. (형상 필터 선택)"""
        statement = select(self.model).where(self.model.receipt_id == receipt_id)
        if shape is not None:
            statement = statement.where(self.model.shape == shape)
        statement = statement.order_by(self.model.id)
        result = await db.execute(statement)
        return result.scalars().all()

    async def create(
        self, db: AsyncSession, *, obj_in: lims_schemas.RegisterEntryCreate
    ) -> lims_models.RegisterEntry:
        """
        등록부 항목을 생성합니다.
        sample_ids가 비어 있으면 results의 시편 번호로 채웁니다.
        """
        if not obj_in.sample_ids and obj_in.results:
            obj_in = obj_in.model_copy(update={"sample_ids": [r.sample_id for r in obj_in.results]})
        db_obj = await super().create(db, obj_in=obj_in)
        logger.info("Register entry %s created (%s, %d specimens)", db_obj.id, db_obj.shape, len(db_obj.results))
        return db_obj


register_entry = CRUDRegisterEntry()
