# app/domains/corp/crud.py

from app.core.crud_base import CRUDBase
from . import models, schemas


class CRUDLaboratory(CRUDBase[models.Laboratory, schemas.LaboratoryCreate, schemas.LaboratoryUpdate]):
    def __init__(self):
        super().__init__(model=models.Laboratory)


laboratory = CRUDLaboratory()
