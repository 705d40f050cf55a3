# app/modules/catalog/service.py
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.modules.affiliations.repository import AffiliationRepository
from app.shared.database.models import Plan, Empresa
from .repository import CatalogRepository
from .schemas import (
    PlanCreate, PlanUpdate, PlanResponse,
    EmpresaCreate, EmpresaUpdate, EmpresaResponse
)

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Planes y empresas usados como opciones de las fichas
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = CatalogRepository(db)
        self.affiliations = AffiliationRepository(db)

    # ==================== PLANES ====================

    def list_planes(self) -> List[PlanResponse]:
        return [PlanResponse.model_validate(p) for p in self.repository.list_all(Plan)]

    def create_plan(self, data: PlanCreate) -> PlanResponse:
        try:
            plan = self.repository.create(Plan, data.model_dump())
        except IntegrityError:
            raise ConflictError(f"Ya existe un plan con el código '{data.value}'.")

        logger.info(f"📦 Plan '{plan.value}' creado")
        return PlanResponse.model_validate(plan)

    def update_plan(self, plan_id: int, data: PlanUpdate) -> PlanResponse:
        plan = self._get_or_404(Plan, plan_id, "Plan no encontrado.")
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        try:
            plan = self.repository.update(plan, update_data)
        except IntegrityError:
            raise ConflictError(
                "No se pudo actualizar el plan: el código ya existe o está asignado a fichas."
            )

        return PlanResponse.model_validate(plan)

    def delete_plan(self, plan_id: int) -> None:
        plan = self._get_or_404(Plan, plan_id, "Plan no encontrado.")
        value = plan.value

        try:
            self.repository.delete(plan)
        except IntegrityError:
            raise ConflictError(
                f"No se puede eliminar el plan '{value}' porque está asignado a una o más fichas."
            )

        logger.info(f"🗑️ Plan '{value}' eliminado")

    # ==================== EMPRESAS ====================

    def list_empresas(self) -> List[EmpresaResponse]:
        return [EmpresaResponse.model_validate(e) for e in self.repository.list_all(Empresa)]

    def create_empresa(self, data: EmpresaCreate) -> EmpresaResponse:
        try:
            empresa = self.repository.create(Empresa, data.model_dump())
        except IntegrityError:
            raise ConflictError(f"Ya existe una empresa con el código '{data.value}'.")

        logger.info(f"🏢 Empresa '{empresa.value}' creada")
        return EmpresaResponse.model_validate(empresa)

    def update_empresa(self, empresa_id: int, data: EmpresaUpdate) -> EmpresaResponse:
        empresa = self._get_or_404(Empresa, empresa_id, "Empresa no encontrada.")
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        # Las fichas guardan el código de la empresa, no su id
        new_value = update_data.get("value")
        if new_value and new_value != empresa.value and self.affiliations.exists_with_empresa(empresa.value):
            raise ConflictError(
                f"No se puede cambiar el código de la empresa '{empresa.value}' porque está asignada a fichas."
            )

        try:
            empresa = self.repository.update(empresa, update_data)
        except IntegrityError:
            raise ConflictError(f"Ya existe una empresa con el código '{new_value}'.")

        return EmpresaResponse.model_validate(empresa)

    def delete_empresa(self, empresa_id: int) -> None:
        empresa = self._get_or_404(Empresa, empresa_id, "Empresa no encontrada.")

        if self.affiliations.exists_with_empresa(empresa.value):
            raise ConflictError(
                f"No se puede eliminar la empresa '{empresa.value}' porque está asignada a una o más fichas."
            )

        self.repository.delete(empresa)
        logger.info(f"🗑️ Empresa '{empresa_id}' eliminada")

    # ==================== HELPERS ====================

    def _get_or_404(self, model, item_id: int, message: str):
        item = self.repository.get_by_id(model, item_id)
        if not item:
            raise NotFoundError(message)
        return item
