# app/modules/catalog/router.py
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from app.core.auth.dependencies import require_operation
from app.core.auth.permissions import Operation
from app.core.auth.schemas import CurrentUser
from .service import CatalogService
from .schemas import (
    PlanCreate, PlanUpdate, PlanResponse,
    EmpresaCreate, EmpresaUpdate, EmpresaResponse
)

router = APIRouter(tags=["Catalog - Planes y Empresas"])

# ==================== PLANES ====================

@router.get("/planes", response_model=List[PlanResponse])
async def list_planes(
    current_user: CurrentUser = Depends(require_operation(Operation.CATALOG_READ)),
    db: Session = Depends(get_db)
):
    """Planes ordenados por nombre"""
    return CatalogService(db).list_planes()

@router.post("/planes", response_model=PlanResponse, status_code=status.HTTP_201_CREATED)
async def create_plan(
    plan_data: PlanCreate,
    current_user: CurrentUser = Depends(require_operation(Operation.CATALOG_WRITE)),
    db: Session = Depends(get_db)
):
    return CatalogService(db).create_plan(plan_data)

@router.put("/planes/{plan_id}", response_model=PlanResponse)
async def update_plan(
    plan_id: int,
    plan_data: PlanUpdate,
    current_user: CurrentUser = Depends(require_operation(Operation.CATALOG_WRITE)),
    db: Session = Depends(get_db)
):
    return CatalogService(db).update_plan(plan_id, plan_data)

@router.delete("/planes/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plan(
    plan_id: int,
    current_user: CurrentUser = Depends(require_operation(Operation.CATALOG_WRITE)),
    db: Session = Depends(get_db)
):
    """
    Eliminar un plan. Falla con 409 si alguna ficha lo usa.
    """
    CatalogService(db).delete_plan(plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# ==================== EMPRESAS ====================

@router.get("/empresas", response_model=List[EmpresaResponse])
async def list_empresas(
    current_user: CurrentUser = Depends(require_operation(Operation.CATALOG_READ)),
    db: Session = Depends(get_db)
):
    """Empresas ordenadas por nombre"""
    return CatalogService(db).list_empresas()

@router.post("/empresas", response_model=EmpresaResponse, status_code=status.HTTP_201_CREATED)
async def create_empresa(
    empresa_data: EmpresaCreate,
    current_user: CurrentUser = Depends(require_operation(Operation.CATALOG_WRITE)),
    db: Session = Depends(get_db)
):
    return CatalogService(db).create_empresa(empresa_data)

@router.put("/empresas/{empresa_id}", response_model=EmpresaResponse)
async def update_empresa(
    empresa_id: int,
    empresa_data: EmpresaUpdate,
    current_user: CurrentUser = Depends(require_operation(Operation.CATALOG_WRITE)),
    db: Session = Depends(get_db)
):
    return CatalogService(db).update_empresa(empresa_id, empresa_data)

@router.delete("/empresas/{empresa_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_empresa(
    empresa_id: int,
    current_user: CurrentUser = Depends(require_operation(Operation.CATALOG_WRITE)),
    db: Session = Depends(get_db)
):
    """
    Eliminar una empresa. Falla con 409 si alguna ficha la referencia.
    """
    CatalogService(db).delete_empresa(empresa_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
