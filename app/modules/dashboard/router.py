# app/modules/dashboard/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import require_operation
from app.core.auth.permissions import Operation
from app.core.auth.schemas import CurrentUser
from .schemas import DashboardRequest, DashboardResponse
from .service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

@router.post("", response_model=DashboardResponse)
async def get_dashboard(
    filters: DashboardRequest,
    current_user: CurrentUser = Depends(require_operation(Operation.DASHBOARD_READ)),
    db: Session = Depends(get_db)
):
    """
    KPIs y mapa de fichas para un rango de fechas

    **Filtros opcionales:**
    - selectedVendor: nombre completo del vendedor
    - selectedPlan: código de plan
    - selectedMedioPago: medio de pago cargado en la ficha
    - selectedEmpresa: código de empresa
    """
    service = DashboardService(db)
    return service.get_dashboard(filters)
