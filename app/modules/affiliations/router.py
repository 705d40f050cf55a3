# app/modules/affiliations/router.py
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import Optional

from app.config.database import get_db
from app.core.auth.dependencies import require_operation
from app.core.auth.permissions import Operation
from app.core.auth.schemas import CurrentUser
from app.shared.services.media_storage import MediaStorage, get_media_storage
from .service import AffiliationService
from .schemas import (
    AffiliationCreate, AffiliationUpdate, AffiliationCreatedResponse,
    AffiliationUpdatedResponse, AffiliationDetail, AffiliationListResponse,
    FotoResponse, PresentRequest, PresentResponse, StatusChangeRequest,
    StatusChangeResponse
)
from .workflow import AffiliationStatus

router = APIRouter(tags=["Affiliations - Fichas"])

# ==================== ALTA DE FICHAS ====================

@router.post("/submit-ficha", response_model=AffiliationCreatedResponse, status_code=status.HTTP_201_CREATED)
async def submit_ficha(
    payload: AffiliationCreate,
    current_user: CurrentUser = Depends(require_operation(Operation.AFFILIATION_CREATE)),
    db: Session = Depends(get_db)
):
    """
    Alta en un solo paso (compatibilidad con la app de campo).

    Crea la ficha y, si el formulario ya trae `numeroSolicitud`, la inserta
    Presentada. Un `numeroSolicitud` en blanco se rechaza sin guardar nada.
    """
    service = AffiliationService(db)
    affiliation = service.create_affiliation(
        payload,
        current_user,
        numero_solicitud=payload.form_data.get("numeroSolicitud")
    )

    return AffiliationCreatedResponse(
        id=affiliation.id,
        status=affiliation.status,
        message="Ficha guardada correctamente."
    )

@router.post("/affiliations", response_model=AffiliationCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_affiliation(
    payload: AffiliationCreate,
    current_user: CurrentUser = Depends(require_operation(Operation.AFFILIATION_CREATE)),
    db: Session = Depends(get_db)
):
    """
    Crear una ficha en borrador (estado Abierta)
    """
    service = AffiliationService(db)
    affiliation = service.create_affiliation(payload, current_user)

    return AffiliationCreatedResponse(
        id=affiliation.id,
        status=affiliation.status,
        message="Ficha guardada como borrador."
    )

@router.put("/affiliations/{affiliation_id}", response_model=AffiliationUpdatedResponse)
async def update_affiliation(
    affiliation_id: int,
    payload: AffiliationUpdate,
    current_user: CurrentUser = Depends(require_operation(Operation.AFFILIATION_UPDATE)),
    db: Session = Depends(get_db)
):
    """
    Editar una ficha mientras está Abierta.

    Un vendedor solo puede editar sus propias fichas.
    """
    service = AffiliationService(db)
    service.update_affiliation(affiliation_id, payload, current_user)

    return AffiliationUpdatedResponse(id=affiliation_id, message="Ficha actualizada correctamente.")

# ==================== CICLO DE VIDA ====================

@router.put("/affiliations/{affiliation_id}/present", response_model=PresentResponse)
async def present_affiliation(
    affiliation_id: int,
    payload: PresentRequest,
    current_user: CurrentUser = Depends(require_operation(Operation.AFFILIATION_SUBMIT)),
    db: Session = Depends(get_db)
):
    """
    Presentar una ficha Abierta con su número de solicitud
    """
    service = AffiliationService(db)
    numero = service.submit_affiliation(affiliation_id, payload.numero_solicitud, current_user)

    return PresentResponse(
        id=affiliation_id,
        status=AffiliationStatus.PRESENTADO,
        numero_solicitud=numero,
        message="Ficha presentada correctamente."
    )

@router.put("/affiliations/{affiliation_id}/status", response_model=StatusChangeResponse)
async def change_affiliation_status(
    affiliation_id: int,
    payload: StatusChangeRequest,
    current_user: CurrentUser = Depends(require_operation(Operation.AFFILIATION_CHANGE_STATUS)),
    db: Session = Depends(get_db)
):
    """
    Aprobar o rechazar una ficha Presentada.

    El rechazo requiere `motivo`.
    """
    service = AffiliationService(db)
    return service.change_status(affiliation_id, payload.new_status, payload.motivo, current_user)

# ==================== CONSULTAS ====================

@router.get("/affiliations", response_model=AffiliationListResponse)
async def list_affiliations(
    page: int = Query(1, ge=1, description="Página (desde 1)"),
    rows_per_page: int = Query(0, ge=0, alias="rowsPerPage", description="Filas por página, 0 = todas"),
    filter: Optional[str] = Query(None, description="Búsqueda por titular, DNI, plan o vendedor"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="name, plan, total, status, vendor, createdAt"),
    descending: Optional[bool] = Query(None, description="Orden descendente"),
    current_user: CurrentUser = Depends(require_operation(Operation.AFFILIATION_READ)),
    db: Session = Depends(get_db)
):
    """
    Listado paginado de fichas. Los vendedores solo ven las propias.
    """
    service = AffiliationService(db)
    return service.list_affiliations(
        viewer=current_user,
        search=filter,
        sort_by=sort_by,
        descending=descending,
        page=page,
        rows_per_page=rows_per_page
    )

@router.get("/affiliations/{affiliation_id}", response_model=AffiliationDetail)
async def get_affiliation_detail(
    affiliation_id: int,
    current_user: CurrentUser = Depends(require_operation(Operation.AFFILIATION_READ)),
    db: Session = Depends(get_db),
    storage: MediaStorage = Depends(get_media_storage)
):
    """
    Detalle completo de una ficha con URLs firmadas de sus fotos
    """
    service = AffiliationService(db)
    return service.get_affiliation_detail(affiliation_id, current_user, storage)

@router.get("/affiliations/{affiliation_id}/pdf")
async def download_affiliation_pdf(
    affiliation_id: int,
    current_user: CurrentUser = Depends(require_operation(Operation.AFFILIATION_PDF)),
    db: Session = Depends(get_db)
):
    """
    Descargar la ficha en PDF
    """
    service = AffiliationService(db)
    content = service.render_pdf(affiliation_id, current_user)

    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="ficha-{affiliation_id}.pdf"'}
    )

# ==================== FOTOS ====================

@router.post("/affiliations/{affiliation_id}/fotos", response_model=FotoResponse, status_code=status.HTTP_201_CREATED)
async def upload_affiliation_foto(
    affiliation_id: int,
    foto: UploadFile = File(..., description="Imagen a adjuntar"),
    descripcion: Optional[str] = Form(None, description="Descripción de la foto"),
    current_user: CurrentUser = Depends(require_operation(Operation.AFFILIATION_UPLOAD_PHOTO)),
    db: Session = Depends(get_db),
    storage: MediaStorage = Depends(get_media_storage)
):
    """
    Adjuntar una foto (DNI, recibo, etc.) a una ficha
    """
    service = AffiliationService(db)
    return await service.upload_foto(affiliation_id, foto, descripcion, current_user, storage)
