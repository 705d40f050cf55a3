# app/modules/affiliations/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional, Dict, Any, Union
from datetime import datetime

from .workflow import AffiliationStatus

# ==================== CLASE BASE ====================

class AffiliationBaseModel(BaseModel):
    """
    Clase base de los esquemas del módulo: atributos snake_case,
    JSON en camelCase.
    """
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel
    )

# ==================== REQUEST SCHEMAS ====================

class GeoLocation(AffiliationBaseModel):
    latitud: Optional[float] = Field(None, ge=-90, le=90, description="Latitud del lugar de venta")
    longitud: Optional[float] = Field(None, ge=-180, le=180, description="Longitud del lugar de venta")
    domicilio_latitud: Optional[float] = Field(None, ge=-90, le=90, description="Latitud del domicilio")
    domicilio_longitud: Optional[float] = Field(None, ge=-180, le=180, description="Longitud del domicilio")

class AffiliationCreate(GeoLocation):
    form_data: Dict[str, Any] = Field(..., description="Datos completos de la ficha")

class AffiliationUpdate(GeoLocation):
    form_data: Dict[str, Any] = Field(..., description="Datos completos de la ficha")

class PresentRequest(AffiliationBaseModel):
    numero_solicitud: Optional[Union[str, int]] = Field(None, description="Número de solicitud asignado")

class StatusChangeRequest(AffiliationBaseModel):
    new_status: Optional[str] = Field(None, description="Aprobado o Rechazado")
    motivo: Optional[str] = Field(None, description="Motivo del rechazo")

# ==================== RESPONSE SCHEMAS ====================

class AffiliationCreatedResponse(AffiliationBaseModel):
    id: int
    status: AffiliationStatus
    message: str

class AffiliationUpdatedResponse(AffiliationBaseModel):
    id: int
    message: str

class PresentResponse(AffiliationBaseModel):
    id: int
    status: AffiliationStatus
    numero_solicitud: str
    message: str

class StatusChangeResponse(AffiliationBaseModel):
    new_status: AffiliationStatus
    timestamp: datetime
    reason: Optional[str] = None

class AffiliationListItem(AffiliationBaseModel):
    id: int
    user_id: int
    titular_nombre: Optional[str] = None
    titular_dni: Optional[str] = None
    plan: Optional[str] = None
    total: Optional[float] = None
    status: AffiliationStatus
    fecha_creacion: datetime
    vendor_name: Optional[str] = None

class AffiliationListResponse(AffiliationBaseModel):
    rows: List[AffiliationListItem]
    total_count: int

class FotoResponse(AffiliationBaseModel):
    id: int
    descripcion: Optional[str] = None
    fecha_subida: datetime
    url: Optional[str] = None

class AffiliationDetail(AffiliationBaseModel):
    id: int
    user_id: int
    vendor_name: Optional[str] = None
    form_data: Dict[str, Any]
    titular_nombre: Optional[str] = None
    titular_dni: Optional[str] = None
    plan: Optional[str] = None
    plan_label: Optional[str] = None
    empresa: Optional[str] = None
    empresa_label: Optional[str] = None
    total: Optional[float] = None
    status: AffiliationStatus
    latitud: Optional[float] = None
    longitud: Optional[float] = None
    domicilio_latitud: Optional[float] = None
    domicilio_longitud: Optional[float] = None
    fecha_creacion: datetime
    status_change_user_id: Optional[int] = None
    status_change_user_name: Optional[str] = None
    status_change_timestamp: Optional[datetime] = None
    rechazo_motivo: Optional[str] = None
    fotos: List[FotoResponse] = []
