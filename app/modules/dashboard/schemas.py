# app/modules/dashboard/schemas.py
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.modules.affiliations.workflow import AffiliationStatus


class DashboardBaseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class DashboardRequest(DashboardBaseModel):
    start_date: Optional[date] = Field(None, description="Fecha inicial (inclusive)")
    end_date: Optional[date] = Field(None, description="Fecha final (inclusive)")
    selected_vendor: Optional[str] = Field(None, description="Nombre completo del vendedor")
    selected_plan: Optional[str] = Field(None, description="Código de plan")
    selected_medio_pago: Optional[str] = Field(None, description="Medio de pago (formData.medioPago)")
    selected_empresa: Optional[str] = Field(None, description="Código de empresa")


class RankingEntry(DashboardBaseModel):
    nombre: str
    ventas: int


class DailyCount(DashboardBaseModel):
    fecha: str
    cantidad: int


class DashboardKpis(DashboardBaseModel):
    total_fichas: int
    fichas_aprobadas: int
    fichas_rechazadas: int
    fichas_pendientes: int
    fichas_abiertas: int
    fichas_presentadas: int
    ventas_totales: float
    ticket_promedio: float
    tasa_aprobacion: str
    top_vendedor: Optional[RankingEntry] = None
    top_plan: Optional[RankingEntry] = None
    ventas_por_dia: List[DailyCount] = []


class DashboardLocation(DashboardBaseModel):
    id: int
    status: AffiliationStatus
    titular_nombre: Optional[str] = None
    vendedor: Optional[str] = None
    latitud: Optional[float] = None
    longitud: Optional[float] = None
    domicilio_latitud: Optional[float] = None
    domicilio_longitud: Optional[float] = None


class DashboardResponse(DashboardBaseModel):
    kpis: DashboardKpis
    locations: List[DashboardLocation]
