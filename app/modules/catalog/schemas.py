# app/modules/catalog/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional


class CatalogBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel
    )

# ==================== PLANES ====================

class PlanCreate(CatalogBaseModel):
    value: str = Field(..., min_length=1, max_length=100, description="Código único del plan")
    label: str = Field(..., min_length=1, max_length=255, description="Nombre visible")
    tipo: Optional[str] = Field(None, max_length=100, description="Categoría del plan")
    titulo: Optional[str] = Field(None, max_length=255)
    importe_grupo_familiar: Optional[float] = Field(None, ge=0)
    importe_individual: Optional[float] = Field(None, ge=0)
    importe_adherente: Optional[float] = Field(None, ge=0)

class PlanUpdate(CatalogBaseModel):
    value: Optional[str] = Field(None, min_length=1, max_length=100)
    label: Optional[str] = Field(None, min_length=1, max_length=255)
    tipo: Optional[str] = Field(None, max_length=100)
    titulo: Optional[str] = Field(None, max_length=255)
    importe_grupo_familiar: Optional[float] = Field(None, ge=0)
    importe_individual: Optional[float] = Field(None, ge=0)
    importe_adherente: Optional[float] = Field(None, ge=0)

class PlanResponse(CatalogBaseModel):
    id: int
    value: str
    label: str
    tipo: Optional[str] = None
    titulo: Optional[str] = None
    importe_grupo_familiar: Optional[float] = None
    importe_individual: Optional[float] = None
    importe_adherente: Optional[float] = None

# ==================== EMPRESAS ====================

class EmpresaCreate(CatalogBaseModel):
    value: str = Field(..., min_length=1, max_length=100, description="Código único de la empresa")
    label: str = Field(..., min_length=1, max_length=255, description="Razón social / nombre visible")

class EmpresaUpdate(CatalogBaseModel):
    value: Optional[str] = Field(None, min_length=1, max_length=100)
    label: Optional[str] = Field(None, min_length=1, max_length=255)

class EmpresaResponse(CatalogBaseModel):
    id: int
    value: str
    label: str
