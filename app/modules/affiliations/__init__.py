# app/modules/affiliations/__init__.py
"""
Módulo de Fichas de Afiliación

- Alta y edición de fichas en borrador (Abierta)
- Presentación con número de solicitud (Abierta -> Presentado)
- Revisión de supervisores (Presentado -> Aprobado / Rechazado)
- Listado paginado, detalle, PDF y fotos adjuntas

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request/response
- workflow.py: Máquina de estados de la ficha
"""

from .router import router as affiliations_router
from .service import AffiliationService
from .repository import AffiliationRepository

__all__ = [
    "affiliations_router",
    "AffiliationService",
    "AffiliationRepository"
]
