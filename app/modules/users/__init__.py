"""
Módulo de Usuarios - gestión de cuentas por parte del administrador
"""

from .router import router as users_router
from .service import UserService
from .repository import UserRepository

__all__ = [
    "users_router",
    "UserService",
    "UserRepository"
]
