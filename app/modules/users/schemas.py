# app/modules/users/schemas.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional

from app.core.auth.permissions import Role

# ==================== GESTIÓN DE USUARIOS ====================

class UserCreate(BaseModel):
    """Crear usuario (vendedor, supervisor, gerente, administrador)"""
    full_name: str = Field(..., min_length=2, description="Nombre completo")
    email: str = Field(..., min_length=3, description="Email único del usuario")
    password: str = Field(..., min_length=6, description="Contraseña (mínimo 6 caracteres)")
    codigo: Optional[str] = Field(None, max_length=50, description="Código de vendedor")
    role: Role = Field(..., description="Rol del usuario")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: str):
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Email inválido")
        return v

class UserUpdate(BaseModel):
    """Actualizar usuario; los campos omitidos no se modifican"""
    full_name: Optional[str] = Field(None, min_length=2)
    email: Optional[str] = Field(None, min_length=3)
    password: Optional[str] = Field(None, min_length=6, description="Nueva contraseña")
    codigo: Optional[str] = Field(None, max_length=50)
    role: Optional[Role] = None

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: Optional[str]):
        if v is None:
            return v
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Email inválido")
        return v

class UserResponse(BaseModel):
    """Usuario sin datos sensibles"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    email: str
    codigo: Optional[str] = None
    role: Role
