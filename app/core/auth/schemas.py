# app/core/auth/schemas.py
from typing import Optional
from pydantic import BaseModel, Field

from .permissions import Role


class CurrentUser(BaseModel):
    """Identidad resuelta a partir del token"""
    id: int
    full_name: str
    email: str
    codigo: Optional[str] = None
    role: Role


class LoginRequest(BaseModel):
    email: Optional[str] = Field(None, description="Correo del usuario")
    password: Optional[str] = Field(None, description="Contraseña")


class LoginUser(BaseModel):
    name: str
    email: str
    codigo: Optional[str] = None
    role: Role


class LoginResponse(BaseModel):
    token: str
    user: LoginUser
