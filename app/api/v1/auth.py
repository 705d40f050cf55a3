# app/api/v1/auth.py
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import get_current_user
from app.core.auth.schemas import CurrentUser, LoginRequest, LoginResponse, LoginUser
from app.core.auth.security import create_access_token, verify_password
from app.core.exceptions import InvalidCredentialError, ValidationError
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_CREDENTIALS = "Credenciales inválidas."

@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Iniciar sesión con email y contraseña; devuelve un token válido por 8 horas
    """
    if not credentials.email or not credentials.password:
        raise ValidationError("El correo y la contraseña son obligatorios.")

    user = UserRepository(db).get_by_email(credentials.email.strip())
    if not user or not verify_password(credentials.password, user.password_hash):
        logger.warning(f"🔒 Login fallido para {credentials.email}")
        raise InvalidCredentialError(INVALID_CREDENTIALS, status_code=status.HTTP_401_UNAUTHORIZED)

    token = create_access_token(
        user_id=user.id,
        full_name=user.full_name,
        email=user.email,
        codigo=user.codigo,
        role=user.role
    )

    logger.info(f"🔑 Login de usuario {user.id} ({user.role})")
    return LoginResponse(
        token=token,
        user=LoginUser(
            name=user.full_name,
            email=user.email,
            codigo=user.codigo,
            role=user.role
        )
    )

@router.get("/me", response_model=CurrentUser)
async def get_me(current_user: CurrentUser = Depends(get_current_user)):
    """Identidad contenida en el token actual"""
    return current_user
