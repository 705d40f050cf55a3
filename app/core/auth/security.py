# app/core/auth/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext

from app.config.settings import settings
from app.core.exceptions import InvalidCredentialError
from .permissions import Role
from .schemas import CurrentUser

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # Hash corrupto o con formato desconocido
        return False


def create_access_token(
    user_id: int,
    full_name: str,
    email: str,
    codigo: Optional[str],
    role: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    payload = {
        "userId": user_id,
        "name": full_name,
        "email": email,
        "codigo": codigo,
        "role": role,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> CurrentUser:
    """
    Decodificar el token y devolver la identidad que transporta.

    No consulta la base de datos: el token es la única fuente de identidad.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.ExpiredSignatureError:
        raise InvalidCredentialError("La sesión expiró. Vuelve a iniciar sesión.")
    except jwt.InvalidTokenError:
        raise InvalidCredentialError()

    user_id = payload.get("userId")
    role = payload.get("role")
    if not isinstance(user_id, int) or role not in Role._value2member_map_:
        raise InvalidCredentialError()

    return CurrentUser(
        id=user_id,
        full_name=payload.get("name") or "",
        email=payload.get("email") or "",
        codigo=payload.get("codigo"),
        role=Role(role)
    )
