from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    """
    Error de dominio con código HTTP asociado.

    `extra` se agrega al cuerpo JSON junto a `message`.
    """

    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Error interno del servidor."

    def __init__(
        self,
        message: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(
            status_code=status_code or self.status_code_default,
            detail=message or self.default_message,
            headers=headers
        )
        self.extra = extra or {}

    @property
    def message(self) -> str:
        return self.detail


class UnauthenticatedError(AppError):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    default_message = "Autenticación requerida."


class InvalidCredentialError(AppError):
    status_code_default = status.HTTP_403_FORBIDDEN
    default_message = "Token inválido o expirado."


class ForbiddenError(AppError):
    status_code_default = status.HTTP_403_FORBIDDEN
    default_message = "Acceso denegado: no tienes los permisos necesarios."


class ValidationError(AppError):
    status_code_default = status.HTTP_400_BAD_REQUEST
    default_message = "Datos inválidos."


class NotFoundError(AppError):
    status_code_default = status.HTTP_404_NOT_FOUND
    default_message = "Recurso no encontrado."


class ConflictError(AppError):
    status_code_default = status.HTTP_409_CONFLICT
    default_message = "Conflicto con el estado actual del recurso."


class InvalidStateError(ConflictError):
    """La ficha no está en el estado requerido por la operación"""


class InternalError(AppError):
    pass
