# app/modules/users/service.py
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.auth.schemas import CurrentUser
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from .repository import UserRepository
from .schemas import UserCreate, UserUpdate, UserResponse

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "El correo electrónico o el código ya existen."


class UserService:
    """
    Alta, baja y modificación de usuarios (solo administradores)
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = UserRepository(db)

    def list_users(self) -> List[UserResponse]:
        return [UserResponse.model_validate(u) for u in self.repository.get_all()]

    def create_user(self, user_data: UserCreate, admin: CurrentUser) -> UserResponse:
        data = user_data.model_dump(mode="json")
        data["codigo"] = (data.get("codigo") or "").strip() or None

        try:
            user = self.repository.create_user(data)
        except IntegrityError:
            raise ConflictError(DUPLICATE_MESSAGE)

        logger.info(f"👤 Usuario {user.id} ({user.role}) creado por administrador {admin.id}")
        return UserResponse.model_validate(user)

    def update_user(self, user_id: int, update_data: UserUpdate, admin: CurrentUser) -> UserResponse:
        user = self.repository.get_by_id(user_id)
        if not user:
            raise NotFoundError("Usuario no encontrado.")

        data = update_data.model_dump(mode="json", exclude_unset=True)
        if "codigo" in data:
            data["codigo"] = (data["codigo"] or "").strip() or None
            if data["codigo"] is None:
                # Permitir borrar el código explícitamente
                user.codigo = None

        try:
            user = self.repository.update_user(user, data)
        except IntegrityError:
            raise ConflictError(DUPLICATE_MESSAGE)

        logger.info(f"👤 Usuario {user.id} actualizado por administrador {admin.id}")
        return UserResponse.model_validate(user)

    def delete_user(self, user_id: int, admin: CurrentUser) -> None:
        if user_id == admin.id:
            raise ValidationError("No puedes eliminar tu propio usuario.")

        user = self.repository.get_by_id(user_id)
        if not user:
            raise NotFoundError("Usuario no encontrado.")

        try:
            self.repository.delete_user(user)
        except IntegrityError:
            raise ConflictError(
                "No se puede eliminar el usuario porque tiene fichas asociadas."
            )

        logger.info(f"🗑️ Usuario {user_id} eliminado por administrador {admin.id}")
