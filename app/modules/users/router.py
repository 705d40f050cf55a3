# app/modules/users/router.py
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from app.core.auth.dependencies import require_operation
from app.core.auth.permissions import Operation
from app.core.auth.schemas import CurrentUser
from .service import UserService
from .schemas import UserCreate, UserUpdate, UserResponse

router = APIRouter(prefix="/users", tags=["Users - Administrador"])

@router.get("", response_model=List[UserResponse])
async def list_users(
    current_user: CurrentUser = Depends(require_operation(Operation.USER_MANAGE)),
    db: Session = Depends(get_db)
):
    """
    Usuarios ordenados por nombre
    """
    service = UserService(db)
    return service.list_users()

@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    current_user: CurrentUser = Depends(require_operation(Operation.USER_MANAGE)),
    db: Session = Depends(get_db)
):
    """
    Crear usuario

    **Validaciones:**
    - Email único en el sistema (sin distinguir mayúsculas)
    - Código de vendedor único
    - Contraseña de al menos 6 caracteres, se guarda hasheada
    """
    service = UserService(db)
    return service.create_user(user_data, current_user)

@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    update_data: UserUpdate,
    current_user: CurrentUser = Depends(require_operation(Operation.USER_MANAGE)),
    db: Session = Depends(get_db)
):
    """
    Actualizar información de usuario
    """
    service = UserService(db)
    return service.update_user(user_id, update_data, current_user)

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    current_user: CurrentUser = Depends(require_operation(Operation.USER_MANAGE)),
    db: Session = Depends(get_db)
):
    service = UserService(db)
    service.delete_user(user_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
