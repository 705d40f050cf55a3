# app/core/auth/dependencies.py
from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.exceptions import ForbiddenError, UnauthenticatedError
from .permissions import Operation, is_allowed
from .schemas import CurrentUser
from .security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> CurrentUser:
    """Resolver la identidad del request a partir del header Authorization"""
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError()
    current_user = decode_access_token(credentials.credentials)
    # El middleware de logging lo lee al terminar el request
    request.state.current_user = current_user
    return current_user


def require_operation(operation: Operation) -> Callable:
    """
    Dependency que exige que el rol del usuario tenga permitida la operación
    """
    async def checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not is_allowed(current_user.role, operation):
            raise ForbiddenError()
        return current_user

    return checker
