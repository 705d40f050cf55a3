from .dependencies import get_current_user, require_operation
from .permissions import Operation, Role, is_allowed
from .schemas import CurrentUser

__all__ = [
    "get_current_user",
    "require_operation",
    "Operation",
    "Role",
    "is_allowed",
    "CurrentUser"
]
