# app/core/auth/permissions.py
from enum import Enum
from typing import Dict, FrozenSet


class Role(str, Enum):
    VENDEDOR = "VENDEDOR"
    SUPERVISOR = "SUPERVISOR"
    GERENTE = "GERENTE"
    ADMINISTRADOR = "ADMINISTRADOR"


class Operation(str, Enum):
    AFFILIATION_CREATE = "affiliation:create"
    AFFILIATION_UPDATE = "affiliation:update"
    AFFILIATION_SUBMIT = "affiliation:submit"
    AFFILIATION_CHANGE_STATUS = "affiliation:change_status"
    AFFILIATION_READ = "affiliation:read"
    AFFILIATION_PDF = "affiliation:pdf"
    AFFILIATION_UPLOAD_PHOTO = "affiliation:upload_photo"
    DASHBOARD_READ = "dashboard:read"
    USER_MANAGE = "user:manage"
    CATALOG_READ = "catalog:read"
    CATALOG_WRITE = "catalog:write"


FIELD_ROLES = frozenset({Role.VENDEDOR, Role.SUPERVISOR, Role.ADMINISTRADOR})
REVIEW_ROLES = frozenset({Role.SUPERVISOR, Role.ADMINISTRADOR})
REPORTING_ROLES = frozenset({Role.SUPERVISOR, Role.GERENTE, Role.ADMINISTRADOR})
ADMIN_ROLES = frozenset({Role.ADMINISTRADOR})
ALL_ROLES = frozenset(Role)

PERMISSIONS: Dict[Operation, FrozenSet[Role]] = {
    Operation.AFFILIATION_CREATE: FIELD_ROLES,
    Operation.AFFILIATION_UPDATE: FIELD_ROLES,
    Operation.AFFILIATION_SUBMIT: FIELD_ROLES,
    Operation.AFFILIATION_UPLOAD_PHOTO: FIELD_ROLES,
    Operation.AFFILIATION_CHANGE_STATUS: REVIEW_ROLES,
    Operation.AFFILIATION_READ: ALL_ROLES,
    Operation.AFFILIATION_PDF: ALL_ROLES,
    Operation.DASHBOARD_READ: REPORTING_ROLES,
    Operation.USER_MANAGE: ADMIN_ROLES,
    Operation.CATALOG_READ: ALL_ROLES,
    Operation.CATALOG_WRITE: ADMIN_ROLES,
}


def is_allowed(role: Role, operation: Operation) -> bool:
    """Operaciones sin entrada en la tabla quedan denegadas"""
    return role in PERMISSIONS.get(operation, frozenset())


def has_global_scope(role: Role) -> bool:
    """Los vendedores solo ven y editan sus propias fichas"""
    return role != Role.VENDEDOR
