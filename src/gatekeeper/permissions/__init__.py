"""Permission definitions and the registry that holds them."""

from gatekeeper.permissions.models import CRUDAction, Permission, PermissionAttributes
from gatekeeper.permissions.registry import KeyNotFoundError, PermissionRegistry, create_permissions

__all__ = [
    "CRUDAction",
    "KeyNotFoundError",
    "Permission",
    "PermissionAttributes",
    "PermissionRegistry",
    "create_permissions",
]
