"""gatekeeper - client for batched, correlated permission checks."""

from gatekeeper.client import (
    AuthorizeRequest,
    AuthorizeResponse,
    AuthorizeResult,
    MalformedResponseError,
    PermissionClient,
    PermissionServiceError,
    RequestFailedError,
    StaticDiscovery,
    TransportError,
)
from gatekeeper.config import GatekeeperConfig, load_config
from gatekeeper.criteria import AllOf, AnyOf, Not, PermissionCondition, evaluate_criteria
from gatekeeper.permissions import KeyNotFoundError, Permission, PermissionRegistry, create_permissions

__version__ = "0.1.0"

__all__ = [
    "AllOf",
    "AnyOf",
    "AuthorizeRequest",
    "AuthorizeResponse",
    "AuthorizeResult",
    "GatekeeperConfig",
    "KeyNotFoundError",
    "MalformedResponseError",
    "Not",
    "Permission",
    "PermissionClient",
    "PermissionCondition",
    "PermissionRegistry",
    "PermissionServiceError",
    "RequestFailedError",
    "StaticDiscovery",
    "TransportError",
    "create_permissions",
    "evaluate_criteria",
    "load_config",
]
