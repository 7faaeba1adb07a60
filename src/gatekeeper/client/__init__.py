"""Permission service client and its wire records."""

from gatekeeper.client.client import PermissionClient
from gatekeeper.client.discovery import DiscoveryApi, StaticDiscovery
from gatekeeper.client.errors import (
    MalformedResponseError,
    PermissionServiceError,
    RequestFailedError,
    TransportError,
)
from gatekeeper.client.models import (
    AuthorizeRequest,
    AuthorizeResponse,
    AuthorizeResult,
    ConditionalDecision,
    IdentifiedAuthorizeRequest,
)

__all__ = [
    "AuthorizeRequest",
    "AuthorizeResponse",
    "AuthorizeResult",
    "ConditionalDecision",
    "DiscoveryApi",
    "IdentifiedAuthorizeRequest",
    "MalformedResponseError",
    "PermissionClient",
    "PermissionServiceError",
    "RequestFailedError",
    "StaticDiscovery",
    "TransportError",
]
