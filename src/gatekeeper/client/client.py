"""Client for the permission service's batch authorize endpoint."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from gatekeeper.client.discovery import DiscoveryApi, StaticDiscovery
from gatekeeper.client.errors import MalformedResponseError, RequestFailedError, TransportError
from gatekeeper.client.models import AuthorizeRequest, AuthorizeResponse, IdentifiedAuthorizeRequest

if TYPE_CHECKING:
    from gatekeeper.config.models import ServiceConfig

logger = logging.getLogger(__name__)

_AUTHORIZE_PATH = "/authorize"


class PermissionClient:
    """Submits permission checks and correlates the decisions back to them.

    Each ``authorize`` call is one self-contained POST: requests are tagged
    with fresh correlation ids, the response set is validated against those
    ids, and decisions come back in the order the requests went in. The
    client keeps no per-call state, so concurrent calls are safe.
    """

    def __init__(
        self,
        discovery: DiscoveryApi,
        *,
        plugin_id: str = "permission",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._discovery = discovery
        self._plugin_id = plugin_id
        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_config(
        cls, config: ServiceConfig, http_client: httpx.AsyncClient | None = None
    ) -> PermissionClient:
        return cls(
            StaticDiscovery(config.base_url),
            plugin_id=config.plugin_id,
            http_client=http_client,
            timeout=config.timeout,
        )

    async def __aenter__(self) -> PermissionClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    async def authorize(
        self,
        requests: Sequence[AuthorizeRequest],
        *,
        token: str | None = None,
    ) -> list[AuthorizeResponse]:
        """Check a batch of permissions; result[i] answers requests[i].

        Raises TransportError, RequestFailedError or MalformedResponseError.
        """
        # TODO: batch calls that land within a few ms of each other and dedupe identical requests.
        identified = [
            IdentifiedAuthorizeRequest(
                id=str(uuid.uuid4()),
                permission=request.permission,
                resource_ref=request.resource_ref,
            )
            for request in requests
        ]
        payload = await self._post(_AUTHORIZE_PATH, [r.to_json() for r in identified], token)
        by_id = self._validate_responses(identified, payload)
        return [by_id[request.id] for request in identified]

    # ── Internals ───────────────────────────────────────────────────

    def _validate_responses(
        self, requests: list[IdentifiedAuthorizeRequest], payload: Any
    ) -> dict[str, AuthorizeResponse]:
        """Decode the response set and require a decision for every request id.

        Elements that fail to decode are dropped. Ids nobody asked for are
        ignored rather than treated as a protocol violation.
        """
        elements = payload if isinstance(payload, list) else []
        accepted: dict[str, AuthorizeResponse] = {}
        for element in elements:
            try:
                response = AuthorizeResponse.model_validate(element)
            except ValidationError as e:
                logger.debug("Dropping malformed response element (%d errors)", e.error_count())
                continue
            accepted[response.id] = response

        missing = [r.id for r in requests if r.id not in accepted]
        if missing:
            logger.warning(
                "Permission service left %d of %d requests unanswered", len(missing), len(requests)
            )
            raise MalformedResponseError(missing)
        return accepted

    async def _url_for(self, path: str) -> str:
        base_url = await self._discovery.get_base_url(self._plugin_id)
        return f"{base_url.rstrip('/')}{path}"

    async def _post(self, path: str, body: list[dict[str, Any]], token: str | None) -> Any:
        url = await self._url_for(path)
        headers = {"content-type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug("POST %s with %d requests", url, len(body))
        try:
            response = await self._http.post(url, json=body, headers=headers)
        except httpx.TransportError as e:
            logger.warning("Permission service unreachable at %s: %s", url, e)
            raise TransportError(url, e) from e

        if not response.is_success:
            logger.warning("Permission service returned %d for %s", response.status_code, url)
            raise RequestFailedError(response.status_code, response.text, response.reason_phrase)

        try:
            return response.json()
        except ValueError:
            return None
