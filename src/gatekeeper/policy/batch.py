"""Service side of the batch authorize exchange."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from gatekeeper.client.models import AuthorizeRequest, AuthorizeResponse, IdentifiedAuthorizeRequest
from gatekeeper.policy.base import (
    AuthorizationPolicy,
    ConditionalPolicyResult,
    DefinitivePolicyResult,
    Identity,
    PolicyResult,
)

logger = logging.getLogger(__name__)


class MalformedRequestError(ValueError):
    """The authorize payload was not an array of identified requests."""


def _to_response(request_id: str, result: PolicyResult) -> AuthorizeResponse:
    if isinstance(result, ConditionalPolicyResult):
        return AuthorizeResponse(id=request_id, result=result.result, conditions=result.conditions)
    if isinstance(result, DefinitivePolicyResult):
        return AuthorizeResponse(id=request_id, result=result.result)
    raise TypeError(f"Policy returned {type(result).__name__}, expected a PolicyResult")


async def evaluate_batch(
    policy: AuthorizationPolicy,
    payload: Any,
    identity: Identity | None = None,
) -> list[dict[str, Any]]:
    """Run ``policy`` over a decoded ``POST /authorize`` body.

    Returns the JSON-ready response array, one element per request, each
    echoing its request's id. Requests are decided concurrently.
    """
    if not isinstance(payload, list):
        raise MalformedRequestError("Authorize payload must be a JSON array")
    try:
        requests = [IdentifiedAuthorizeRequest.model_validate(item) for item in payload]
    except ValidationError as e:
        raise MalformedRequestError(f"Invalid authorize request: {e}") from e

    logger.debug("Evaluating %d authorize requests", len(requests))
    results = await asyncio.gather(
        *(
            policy.handle(
                AuthorizeRequest(permission=r.permission, resource_ref=r.resource_ref),
                identity,
            )
            for r in requests
        )
    )
    return [_to_response(r.id, result).to_json() for r, result in zip(requests, results)]
