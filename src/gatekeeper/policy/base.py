"""Contract for server-side authorization policies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from gatekeeper.client.models import AuthorizeRequest, AuthorizeResult, ConditionalDecision


class Identity(BaseModel):
    """The signed-in user a decision is made for."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(min_length=1)
    token: str | None = None


class DefinitivePolicyResult(BaseModel):
    """ALLOW or DENY; nothing left for the caller to evaluate."""

    model_config = ConfigDict(frozen=True)

    result: Literal[AuthorizeResult.allow, AuthorizeResult.deny]


class ConditionalPolicyResult(BaseModel):
    """MAYBE; the caller resolves ``conditions.criteria`` against the resource."""

    model_config = ConfigDict(frozen=True)

    result: Literal[AuthorizeResult.maybe] = AuthorizeResult.maybe
    conditions: ConditionalDecision


PolicyResult = Union[DefinitivePolicyResult, ConditionalPolicyResult]


class AuthorizationPolicy(ABC):
    """Decides a single authorization request.

    Implementations may await data sources while deciding. When the outcome
    depends on resource data the policy cannot see, return a
    ConditionalPolicyResult naming the resource type and the criteria to
    apply to it.
    """

    @abstractmethod
    async def handle(
        self,
        request: AuthorizeRequest,
        identity: Identity | None = None,
    ) -> PolicyResult:
        """Return exactly one definitive or conditional result."""
        ...
