"""Wire records exchanged with the permission service."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, model_validator

from gatekeeper.criteria import PermissionCriteria
from gatekeeper.permissions.models import Permission


class AuthorizeResult(str, Enum):
    """Outcome of a single permission check."""

    allow = "ALLOW"
    deny = "DENY"
    maybe = "MAYBE"


DEFINITIVE_RESULTS = frozenset({AuthorizeResult.allow, AuthorizeResult.deny})


class AuthorizeRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    permission: Permission
    resource_ref: str | None = Field(default=None, alias="resourceRef")


class IdentifiedAuthorizeRequest(AuthorizeRequest):
    """A request tagged with the correlation id the client assigned to it."""

    id: str = Field(min_length=1)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ConditionalDecision(BaseModel):
    """Criteria the caller must evaluate against a resource of ``resource_type``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    plugin_id: str = Field(alias="pluginId", min_length=1)
    resource_type: str = Field(alias="resourceType", min_length=1)
    criteria: PermissionCriteria


class AuthorizeResponse(BaseModel):
    """One decision, correlated to its request by ``id``.

    ``conditions`` is present exactly when ``result`` is MAYBE; anything else
    fails validation and the element is treated as missing.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: StrictStr
    result: AuthorizeResult
    conditions: ConditionalDecision | None = None

    @model_validator(mode="after")
    def _conditions_match_result(self) -> AuthorizeResponse:
        if self.result is AuthorizeResult.maybe and self.conditions is None:
            raise ValueError("MAYBE result requires conditions")
        if self.result in DEFINITIVE_RESULTS and self.conditions is not None:
            raise ValueError(f"{self.result.value} result must not carry conditions")
        return self

    @property
    def is_definitive(self) -> bool:
        return self.result in DEFINITIVE_RESULTS

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
