"""Permission value objects."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CRUDAction(str, Enum):
    """The CRUD verb a permission guards."""

    create = "create"
    read = "read"
    update = "update"
    delete = "delete"


class PermissionAttributes(BaseModel):
    """Known attribute kinds a permission may carry.

    Both fields are optional; a permission typically sets at most one. Unknown
    keys are rejected so a typo in a declarative definition fails loudly.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    crud_action: CRUDAction | None = Field(default=None, alias="CRUD_ACTION")
    route_visibility: bool | None = Field(default=None, alias="ROUTE_VISIBILITY")


class Permission(BaseModel):
    """A named capability that can be checked for a subject/resource pair.

    Identity is the ``name``: two permissions with the same name are the same
    permission for every check, whatever their attributes say.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    attributes: PermissionAttributes = Field(default_factory=PermissionAttributes)
    resource_type: str | None = Field(default=None, alias="resourceType")

    def is_(self, other: Permission) -> bool:
        return self.name == other.name

    def supports_type(self, resource_type: str) -> bool:
        return self.resource_type == resource_type

    @property
    def is_route_visibility(self) -> bool:
        return bool(self.attributes.route_visibility)

    @property
    def is_create(self) -> bool:
        return self.attributes.crud_action is CRUDAction.create

    @property
    def is_read(self) -> bool:
        return self.attributes.crud_action is CRUDAction.read

    @property
    def is_update(self) -> bool:
        return self.attributes.crud_action is CRUDAction.update

    @property
    def is_delete(self) -> bool:
        return self.attributes.crud_action is CRUDAction.delete

    @classmethod
    def from_json(cls, definition: Mapping[str, Any]) -> Permission:
        """Build a permission from ``{name, attributes, resourceType?}``."""
        return cls.model_validate(dict(definition))

    def to_json(self) -> dict[str, Any]:
        """Wire form; unset attributes and a missing resource type are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
