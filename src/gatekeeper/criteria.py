"""Criteria trees for conditional authorization decisions.

A MAYBE decision carries a boolean tree whose leaves are conditions the
policy could not resolve itself, because they depend on resource data only
the resource owner has. The caller resolves each leaf and folds the tree:

    {"allOf": [{"name": "is_owner", "resourceType": "doc", "params": ["u1"]},
               {"not": {"name": "is_archived", "resourceType": "doc", "params": []}}]}
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class PermissionCondition(BaseModel):
    """Atomic predicate resolved by the owner of ``resource_type``."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    name: str = Field(min_length=1)
    resource_type: str = Field(alias="resourceType", min_length=1)
    params: list[Any] = Field(default_factory=list)


class AllOf(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    all_of: list[PermissionCriteria] = Field(alias="allOf", min_length=1)


class AnyOf(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    any_of: list[PermissionCriteria] = Field(alias="anyOf", min_length=1)


class Not(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    not_: PermissionCriteria = Field(alias="not")


PermissionCriteria = Union[AllOf, AnyOf, Not, PermissionCondition]

AllOf.model_rebuild()
AnyOf.model_rebuild()
Not.model_rebuild()

_criteria_adapter: TypeAdapter[PermissionCriteria] = TypeAdapter(PermissionCriteria)


def parse_criteria(data: Any) -> PermissionCriteria:
    """Decode a wire-format tree. Raises pydantic.ValidationError on bad shape."""
    return _criteria_adapter.validate_python(data)


def criteria_to_json(criteria: PermissionCriteria) -> dict[str, Any]:
    return _criteria_adapter.dump_python(criteria, mode="json", by_alias=True)


def conditions_of(criteria: PermissionCriteria) -> Iterator[PermissionCondition]:
    """Yield every leaf condition in depth-first order."""
    if isinstance(criteria, PermissionCondition):
        yield criteria
    elif isinstance(criteria, AllOf):
        for child in criteria.all_of:
            yield from conditions_of(child)
    elif isinstance(criteria, AnyOf):
        for child in criteria.any_of:
            yield from conditions_of(child)
    elif isinstance(criteria, Not):
        yield from conditions_of(criteria.not_)
    else:
        raise TypeError(f"Not a criteria node: {type(criteria).__name__}")


def evaluate_criteria(
    criteria: PermissionCriteria,
    apply_condition: Callable[[PermissionCondition], bool],
) -> bool:
    """Fold a tree to a single bool, short-circuiting allOf/anyOf."""
    if isinstance(criteria, PermissionCondition):
        return bool(apply_condition(criteria))
    if isinstance(criteria, AllOf):
        return all(evaluate_criteria(c, apply_condition) for c in criteria.all_of)
    if isinstance(criteria, AnyOf):
        return any(evaluate_criteria(c, apply_condition) for c in criteria.any_of)
    if isinstance(criteria, Not):
        return not evaluate_criteria(criteria.not_, apply_condition)
    raise TypeError(f"Not a criteria node: {type(criteria).__name__}")


async def evaluate_criteria_async(
    criteria: PermissionCriteria,
    apply_condition: Callable[[PermissionCondition], Awaitable[bool]],
) -> bool:
    """Async counterpart of evaluate_criteria for predicates that fetch resource data.

    Children are awaited one at a time so a decided allOf/anyOf stops early.
    """
    if isinstance(criteria, PermissionCondition):
        return bool(await apply_condition(criteria))
    if isinstance(criteria, AllOf):
        for child in criteria.all_of:
            if not await evaluate_criteria_async(child, apply_condition):
                return False
        return True
    if isinstance(criteria, AnyOf):
        for child in criteria.any_of:
            if await evaluate_criteria_async(child, apply_condition):
                return True
        return False
    if isinstance(criteria, Not):
        return not await evaluate_criteria_async(criteria.not_, apply_condition)
    raise TypeError(f"Not a criteria node: {type(criteria).__name__}")
