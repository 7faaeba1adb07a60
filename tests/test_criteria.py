"""Tests for criteria trees: decoding, traversal, evaluation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from gatekeeper.criteria import (
    AllOf,
    AnyOf,
    Not,
    PermissionCondition,
    conditions_of,
    criteria_to_json,
    evaluate_criteria,
    evaluate_criteria_async,
    parse_criteria,
)

OWNER = PermissionCondition(name="is_owner", resource_type="doc", params=["user:alice"])
ARCHIVED = PermissionCondition(name="is_archived", resource_type="doc")
PUBLIC = PermissionCondition(name="is_public", resource_type="doc")

TREE_JSON = {
    "anyOf": [
        {"name": "is_public", "resourceType": "doc", "params": []},
        {
            "allOf": [
                {"name": "is_owner", "resourceType": "doc", "params": ["user:alice"]},
                {"not": {"name": "is_archived", "resourceType": "doc", "params": []}},
            ]
        },
    ]
}


def _facts(**values):
    """Predicate resolving conditions by name, recording what it was asked."""
    asked = []

    def apply(condition: PermissionCondition) -> bool:
        asked.append(condition.name)
        return values[condition.name]

    return apply, asked


class TestDecoding:
    def test_parse_nested_tree(self):
        tree = parse_criteria(TREE_JSON)
        assert tree == AnyOf(any_of=[PUBLIC, AllOf(all_of=[OWNER, Not(not_=ARCHIVED)])])

    def test_to_json(self):
        tree = AnyOf(any_of=[PUBLIC, AllOf(all_of=[OWNER, Not(not_=ARCHIVED)])])
        assert criteria_to_json(tree) == TREE_JSON

    def test_bare_condition(self):
        assert parse_criteria({"name": "is_owner", "resourceType": "doc", "params": ["user:alice"]}) == OWNER

    @pytest.mark.parametrize(
        "data",
        [
            {"allOf": []},
            {"anyOf": []},
            {"not": None},
            {"name": "x"},
            {"name": "", "resourceType": "doc"},
            {"allOf": [{"name": "x", "resourceType": "doc"}], "anyOf": []},
            {"or": [{"name": "x", "resourceType": "doc"}]},
            "is_owner",
        ],
    )
    def test_rejects_malformed(self, data):
        with pytest.raises(ValidationError):
            parse_criteria(data)


class TestTraversal:
    def test_conditions_of_in_depth_first_order(self):
        tree = parse_criteria(TREE_JSON)
        assert [c.name for c in conditions_of(tree)] == ["is_public", "is_owner", "is_archived"]

    def test_conditions_of_leaf(self):
        assert list(conditions_of(OWNER)) == [OWNER]


class TestEvaluate:
    def test_owner_of_live_doc(self):
        apply, _ = _facts(is_public=False, is_owner=True, is_archived=False)
        assert evaluate_criteria(parse_criteria(TREE_JSON), apply) is True

    def test_owner_of_archived_doc(self):
        apply, _ = _facts(is_public=False, is_owner=True, is_archived=True)
        assert evaluate_criteria(parse_criteria(TREE_JSON), apply) is False

    def test_any_of_short_circuits(self):
        apply, asked = _facts(is_public=True, is_owner=True, is_archived=False)
        assert evaluate_criteria(parse_criteria(TREE_JSON), apply) is True
        assert asked == ["is_public"]

    def test_all_of_short_circuits(self):
        apply, asked = _facts(is_owner=False, is_archived=False)
        assert evaluate_criteria(AllOf(all_of=[OWNER, Not(not_=ARCHIVED)]), apply) is False
        assert asked == ["is_owner"]

    def test_not(self):
        apply, _ = _facts(is_archived=False)
        assert evaluate_criteria(Not(not_=ARCHIVED), apply) is True

    def test_rejects_non_criteria(self):
        with pytest.raises(TypeError):
            evaluate_criteria({"allOf": []}, lambda c: True)

    @pytest.mark.asyncio
    async def test_async_evaluation(self):
        asked = []

        async def apply(condition):
            asked.append(condition.name)
            return {"is_public": False, "is_owner": True, "is_archived": False}[condition.name]

        assert await evaluate_criteria_async(parse_criteria(TREE_JSON), apply) is True
        assert asked == ["is_public", "is_owner", "is_archived"]

    @pytest.mark.asyncio
    async def test_async_all_of_short_circuits(self):
        asked = []

        async def apply(condition):
            asked.append(condition.name)
            return False

        assert await evaluate_criteria_async(AllOf(all_of=[OWNER, PUBLIC]), apply) is False
        assert asked == ["is_owner"]
