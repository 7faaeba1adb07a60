"""Tests for Permission and PermissionRegistry."""

import pytest
from pydantic import ValidationError

from gatekeeper.permissions import (
    CRUDAction,
    KeyNotFoundError,
    Permission,
    PermissionAttributes,
    PermissionRegistry,
    create_permissions,
)


# ── Permission ─────────────────────────────────────────────────────


class TestPermission:
    def test_is_compares_names_only(self):
        a = Permission(name="doc.read", attributes=PermissionAttributes(crud_action=CRUDAction.read))
        b = Permission(name="doc.read", attributes=PermissionAttributes(route_visibility=True), resource_type="x")
        assert a.is_(b)
        assert b.is_(a)

    def test_is_false_for_different_names(self):
        assert not Permission(name="a").is_(Permission(name="b"))

    def test_is_frozen(self):
        p = Permission(name="doc.read")
        with pytest.raises(ValidationError):
            p.name = "doc.write"

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Permission(name="")

    @pytest.mark.parametrize(
        "action, flag",
        [
            ("create", "is_create"),
            ("read", "is_read"),
            ("update", "is_update"),
            ("delete", "is_delete"),
        ],
    )
    def test_crud_predicates(self, action, flag):
        p = Permission.from_json({"name": "x", "attributes": {"CRUD_ACTION": action}})
        flags = {f: getattr(p, f) for f in ("is_create", "is_read", "is_update", "is_delete")}
        assert flags == {f: f == flag for f in flags}
        assert p.is_route_visibility is False

    def test_route_visibility(self):
        p = Permission.from_json({"name": "admin.route", "attributes": {"ROUTE_VISIBILITY": True}})
        assert p.is_route_visibility is True
        assert not p.is_read

    def test_no_attributes(self):
        p = Permission(name="bare")
        assert not any([p.is_create, p.is_read, p.is_update, p.is_delete, p.is_route_visibility])

    def test_unknown_attribute_rejected(self):
        with pytest.raises(ValidationError):
            Permission.from_json({"name": "x", "attributes": {"COLOR": "blue"}})

    def test_unknown_crud_action_rejected(self):
        with pytest.raises(ValidationError):
            Permission.from_json({"name": "x", "attributes": {"CRUD_ACTION": "destroy"}})

    def test_supports_type(self):
        p = Permission(name="doc.read", resource_type="doc")
        assert p.supports_type("doc")
        assert not p.supports_type("catalog-entity")
        assert not Permission(name="x").supports_type("doc")

    def test_to_json_is_sparse(self):
        p = Permission.from_json({"name": "doc.read", "attributes": {"CRUD_ACTION": "read"}})
        assert p.to_json() == {"name": "doc.read", "attributes": {"CRUD_ACTION": "read"}}

    def test_from_json_round_trip(self):
        definition = {"name": "doc.delete", "attributes": {"CRUD_ACTION": "delete"}, "resourceType": "doc"}
        assert Permission.from_json(definition).to_json() == definition


# ── PermissionRegistry ─────────────────────────────────────────────


class TestRegistry:
    def test_get(self, mock_permissions):
        p = mock_permissions.get("TEST")
        assert p.name == "test.permission"
        assert p.resource_type == "test-resource"

    def test_attribute_and_item_access(self, mock_permissions):
        assert mock_permissions.TEST is mock_permissions.get("TEST")
        assert mock_permissions["READ_DOC"] is mock_permissions.get("READ_DOC")

    def test_get_missing_key_raises(self, mock_permissions):
        with pytest.raises(KeyNotFoundError, match="NOPE") as exc_info:
            mock_permissions.get("NOPE")
        assert exc_info.value.key == "NOPE"
        assert isinstance(exc_info.value, KeyError)

    def test_item_access_missing_key_raises(self, mock_permissions):
        with pytest.raises(KeyNotFoundError):
            mock_permissions["NOPE"]

    def test_attribute_access_missing_key_raises_attribute_error(self, mock_permissions):
        with pytest.raises(AttributeError):
            mock_permissions.NOPE

    def test_includes_by_name(self, mock_permissions):
        lookalike = Permission(name="test.permission", attributes=PermissionAttributes(route_visibility=True))
        assert mock_permissions.includes(lookalike)
        assert not mock_permissions.includes(Permission(name="other.permission"))

    def test_container_protocol(self, mock_permissions):
        assert len(mock_permissions) == 3
        assert "TEST" in mock_permissions
        assert "NOPE" not in mock_permissions
        assert list(mock_permissions) == ["TEST", "READ_DOC", "DELETE_DOC"]
        assert [p.name for p in mock_permissions.values()] == ["test.permission", "doc.read", "doc.delete"]

    def test_accepts_permission_instances(self):
        registry = create_permissions({"A": Permission(name="a"), "B": {"name": "b"}})
        assert registry.get("A").name == "a"
        assert registry.get("B").attributes == PermissionAttributes()

    def test_invalid_definition_raises(self):
        with pytest.raises(ValidationError):
            create_permissions({"BAD": {"attributes": {}}})

    @pytest.mark.parametrize("key", ["get", "keys", "values", "items", "includes"])
    def test_rejects_keys_shadowed_by_methods(self, key):
        with pytest.raises(ValueError, match=rf"Reserved registry key\(s\): {key}"):
            create_permissions({key: {"name": "x"}})

    def test_empty_registry(self):
        registry = PermissionRegistry({})
        assert len(registry) == 0
        assert not registry.includes(Permission(name="x"))
