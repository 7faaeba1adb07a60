"""Fixed mapping of symbolic keys to permissions."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from gatekeeper.permissions.models import Permission


class KeyNotFoundError(KeyError):
    """Raised when a registry lookup uses a key that was never registered."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No permission registered under key '{key}'")

    def __str__(self) -> str:
        return self.args[0]


class PermissionRegistry:
    """Read-only registry built once from declarative definitions.

    Lookups by key go through ``get`` (or ``registry[key]`` /
    ``registry.KEY``) and raise ``KeyNotFoundError`` on a miss. Keys that
    would be shadowed by a registry method are rejected.
    """

    def __init__(self, permissions: Mapping[str, Permission]) -> None:
        reserved = sorted(k for k in permissions if k in _RESERVED_KEYS)
        if reserved:
            raise ValueError(f"Reserved registry key(s): {', '.join(reserved)}")
        self._by_key: dict[str, Permission] = dict(permissions)
        self._names = frozenset(p.name for p in self._by_key.values())

    def get(self, key: str) -> Permission:
        try:
            return self._by_key[key]
        except KeyError:
            raise KeyNotFoundError(key) from None

    def includes(self, permission: Permission) -> bool:
        """True if a registered permission has the same name."""
        return permission.name in self._names

    def keys(self) -> list[str]:
        return list(self._by_key)

    def values(self) -> list[Permission]:
        return list(self._by_key.values())

    def items(self) -> list[tuple[str, Permission]]:
        return list(self._by_key.items())

    def __getitem__(self, key: str) -> Permission:
        return self.get(key)

    def __getattr__(self, key: str) -> Permission:
        # Only called for names not found normally; keeps registry.TEST working.
        if key.startswith("_"):
            raise AttributeError(key)
        try:
            return self.get(key)
        except KeyNotFoundError:
            raise AttributeError(key) from None

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_key)

    def __len__(self) -> int:
        return len(self._by_key)

    def __repr__(self) -> str:
        return f"PermissionRegistry({sorted(self._by_key)!r})"


def create_permissions(
    definitions: Mapping[str, Permission | Mapping[str, Any]],
) -> PermissionRegistry:
    """Build a registry from ``{key: Permission | {name, attributes, resourceType?}}``."""
    permissions: dict[str, Permission] = {}
    for key, definition in definitions.items():
        if isinstance(definition, Permission):
            permissions[key] = definition
        else:
            permissions[key] = Permission.from_json(definition)
    return PermissionRegistry(permissions)


_RESERVED_KEYS = frozenset(name for name in vars(PermissionRegistry) if not name.startswith("_"))
