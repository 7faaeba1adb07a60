"""Service discovery for the permission backend."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class DiscoveryApi(Protocol):
    """Resolves the base URL a plugin's API is served under."""

    async def get_base_url(self, plugin_id: str) -> str: ...


class StaticDiscovery:
    """Discovery backed by a fixed base URL.

    ``base_url`` may contain a ``{plugin_id}`` placeholder, e.g.
    ``http://backend:7007/api/{plugin_id}``.
    """

    def __init__(self, base_url: str) -> None:
        self._base_url = base_url.rstrip("/")

    async def get_base_url(self, plugin_id: str) -> str:
        if "{plugin_id}" in self._base_url:
            return self._base_url.replace("{plugin_id}", plugin_id)
        return self._base_url
